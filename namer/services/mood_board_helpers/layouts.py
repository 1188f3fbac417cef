# /namer/services/mood_board_helpers/layouts.py

"""
Closed-form placements for the mood board layout templates.

Every function takes the number of items and returns one placement dict
per item, in board order, with pixel `x`, `y`, `width`, `height`, a
`rotation` in degrees and a 1-based `z_index`.
"""

import math
from typing import Dict, List

from ...models.mood_board_model import MoodBoardLayout

MARGIN = 50
TILE = 200
GAP = 20

COLLAGE_CENTER = (600, 400)
MASONRY_COLUMNS = 3
MASONRY_HEIGHTS = (200, 260, 320)

Placement = Dict[str, float]


def _placement(x, y, width, height, index, rotation=0) -> Placement:
    return {
        "x": round(x, 2),
        "y": round(y, 2),
        "width": width,
        "height": height,
        "rotation": rotation,
        "z_index": index + 1,
    }


def grid_positions(count: int) -> List[Placement]:
    """Square-ish grid, filled row by row."""
    if count <= 0:
        return []
    cols = math.ceil(math.sqrt(count))
    spacing = TILE + GAP
    return [
        _placement(MARGIN + (i % cols) * spacing, MARGIN + (i // cols) * spacing, TILE, TILE, i)
        for i in range(count)
    ]


def collage_positions(count: int) -> List[Placement]:
    """Overlapping ring around the board centre with a slight tilt per item."""
    center_x, center_y = COLLAGE_CENTER
    positions = []
    for i in range(count):
        angle = (i / count) * 2 * math.pi
        radius = 100 + (i % 3) * 80
        size = 180 + (i % 40)
        positions.append(_placement(
            center_x + math.cos(angle) * radius,
            center_y + math.sin(angle) * radius,
            size,
            size,
            i,
            rotation=(i % 5 - 2) * 15,
        ))
    return positions


def masonry_positions(count: int) -> List[Placement]:
    """Fixed-width columns; each item drops into the currently shortest column."""
    column_bottoms = [MARGIN] * MASONRY_COLUMNS
    positions = []
    for i in range(count):
        column = column_bottoms.index(min(column_bottoms))
        height = MASONRY_HEIGHTS[i % len(MASONRY_HEIGHTS)]
        positions.append(_placement(MARGIN + column * (TILE + GAP), column_bottoms[column], TILE, height, i))
        column_bottoms[column] += height + GAP
    return positions


def freeform_positions(count: int) -> List[Placement]:
    """Scattered but deterministic starting spots."""
    return [
        _placement(MARGIN + (i * 100) % 800, MARGIN + (i * 137) % 600, TILE, TILE, i)
        for i in range(count)
    ]


LAYOUTS = {
    MoodBoardLayout.GRID: grid_positions,
    MoodBoardLayout.COLLAGE: collage_positions,
    MoodBoardLayout.MASONRY: masonry_positions,
    MoodBoardLayout.FREEFORM: freeform_positions,
}


def calculate_layout_positions(layout, count: int) -> List[Placement]:
    return LAYOUTS[MoodBoardLayout(layout)](count)


def snap(value: float, grid_size: int) -> float:
    return round(value / grid_size) * grid_size
