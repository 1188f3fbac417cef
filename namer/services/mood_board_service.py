# /namer/services/mood_board_service.py

"""
Mood boards: owner-arranged canvases of generated logos.

Items keep a 1-based `position` (board order) and absolute pixel
placement. Adding a logo that is already on the board only moves it.
Applying a layout template rewrites every placement with the closed-form
positions from `mood_board_helpers.layouts`.
"""

import logging
import uuid
from typing import Dict, List, Optional

from ..core.exceptions import NotFoundError, ForbiddenError
from ..models.mood_board_model import (
    MoodBoardCreate, MoodBoardUpdate, MoodBoardItemsAdd, MoodBoardLayout,
)
from . import project_service
from .database_service import DatabaseService
from .mood_board_helpers import layouts

logger = logging.getLogger(__name__)

DEFAULT_PLACEMENT = {"x": 100, "y": 100, "width": 200, "height": 200, "rotation": 0}


def _get_owned_board(db: DatabaseService, board_id: str, user_id: Optional[str]):
    board = db.get_mood_board(board_id)
    if board is None:
        raise NotFoundError(f"Mood board {board_id} not found.")
    if board.user_id != user_id:
        raise ForbiddenError("You do not have access to this mood board.")
    return board


def _usable_logos(db: DatabaseService, logo_ids: List[int], user_id: Optional[str]) -> Dict[int, object]:
    """Logos the caller may pin; anything missing or foreign is reported as not found."""
    logos = {
        logo.id: logo
        for logo in db.get_logos_by_ids(logo_ids)
        if logo.logo_generation.user_id in (None, user_id)
    }
    missing = [logo_id for logo_id in logo_ids if logo_id not in logos]
    if missing:
        raise NotFoundError(f"Logos not found or not owned by you: {missing}")
    return logos


# --- Boards ---

def create_mood_board(db: DatabaseService, request: MoodBoardCreate, user_id: Optional[str]):
    if request.project_id:
        project_service.get_project(db, request.project_id, user_id)
    board = db.add_mood_board({
        "id": f"board_{uuid.uuid4().hex[:16]}",
        "user_id": user_id,
        "project_id": request.project_id,
        "name": request.name.strip(),
        "description": request.description,
        "layout_type": request.layout_type.value,
        "layout_config": request.layout_config.model_dump(),
    })
    logger.info("Created mood board %s for user %s.", board.id, user_id)
    return board


def list_mood_boards(db: DatabaseService, user_id: Optional[str], project_id: Optional[str] = None) -> List:
    return db.get_mood_boards_by_user(user_id, project_id)


def get_mood_board(db: DatabaseService, board_id: str, user_id: Optional[str]):
    return _get_owned_board(db, board_id, user_id)


def update_mood_board(db: DatabaseService, board_id: str, request: MoodBoardUpdate, user_id: Optional[str]):
    board = _get_owned_board(db, board_id, user_id)
    changes = request.model_dump(exclude_unset=True, mode="json")
    if "name" in changes:
        changes["name"] = changes["name"].strip()
    if "layout_config" in changes:
        changes["layout_config"] = {**(board.layout_config or {}), **changes["layout_config"]}
    for field, value in changes.items():
        setattr(board, field, value)
    return db.save_mood_board(board)


def delete_mood_board(db: DatabaseService, board_id: str, user_id: Optional[str]) -> bool:
    _get_owned_board(db, board_id, user_id)
    return db.delete_mood_board(board_id)


# --- Items ---

def _snapped(placement: Dict, layout_config: Dict) -> Dict:
    if not layout_config.get("snap_to_grid"):
        return placement
    grid_size = layout_config.get("grid_size") or 20
    for field in ("x", "y"):
        if placement.get(field) is not None:
            placement[field] = layouts.snap(placement[field], grid_size)
    return placement


def add_items(db: DatabaseService, board_id: str, request: MoodBoardItemsAdd, user_id: Optional[str]):
    board = _get_owned_board(db, board_id, user_id)
    _usable_logos(db, request.logo_ids, user_id)
    placements = {
        placement.logo_id: placement.model_dump(exclude_none=True, exclude={"logo_id"})
        for placement in request.placements
    }

    new_records = []
    next_position = board.item_count + 1
    for logo_id in dict.fromkeys(request.logo_ids):
        placement = _snapped(placements.get(logo_id, {}), board.layout_config or {})
        existing = board.item_for(logo_id)
        if existing is not None:
            existing.move_to(placement)
            if "notes" in placement:
                existing.notes = placement["notes"]
            continue
        new_records.append({
            "generated_logo_id": logo_id,
            "position": next_position,
            **DEFAULT_PLACEMENT,
            "z_index": next_position,
            **placement,
        })
        next_position += 1

    logger.info("Adding %d logos to mood board %s.", len(new_records), board_id)
    return db.add_mood_board_items(board, new_records)


def remove_items(db: DatabaseService, board_id: str, logo_ids: List[int], user_id: Optional[str]):
    board = _get_owned_board(db, board_id, user_id)
    return db.remove_mood_board_items(board, logo_ids)


def reorder_items(db: DatabaseService, board_id: str, logo_ids: List[int], user_id: Optional[str]):
    """Listed logos take positions 1..k in the given order; the rest follow in their old order."""
    board = _get_owned_board(db, board_id, user_id)
    on_board = {item.generated_logo_id for item in board.items}
    unknown = [logo_id for logo_id in logo_ids if logo_id not in on_board]
    if unknown:
        raise ValueError(f"Logos are not on this mood board: {unknown}")

    rank = {logo_id: index for index, logo_id in enumerate(dict.fromkeys(logo_ids))}
    ordered = sorted(board.items, key=lambda item: (rank.get(item.generated_logo_id, len(rank)), item.position))
    for position, item in enumerate(ordered, start=1):
        item.position = position
    return db.save_mood_board(board)


def apply_layout(db: DatabaseService, board_id: str, layout: MoodBoardLayout, user_id: Optional[str]):
    board = _get_owned_board(db, board_id, user_id)
    if not board.items:
        raise ValueError("Add some logos to the mood board first.")

    items = sorted(board.items, key=lambda item: item.position)
    for item, placement in zip(items, layouts.calculate_layout_positions(layout, len(items))):
        item.move_to(placement)
    board.layout_type = MoodBoardLayout(layout).value
    logger.info("Applied %s layout to mood board %s.", board.layout_type, board_id)
    return db.save_mood_board(board)
