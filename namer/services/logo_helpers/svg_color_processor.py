# /namer/services/logo_helpers/svg_color_processor.py

"""
Recolors an SVG document with a four-color palette.

Colors found in `fill`, `stroke`, `stop-color` attributes and in `style`
declarations are ranked by relative luminance and mapped onto the palette
ranked the same way, so dark shapes stay dark and light shapes stay light.
"""

import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
ET.register_namespace("", SVG_NAMESPACE)
ET.register_namespace("xlink", XLINK_NAMESPACE)

COLOR_ATTRIBUTES = ("fill", "stroke", "stop-color")
IGNORED_VALUES = {"none", "transparent", "inherit", "currentcolor"}

CSS_COLORS = {
    "red": "#FF0000", "green": "#008000", "blue": "#0000FF", "black": "#000000",
    "white": "#FFFFFF", "yellow": "#FFFF00", "cyan": "#00FFFF", "magenta": "#FF00FF",
    "silver": "#C0C0C0", "gray": "#808080", "maroon": "#800000", "olive": "#808000",
    "lime": "#00FF00", "aqua": "#00FFFF", "teal": "#008080", "navy": "#000080",
    "fuchsia": "#FF00FF", "purple": "#800080", "orange": "#FFA500", "brown": "#A52A2A",
    "pink": "#FFC0CB",
}

_STYLE_COLOR = re.compile(r"(fill|stroke|stop-color)\s*:\s*([^;]+)", re.IGNORECASE)
_HEX6 = re.compile(r"^#([0-9a-f]{6})$", re.IGNORECASE)
_HEX3 = re.compile(r"^#([0-9a-f]{3})$", re.IGNORECASE)
_RGB = re.compile(r"^rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$", re.IGNORECASE)


def normalize_color(value: str) -> Optional[str]:
    """Returns `#RRGGBB` for a recognised color, or None for anything to leave alone."""
    color = (value or "").strip()
    lowered = color.lower()
    if not color or lowered in IGNORED_VALUES or lowered.startswith("url("):
        return None

    match = _HEX6.match(color)
    if match:
        return f"#{match.group(1).upper()}"
    match = _HEX3.match(color)
    if match:
        return "#" + "".join(ch * 2 for ch in match.group(1)).upper()
    match = _RGB.match(color)
    if match:
        r, g, b = (min(255, int(channel)) for channel in match.groups())
        return f"#{r:02X}{g:02X}{b:02X}"
    return CSS_COLORS.get(lowered)


def luminance(hex_color: str) -> float:
    hex_value = hex_color.lstrip("#")
    r, g, b = (int(hex_value[i:i + 2], 16) / 255 for i in (0, 2, 4))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def parse_svg(svg: str) -> ET.Element:
    """Parses and validates the document. Raises ValueError with a readable message."""
    if not svg or not svg.strip():
        raise ValueError("SVG content is empty")
    # Entity declarations are never needed for logos and enable expansion attacks.
    if re.search(r"<!(DOCTYPE|ENTITY)", svg, re.IGNORECASE):
        raise ValueError("SVG documents with DOCTYPE or ENTITY declarations are not supported")
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as e:
        raise ValueError(f"XML Error: {e}") from e
    if _local_name(root.tag) != "svg":
        raise ValueError("Invalid SVG: root element must be svg")
    return root


def detect_colors(root: ET.Element) -> List[str]:
    """Distinct normalised colors in document order."""
    found: List[str] = []

    def remember(raw: str) -> None:
        color = normalize_color(raw)
        if color and color not in found:
            found.append(color)

    for element in root.iter():
        for attribute in COLOR_ATTRIBUTES:
            if attribute in element.attrib:
                remember(element.attrib[attribute])
        style = element.attrib.get("style")
        if style:
            for _, value in _STYLE_COLOR.findall(style):
                remember(value)
    return found


def create_color_mapping(detected: List[str], palette: Dict[str, str]) -> Dict[str, str]:
    colors_sorted = sorted(detected, key=luminance)
    palette_sorted = sorted(
        (normalize_color(palette[key]) for key in ("primary", "secondary", "accent", "neutral")),
        key=luminance,
    )
    color_count = len(colors_sorted)
    palette_count = len(palette_sorted)

    if color_count == 0:
        return {}
    if color_count == 1:
        return {colors_sorted[0]: palette_sorted[0]}

    mapping = {}
    for i, color in enumerate(colors_sorted):
        if i == 0:
            index = 0
        elif i == color_count - 1:
            index = palette_count - 1
        else:
            index = min(int(round(i * (palette_count - 1) / (color_count - 1))), palette_count - 1)
        mapping[color] = palette_sorted[index]
    return mapping


def _replace_in_style(style: str, mapping: Dict[str, str]) -> str:
    def substitute(match: re.Match) -> str:
        color = normalize_color(match.group(2))
        if color and color in mapping:
            return f"{match.group(1).lower()}: {mapping[color]}"
        return match.group(0)

    return _STYLE_COLOR.sub(substitute, style)


def replace_colors(root: ET.Element, mapping: Dict[str, str]) -> None:
    for element in root.iter():
        for attribute in COLOR_ATTRIBUTES:
            if attribute in element.attrib:
                color = normalize_color(element.attrib[attribute])
                if color and color in mapping:
                    element.set(attribute, mapping[color])
        if "style" in element.attrib:
            element.set("style", _replace_in_style(element.attrib["style"], mapping))


def process_svg(svg: str, palette: Dict[str, str]) -> Dict:
    """
    Returns {"success": True, "svg": <recolored document>} or
    {"success": False, "errors": [...]}.
    """
    try:
        root = parse_svg(svg)
    except ValueError as e:
        return {"success": False, "errors": [str(e)]}

    mapping = create_color_mapping(detect_colors(root), palette)
    replace_colors(root, mapping)
    return {"success": True, "svg": ET.tostring(root, encoding="unicode")}
