# /tests/test_svg_color_processor.py

import pytest

from namer.services.logo_helpers import color_schemes
from namer.services.logo_helpers.svg_color_processor import (
    create_color_mapping, normalize_color, process_svg,
)

MONOCHROME = color_schemes.get_palette("monochrome")


@pytest.mark.parametrize("raw, expected", [
    ("#ff0000", "#FF0000"),
    ("#abc", "#AABBCC"),
    ("rgb(255, 128, 0)", "#FF8000"),
    ("Navy", "#000080"),
    ("none", None),
    ("currentColor", None),
    ("url(#gradient)", None),
    ("chartreuse", None),
])
def test_normalize_color(raw, expected):
    assert normalize_color(raw) == expected


def test_single_color_maps_to_darkest_palette_entry():
    assert create_color_mapping(["#FF0000"], MONOCHROME) == {"#FF0000": "#000000"}


def test_mapping_preserves_luminance_order():
    mapping = create_color_mapping(["#FFFFFF", "#000000", "#808080"], MONOCHROME)

    assert mapping["#000000"] == "#000000"
    assert mapping["#FFFFFF"] == "#FFFFFF"
    # middle index 1 of 3 -> round(1 * 3 / 2) = 2 -> third darkest palette color
    assert mapping["#808080"] == "#999999"


def test_process_svg_replaces_attributes_and_styles():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
        '<rect fill="#000000" width="10" height="10"/>'
        '<circle style="fill: white; stroke:#000" r="3"/>'
        '<path fill="none" d="M0 0"/>'
        '</svg>'
    )
    palette = color_schemes.get_palette("ocean_blue")

    result = process_svg(svg, palette)

    assert result["success"] is True
    out = result["svg"]
    assert 'fill="#003366"' in out
    assert "fill: #E6F2FF" in out
    assert "stroke: #003366" in out
    assert 'fill="none"' in out
    assert "ns0:" not in out


def test_process_svg_without_colors_returns_document_unchanged_in_meaning():
    result = process_svg('<svg xmlns="http://www.w3.org/2000/svg"><g/></svg>', MONOCHROME)
    assert result["success"] is True
    assert result["svg"].startswith("<svg")


@pytest.mark.parametrize("svg, message", [
    ("<html><body/></html>", "root element must be svg"),
    ("<svg><rect></svg>", "XML Error"),
    ('<!DOCTYPE svg [<!ENTITY x "y">]><svg/>', "DOCTYPE"),
    ("", "empty"),
])
def test_process_svg_reports_invalid_documents(svg, message):
    result = process_svg(svg, MONOCHROME)

    assert result["success"] is False
    assert message in result["errors"][0]


def test_every_scheme_has_four_colors():
    schemes = color_schemes.list_color_schemes()

    assert len(schemes) == 10
    for scheme in schemes:
        assert set(scheme["colors"]) == {"primary", "secondary", "accent", "neutral"}
