# /namer/services/generation_helpers/name_parsing.py

import json
import re
from typing import Any, List

MAX_NAMES_PER_MODEL = 10

_LIST_MARKER = re.compile(r"^\s*(?:\d+[\.\)]|[-*•])\s*(.+)$")
_DESCRIPTION_SPLIT = re.compile(r"\s+[-–—:]\s+|:\s+")


def _clean_name(raw: Any) -> str:
    name = str(raw).strip()
    name = _DESCRIPTION_SPLIT.split(name, maxsplit=1)[0]
    name = name.strip().strip("*_`\"'").strip()
    return name


def _unique(names: List[str]) -> List[str]:
    seen = set()
    unique = []
    for name in names:
        key = name.lower()
        if name and key not in seen:
            seen.add(key)
            unique.append(name)
    return unique


def parse_names(text: str) -> List[str]:
    """
    Extracts business names from a model reply.

    Accepts a JSON object with a `names` list, a bare JSON list, or a plain
    numbered/bulleted list (one name per line). Raises ValueError when
    nothing usable is found.
    """
    if not text or not text.strip():
        raise ValueError("Empty response from AI model.")

    cleaned = text.strip()
    # Models sometimes wrap JSON in a markdown fence.
    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", cleaned).strip()

    names: List[str] = []
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = None

    if isinstance(parsed, dict):
        parsed = parsed.get("names")
    if isinstance(parsed, list):
        names = [_clean_name(item.get("name", "") if isinstance(item, dict) else item) for item in parsed]
    else:
        for line in cleaned.splitlines():
            match = _LIST_MARKER.match(line)
            if match:
                names.append(_clean_name(match.group(1)))

    names = _unique(names)
    if not names:
        raise ValueError("Invalid response format: no names found.")
    return names[:MAX_NAMES_PER_MODEL]


def merge_names(name_lists: List[List[str]]) -> List[str]:
    """Ordered set union across models; the first spelling seen wins."""
    merged: List[str] = []
    for names in name_lists:
        merged.extend(names)
    return _unique(merged)
