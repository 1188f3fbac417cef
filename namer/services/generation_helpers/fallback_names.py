# /namer/services/generation_helpers/fallback_names.py

"""
Offline business-name generator.

Used when no AI model produced any names, so a session never fails just
because the providers are down. Output is deterministic: the random source
is seeded from the request itself, so the same description and mode always
yield the same list.
"""

import hashlib
import random
from typing import Callable, List

DEFAULT_NAME_COUNT = 10
MAX_NAME_LENGTH = 15
TRUNCATED_LENGTH = 12

PREFIXES = {
    "creative": ["Pixel", "Nova", "Spark", "Flow", "Wave", "Echo", "Zen", "Flux", "Aura", "Vibe"],
    "professional": ["Prime", "Elite", "Core", "Pro", "Summit", "Peak", "Alpha", "Omega", "Strategic", "Vision"],
    "brandable": ["Zeph", "Axio", "Lumi", "Velo", "Koda", "Nyx", "Orb", "Sync", "Loop", "Grid"],
    "tech-focused": ["Byte", "Code", "Data", "Logic", "Binary", "Neural", "Quantum", "Digital", "Cyber", "Tech"],
}

SUFFIXES = {
    "creative": ["Studio", "Lab", "Works", "Forge", "Craft", "House", "Space", "Hub", "Zone", "Base"],
    "professional": ["Solutions", "Consulting", "Partners", "Group", "Associates", "Corp", "Ventures", "Capital", "Holdings", "Systems"],
    "brandable": ["ly", "fy", "io", "co", "go", "me", "up", "it", "ai", "x"],
    "tech-focused": ["Tech", "Labs", "Systems", "Logic", "Core", "Net", "Web", "Cloud", "Apps", "Dev"],
}

CONNECTORS = ["", "-", ".", ""]

STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "must", "can",
}


def _seeded_rng(idea: str, mode: str) -> random.Random:
    digest = hashlib.sha256(f"{idea.strip().lower()}|{mode}".encode("utf-8")).hexdigest()
    return random.Random(int(digest[:16], 16))


def _is_numeric(word: str) -> bool:
    try:
        float(word)
        return True
    except ValueError:
        return False


def extract_keywords(idea: str) -> List[str]:
    words = [word.strip() for word in idea.lower().split(" ")]
    return [
        word for word in words
        if len(word) > 2 and word not in STOP_WORDS and not _is_numeric(word)
    ]


def _modify_keyword(rng: random.Random, keyword: str, mode: str) -> str:
    suffixes = SUFFIXES.get(mode, SUFFIXES["creative"])
    modifications: List[Callable[[str], str]] = [
        lambda w: w.capitalize(),
        lambda w: w.capitalize() + rng.choice(suffixes),
        lambda w: ("".join(ch for ch in w if ch not in "aeiou").capitalize() + "r") if mode == "tech-focused" else w.capitalize(),
        lambda w: w.capitalize() + "ly",
        lambda w: w[:4].capitalize() + "io",
    ]
    result = rng.choice(modifications)(keyword)
    return result[:TRUNCATED_LENGTH] if len(result) > MAX_NAME_LENGTH else result


def _generate_one(rng: random.Random, prefixes: List[str], suffixes: List[str], keywords: List[str], mode: str) -> str:
    def keyword_or(fallback: List[str]) -> str:
        return rng.choice(keywords).capitalize() if keywords else rng.choice(fallback)

    patterns: List[Callable[[], str]] = [
        lambda: rng.choice(prefixes) + rng.choice(suffixes),
        lambda: keyword_or(prefixes) + rng.choice(suffixes),
        lambda: rng.choice(prefixes) + keyword_or(suffixes),
        lambda: rng.choice(prefixes) + rng.choice(CONNECTORS) + rng.choice(prefixes),
        lambda: _modify_keyword(rng, rng.choice(keywords), mode) if keywords else rng.choice(prefixes) + rng.choice(suffixes),
    ]
    return rng.choice(patterns)()


def generate_fallback_names(idea: str, mode: str = "creative", count: int = DEFAULT_NAME_COUNT) -> List[str]:
    """Returns `count` unique names for the idea; identical inputs give identical output."""
    rng = _seeded_rng(idea, mode)
    prefixes = PREFIXES.get(mode, PREFIXES["creative"])
    suffixes = SUFFIXES.get(mode, SUFFIXES["creative"])
    keywords = extract_keywords(idea)

    names: List[str] = []
    seen = set()
    attempts = 0
    max_attempts = count * 25
    while len(names) < count and attempts < max_attempts:
        attempts += 1
        name = _generate_one(rng, prefixes, suffixes, keywords, mode)
        if name and name.lower() not in seen:
            seen.add(name.lower())
            names.append(name)

    # The combinatorial space can be exhausted for tiny inputs; pad with
    # numbered variants so the call always terminates with `count` names.
    index = 2
    while len(names) < count:
        candidate = f"{prefixes[(index - 2) % len(prefixes)]}{suffixes[(index - 2) % len(suffixes)]}{index}"
        if candidate.lower() not in seen:
            seen.add(candidate.lower())
            names.append(candidate)
        index += 1

    return names
