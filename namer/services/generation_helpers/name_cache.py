# /namer/services/generation_helpers/name_cache.py

import hashlib
import json
import logging
from typing import List, Optional

from ..database_service import DatabaseService

logger = logging.getLogger(__name__)


def normalize_description(business_description: str) -> str:
    return business_description.strip().lower()


def generate_hash(business_description: str, mode: str, deep_thinking: bool) -> str:
    """
    Deterministic cache key for a generation request.

    SHA-256 over a canonical JSON encoding of the normalised inputs, so
    " Foo " and "foo" map to the same key.
    """
    payload = {
        "business_description": normalize_description(business_description),
        "mode": mode,
        "deep_thinking": bool(deep_thinking),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def get_cached_names(db: DatabaseService, input_hash: str) -> Optional[List[str]]:
    entry = db.get_fresh_generation_cache(input_hash)
    if entry is None:
        return None
    logger.info("Generation cache hit for %s (age %sh).", input_hash[:12], entry.age_in_hours)
    return entry.names


def store_names(
    db: DatabaseService,
    input_hash: str,
    business_description: str,
    mode: str,
    deep_thinking: bool,
    names: List[str],
) -> None:
    db.store_generation_cache({
        "input_hash": input_hash,
        "business_description": business_description,
        "generation_mode": mode,
        "deep_thinking": bool(deep_thinking),
        "generated_names": list(names),
    })
