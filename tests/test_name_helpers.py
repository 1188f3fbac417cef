# /tests/test_name_helpers.py

from datetime import timedelta

import pytest
from sqlalchemy.orm import Query

from namer.db.database import utcnow
from namer.services.generation_helpers import model_catalog, name_cache
from namer.services.generation_helpers.fallback_names import generate_fallback_names, extract_keywords
from namer.services.generation_helpers.name_parsing import parse_names, merge_names


# --- Cache keys and storage ---

def test_hash_ignores_case_and_surrounding_whitespace():
    assert name_cache.generate_hash("  Coffee Shop ", "creative", False) == name_cache.generate_hash(
        "coffee shop", "creative", False
    )


def test_hash_depends_on_mode_and_deep_thinking():
    base = name_cache.generate_hash("coffee shop", "creative", False)
    assert base != name_cache.generate_hash("coffee shop", "professional", False)
    assert base != name_cache.generate_hash("coffee shop", "creative", True)
    assert len(base) == 64


def test_store_and_read_cached_names(db_service):
    key = name_cache.generate_hash("coffee shop", "creative", False)
    name_cache.store_names(db_service, key, "coffee shop", "creative", False, ["Brewly", "Beanstalk"])

    assert name_cache.get_cached_names(db_service, key) == ["Brewly", "Beanstalk"]


def test_stale_cache_entry_is_a_miss(db_service):
    key = name_cache.generate_hash("coffee shop", "creative", False)
    name_cache.store_names(db_service, key, "coffee shop", "creative", False, ["Brewly"])
    entry = db_service.get_fresh_generation_cache(key)
    entry.cached_at = utcnow() - timedelta(hours=25)
    db_service.session.commit()

    assert name_cache.get_cached_names(db_service, key) is None
    assert db_service.clear_expired_generation_cache() == 1


def test_storing_again_keeps_the_fresh_entry(db_service):
    key = name_cache.generate_hash("coffee shop", "creative", False)
    name_cache.store_names(db_service, key, "coffee shop", "creative", False, ["Brewly"])
    name_cache.store_names(db_service, key, "coffee shop", "creative", False, ["Other"])

    assert name_cache.get_cached_names(db_service, key) == ["Brewly"]


def test_concurrent_store_returns_the_winning_row(db_service, mocker):
    key = name_cache.generate_hash("coffee shop", "creative", False)
    name_cache.store_names(db_service, key, "coffee shop", "creative", False, ["Brewly"])
    # Another worker committed the same hash between our lookup and our insert.
    mocker.patch.object(db_service.cache_repo, "get_fresh_generation_cache", return_value=None)
    mocker.patch.object(Query, "delete", return_value=0)

    entry = db_service.store_generation_cache({
        "input_hash": key,
        "business_description": "coffee shop",
        "generation_mode": "creative",
        "deep_thinking": False,
        "generated_names": ["Other"],
    })

    assert entry.generated_names == ["Brewly"]
    mocker.stopall()
    assert name_cache.get_cached_names(db_service, key) == ["Brewly"]


# --- Parsing model replies ---

def test_parse_json_object():
    assert parse_names('{"names": ["Brewly", "Beanstalk"]}') == ["Brewly", "Beanstalk"]


def test_parse_fenced_json_list():
    assert parse_names('```json\n["Brewly", "brewly", "Beanstalk"]\n```') == ["Brewly", "Beanstalk"]


def test_parse_numbered_list_strips_descriptions():
    text = "Here you go:\n1. Brewly - a playful brand\n2. **Beanstalk**: grows with you\n- Roastery"
    assert parse_names(text) == ["Brewly", "Beanstalk", "Roastery"]


def test_parse_rejects_text_without_names():
    with pytest.raises(ValueError):
        parse_names("I cannot help with that.")


def test_merge_keeps_first_spelling():
    assert merge_names([["Brewly", "Beanstalk"], ["BREWLY", "Roastery"]]) == ["Brewly", "Beanstalk", "Roastery"]


# --- Offline fallback ---

def test_fallback_is_deterministic_and_unique():
    first = generate_fallback_names("Sustainable coffee delivery", "creative")
    second = generate_fallback_names("Sustainable coffee delivery", "creative")

    assert first == second
    assert len(first) == 10
    assert len({name.lower() for name in first}) == 10


def test_fallback_always_returns_requested_count_for_tiny_input():
    names = generate_fallback_names("a", "tech-focused", count=15)
    assert len(names) == 15


def test_extract_keywords_drops_stop_words_and_numbers():
    keywords = extract_keywords("The best 24 coffee for the city")
    assert "the" not in keywords
    assert "24" not in keywords
    assert "coffee" in keywords


# --- Model catalog ---

def test_validate_requested_models_dedupes_in_order():
    assert model_catalog.validate_requested_models(["gpt-4", "grok-beta", "gpt-4"]) == ["gpt-4", "grok-beta"]


def test_validate_requested_models_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown AI model"):
        model_catalog.validate_requested_models(["gpt-4", "llama-99"])
