# /tests/test_generation_service.py

import pytest
from unittest.mock import AsyncMock

from namer.core import config
from namer.core.cache import flag_cache
from namer.core.exceptions import CannotCancelError, ForbiddenError, InvalidTransitionError, NotFoundError
from namer.db.models.generation_models import GenerationSession
from namer.models.generation_model import GenerationCreate
from namer.services import ai_provider_client, domain_service, generation_service
from namer.services.generation_helpers import name_cache


def _model_result(model_id, names=None, error=None):
    return {
        "model_id": model_id,
        "names": names or [],
        "success": error is None,
        "error": error,
        "permanent_error": False,
        "response_time_ms": 120,
        "tokens_used": 50 if error is None else 0,
        "cost_cents": 1 if error is None else 0,
    }


@pytest.fixture
def no_domain_checks(monkeypatch):
    monkeypatch.setattr(config, "ENABLE_DOMAIN_CHECKS", False)


# --- Request path ---

def test_create_session_persists_pending_row(db_service):
    request = GenerationCreate(business_description="  Artisan bakery  ", models=["gpt-4", "gpt-4"])

    result = generation_service.create_session(db_service, request, "user_1")

    assert result["success"] is True
    assert result["status"] == "pending"
    assert result["session_id"].startswith("session_")
    session = db_service.get_generation_session(result["session_id"])
    assert session.business_description == "Artisan bakery"
    assert session.requested_models == ["gpt-4"]
    assert session.user_id == "user_1"


def test_create_session_rejects_unknown_model(db_service):
    request = GenerationCreate(business_description="Artisan bakery", models=["not-a-model"])

    with pytest.raises(ValueError):
        generation_service.create_session(db_service, request, "user_1")


def test_create_session_checks_project_owner(db_service):
    db_service.add_project({"id": "proj_1", "user_id": "someone_else", "name": "Theirs"})
    request = GenerationCreate(business_description="Artisan bakery", models=["gpt-4"], project_id="proj_1")

    with pytest.raises(ForbiddenError):
        generation_service.create_session(db_service, request, "user_1")


def test_status_of_another_users_session_is_forbidden(db_service, make_session):
    session = make_session(user_id="owner")

    with pytest.raises(ForbiddenError):
        generation_service.get_session_status(db_service, session.id, "intruder")


def test_status_of_missing_session_is_not_found(db_service):
    with pytest.raises(NotFoundError):
        generation_service.get_session_status(db_service, "session_missing", "user_1")


def test_cancel_sets_flag_and_status(db_service, make_session):
    session = make_session()

    result = generation_service.cancel_session(db_service, session.id, "user_1")

    assert result == {"success": True, "message": "Generation cancelled successfully"}
    assert db_service.get_generation_session(session.id).status == "cancelled"
    assert flag_cache.has(generation_service.cancellation_flag_key(session.id))


def test_cancellation_is_seen_through_flag_or_row(db_service, make_session):
    session = make_session()
    assert generation_service.is_cancellation_requested(db_service, session) is False

    generation_service.cancel_session(db_service, session.id, "user_1")
    assert generation_service.is_cancellation_requested(db_service, session) is True

    # The row alone is enough once the flag has expired.
    flag_cache.forget(generation_service.cancellation_flag_key(session.id))
    assert generation_service.is_cancellation_requested(db_service, session) is True


def test_cancel_completed_session_raises(db_service, make_session):
    session = make_session()
    session.mark_as_started()
    session.mark_as_completed({"names": ["Brewly"]})
    db_service.save_generation_session(session)

    with pytest.raises(CannotCancelError):
        generation_service.cancel_session(db_service, session.id, "user_1")


def test_cancel_failed_session_raises_and_leaves_row(db_service, make_session):
    session = make_session(status="running")
    session.mark_as_failed("Provider exploded")
    db_service.save_generation_session(session)
    failed_at = session.failed_at

    with pytest.raises(CannotCancelError):
        generation_service.cancel_session(db_service, session.id, "user_1")

    row = db_service.get_generation_session(session.id)
    assert row.status == "failed"
    assert row.error_message == "Provider exploded"
    assert row.failed_at == failed_at
    assert not flag_cache.has(generation_service.cancellation_flag_key(session.id))


def test_completion_does_not_overwrite_a_concurrent_cancel(db_service, make_session):
    session = make_session()
    session.mark_as_started()
    db_service.save_generation_session(session)
    # Another request cancels the row while the worker still holds it as running.
    db_service.session.query(GenerationSession).filter_by(id=session.id).update(
        {"status": "cancelled"}, synchronize_session=False
    )
    assert session.status == "running"

    session.mark_as_completed({"names": ["Brewly"]})

    assert db_service.finish_generation_session_if_running(session) is False
    row = db_service.get_generation_session(session.id)
    assert row.status == "cancelled"
    assert row.results is None
    assert row.total_names_generated == 0


def test_completion_is_stored_while_still_running(db_service, make_session):
    session = make_session()
    session.mark_as_started()
    db_service.save_generation_session(session)

    session.mark_as_completed({"names": ["Brewly"]})

    assert db_service.finish_generation_session_if_running(session) is True
    row = db_service.get_generation_session(session.id)
    assert row.status == "completed"
    assert row.results == {"names": ["Brewly"]}


def test_delete_active_session_is_rejected(db_service, make_session):
    session = make_session(status="running")

    with pytest.raises(InvalidTransitionError):
        generation_service.delete_session(db_service, session.id, "user_1")


def test_delete_finished_session_clears_its_cache_entry(db_service, make_session):
    session = make_session(status="failed")
    key = name_cache.generate_hash(session.business_description, "creative", False)
    name_cache.store_names(db_service, key, session.business_description, "creative", False, ["Brewly"])

    assert generation_service.delete_session(db_service, session.id, "user_1") is True
    assert db_service.get_generation_session(session.id) is None
    assert name_cache.get_cached_names(db_service, key) is None


# --- Worker ---

@pytest.mark.asyncio
async def test_execute_merges_model_names_and_caches_them(db_service, make_session, mocker, no_domain_checks):
    session = make_session()
    mocker.patch.object(
        ai_provider_client,
        "generate_multi_model_names",
        AsyncMock(return_value=[
            _model_result("gpt-4", ["Brewly", "Beanstalk"]),
            _model_result("gemini-1.5-pro", ["beanstalk", "Roastery"]),
        ]),
    )

    await generation_service.execute_generation(db_service, session.id)

    session = db_service.get_generation_session(session.id)
    assert session.status == "completed"
    assert session.results["names"] == ["Brewly", "Beanstalk", "Roastery"]
    assert session.results["source"] == "ai"
    assert session.results["fallback_used"] is False
    assert session.total_tokens_used == 100
    assert session.execution_metadata["successful_models"] == 2
    key = name_cache.generate_hash(session.business_description, "creative", False)
    assert name_cache.get_cached_names(db_service, key) == ["Brewly", "Beanstalk", "Roastery"]


@pytest.mark.asyncio
async def test_execute_uses_cache_without_calling_models(db_service, make_session, mocker, no_domain_checks):
    session = make_session()
    key = name_cache.generate_hash(session.business_description, "creative", False)
    name_cache.store_names(db_service, key, session.business_description, "creative", False, ["Cached Co"])
    dispatch = mocker.patch.object(ai_provider_client, "generate_multi_model_names", AsyncMock())

    await generation_service.execute_generation(db_service, session.id)

    dispatch.assert_not_called()
    session = db_service.get_generation_session(session.id)
    assert session.status == "completed"
    assert session.results["names"] == ["Cached Co"]
    assert session.results["source"] == "cache"
    assert session.execution_metadata["cached_results"] is True


@pytest.mark.asyncio
async def test_execute_falls_back_when_every_model_fails(db_service, make_session, mocker, no_domain_checks):
    session = make_session()
    mocker.patch.object(
        ai_provider_client,
        "generate_multi_model_names",
        AsyncMock(return_value=[
            _model_result("gpt-4", error="HTTP 500 Internal Server Error: boom"),
            _model_result("gemini-1.5-pro", error="timeout"),
        ]),
    )

    await generation_service.execute_generation(db_service, session.id)

    session = db_service.get_generation_session(session.id)
    assert session.status == "completed"
    assert session.results["source"] == "fallback"
    assert session.results["fallback_used"] is True
    assert len(session.results["names"]) == 10
    assert session.execution_metadata["models_with_fallback"] == 2
    key = name_cache.generate_hash(session.business_description, "creative", False)
    assert name_cache.get_cached_names(db_service, key) is None


@pytest.mark.asyncio
async def test_execute_attaches_domain_results_per_name(db_service, make_session, mocker, monkeypatch):
    monkeypatch.setattr(config, "ENABLE_DOMAIN_CHECKS", True)
    session = make_session()
    mocker.patch.object(
        ai_provider_client,
        "generate_multi_model_names",
        AsyncMock(return_value=[_model_result("gpt-4", ["Brewly", "Beanstalk"])]),
    )
    mocker.patch.object(
        domain_service,
        "check_names",
        AsyncMock(return_value={"Brewly": {"brewly.com": {"status": "taken", "available": False}}}),
    )

    await generation_service.execute_generation(db_service, session.id)

    session = db_service.get_generation_session(session.id)
    assert session.results["domains"] == {
        "Brewly": {"brewly.com": {"status": "taken", "available": False}},
        "Beanstalk": {},
    }


@pytest.mark.asyncio
async def test_execute_stops_when_cancelled_before_start(db_service, make_session, mocker):
    session = make_session()
    generation_service.cancel_session(db_service, session.id, "user_1")
    dispatch = mocker.patch.object(ai_provider_client, "generate_multi_model_names", AsyncMock())

    await generation_service.execute_generation(db_service, session.id)

    dispatch.assert_not_called()
    assert db_service.get_generation_session(session.id).status == "cancelled"


@pytest.mark.asyncio
async def test_execute_stops_when_cancelled_during_model_calls(db_service, make_session, mocker, no_domain_checks):
    session = make_session()
    session_id = session.id

    async def cancel_mid_flight(*args, **kwargs):
        generation_service.cancel_session(db_service, session_id, "user_1")
        return [_model_result("gpt-4", ["Brewly"])]

    mocker.patch.object(ai_provider_client, "generate_multi_model_names", side_effect=cancel_mid_flight)

    await generation_service.execute_generation(db_service, session_id)

    session = db_service.get_generation_session(session_id)
    assert session.status == "cancelled"
    assert session.results is None
    assert name_cache.get_cached_names(
        db_service, name_cache.generate_hash(session.business_description, "creative", False)
    ) is None


@pytest.mark.asyncio
async def test_execute_marks_session_failed_on_unexpected_error(db_service, make_session, mocker, no_domain_checks):
    session = make_session()
    mocker.patch.object(
        ai_provider_client,
        "generate_multi_model_names",
        AsyncMock(side_effect=RuntimeError("event loop on fire")),
    )

    await generation_service.execute_generation(db_service, session.id)

    session = db_service.get_generation_session(session.id)
    assert session.status == "failed"
    assert session.error_message == "event loop on fire"
    assert session.failed_at is not None
