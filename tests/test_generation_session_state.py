# /tests/test_generation_session_state.py

import pytest

from namer.core.exceptions import CannotCancelError, InvalidTransitionError


def test_start_moves_pending_to_running(make_session):
    session = make_session()

    assert session.mark_as_started() is True
    assert session.status == "running"
    assert session.started_at is not None
    assert session.progress_percentage == 5


def test_start_is_ignored_outside_pending(make_session):
    session = make_session(status="cancelled")

    assert session.mark_as_started() is False
    assert session.status == "cancelled"


def test_progress_never_moves_backwards(make_session):
    session = make_session()
    session.mark_as_started()

    session.update_progress(60, "Halfway")
    session.update_progress(30, "Late callback")

    assert session.progress_percentage == 60
    assert session.current_step == "Late callback"


def test_progress_is_ignored_when_not_running(make_session):
    session = make_session()

    assert session.update_progress(50) is False
    assert session.progress_percentage == 0


def test_complete_sets_results_and_totals(make_session):
    session = make_session()
    session.mark_as_started()

    session.mark_as_completed({"names": ["Brewly", "Beanstalk"], "source": "ai"}, {"successful_models": 2})

    assert session.status == "completed"
    assert session.progress_percentage == 100
    assert session.total_names_generated == 2
    assert session.completed_at is not None
    assert session.failed_at is None
    assert session.is_terminal


def test_complete_requires_running(make_session):
    session = make_session()

    with pytest.raises(InvalidTransitionError):
        session.mark_as_completed({"names": []})


def test_second_completion_is_rejected_and_keeps_first_results(db_service, make_session):
    session = make_session()
    session.mark_as_started()
    session.mark_as_completed({"names": ["Brewly"]})
    db_service.save_generation_session(session)
    completed_at = session.completed_at

    with pytest.raises(InvalidTransitionError):
        session.mark_as_completed({"names": ["Other", "Names"]})

    db_service.refresh_generation_session(session)
    assert session.status == "completed"
    assert session.results == {"names": ["Brewly"]}
    assert session.total_names_generated == 1
    assert session.completed_at == completed_at


def test_fail_from_running_sets_both_timestamps(make_session):
    session = make_session()
    session.mark_as_started()

    session.mark_as_failed("Provider exploded")

    assert session.status == "failed"
    assert session.error_message == "Provider exploded"
    assert session.results is None
    assert session.completed_at is not None
    assert session.failed_at == session.completed_at


def test_fail_from_pending_is_rejected(make_session):
    session = make_session()

    with pytest.raises(InvalidTransitionError, match="from status 'pending'"):
        session.mark_as_failed("never started")
    assert session.status == "pending"
    assert session.failed_at is None


def test_cancel_terminal_session_is_rejected(make_session):
    session = make_session()
    session.mark_as_started()
    session.mark_as_completed({"names": ["Brewly"]})

    with pytest.raises(CannotCancelError, match="Cannot cancel a completed generation"):
        session.mark_as_cancelled()


def test_fail_after_cancel_is_rejected(make_session):
    session = make_session()
    session.mark_as_cancelled()

    with pytest.raises(InvalidTransitionError):
        session.mark_as_failed("too late")
    assert session.status == "cancelled"


def test_full_details_extends_status_snapshot(make_session):
    session = make_session(project_id=None)
    details = session.full_details()

    assert details["session_id"] == session.id
    assert details["requested_models"] == ["gpt-4", "gemini-1.5-pro"]
    assert details["duration_seconds"] is None
