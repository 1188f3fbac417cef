# /tests/test_share_service.py

from datetime import timedelta

import pytest
from pydantic import ValidationError

from namer.core.exceptions import ForbiddenError, NotFoundError, ShareAccessError
from namer.db.database import utcnow
from namer.models.project_model import ProjectCreate
from namer.models.share_model import ShareCreate, ShareUpdate
from namer.services import project_service, share_service

RESULTS = {
    "names": ["Brewly", "Beanstalk"],
    "domains": {"Brewly": {"brewly.com": {"status": "taken", "available": False}}},
    "source": "ai",
}


@pytest.fixture
def completed_session(make_session):
    return make_session(status="completed", results=RESULTS)


def _share(db_service, session, user_id="user_1", **overrides):
    payload = {
        "target": {"kind": "generation_session", "id": session.id},
        "title": "Coffee names",
    }
    payload.update(overrides)
    return share_service.create_share(db_service, ShareCreate(**payload), user_id)


# --- Creation ---

def test_public_share_has_uuid_and_no_password(db_service, completed_session):
    share = _share(db_service, completed_session)

    assert len(share.id) == 36
    assert share.target_kind == "generation_session"
    assert share.password_hash is None
    assert share.is_accessible is True


def test_active_share_past_its_expiry_is_not_accessible(db_service, completed_session):
    share = _share(db_service, completed_session)
    share.expires_at = utcnow() - timedelta(seconds=1)
    db_service.save_share(share)

    assert share.is_active is True
    assert share.is_expired is True
    assert share.is_accessible is False


def test_protected_share_stores_only_a_hash(db_service, completed_session):
    share = _share(db_service, completed_session, share_type="password_protected", password="s3cret!")

    assert share.password_hash and share.password_hash != "s3cret!"
    assert share.validate_password("s3cret!") is True
    assert share.validate_password("wrong") is False


def test_protected_share_requires_a_long_enough_password():
    with pytest.raises(ValidationError):
        ShareCreate(
            target={"kind": "project", "id": "proj_1"},
            title="Mine",
            share_type="password_protected",
            password="abc",
        )


def test_sharing_someone_elses_session_is_forbidden(db_service, make_session):
    session = make_session(user_id="owner")

    with pytest.raises(ForbiddenError):
        _share(db_service, session, user_id="intruder")


def test_sharing_missing_target_is_not_found(db_service):
    request = ShareCreate(target={"kind": "logo_generation", "id": "logo_missing"}, title="Logos")

    with pytest.raises(NotFoundError):
        share_service.create_share(db_service, request, "user_1")


# --- Public access ---

def test_public_content_counts_views(db_service, completed_session):
    share = _share(db_service, completed_session)
    access = {"ip_address": "10.0.0.1", "user_agent": "pytest", "referrer": None}

    first = share_service.get_public_share_content(db_service, share.id, access_info=access)
    second = share_service.get_public_share_content(db_service, share.id, access_info=access)

    assert first["content"]["names"] == ["Brewly", "Beanstalk"]
    assert first["view_count"] == 1
    assert second["view_count"] == 2
    assert db_service.get_share(share.id).last_viewed_at is not None


@pytest.mark.parametrize("password, allowed", [("s3cret!", True), ("nope", False), (None, False)])
def test_password_is_checked_on_access(db_service, completed_session, password, allowed):
    share = _share(db_service, completed_session, share_type="password_protected", password="s3cret!")

    if allowed:
        assert share_service.validate_share_access(db_service, share.id, password).id == share.id
    else:
        with pytest.raises(ShareAccessError) as excinfo:
            share_service.validate_share_access(db_service, share.id, password)
        assert excinfo.value.reason == "invalid_password"


def test_access_reasons_for_missing_inactive_and_expired(db_service, completed_session):
    with pytest.raises(ShareAccessError) as excinfo:
        share_service.validate_share_access(db_service, "no-such-share")
    assert excinfo.value.reason == "not_found"

    inactive = _share(db_service, completed_session)
    share_service.deactivate_share(db_service, inactive.id, "user_1")
    with pytest.raises(ShareAccessError) as excinfo:
        share_service.validate_share_access(db_service, inactive.id)
    assert excinfo.value.reason == "inactive"

    expired = _share(db_service, completed_session)
    expired.expires_at = utcnow() - timedelta(minutes=1)
    db_service.save_share(expired)
    with pytest.raises(ShareAccessError) as excinfo:
        share_service.validate_share_access(db_service, expired.id)
    assert excinfo.value.reason == "expired"


def test_share_of_deleted_target_reports_not_found(db_service, completed_session):
    share = _share(db_service, completed_session)
    db_service.delete_generation_session(completed_session.id)

    with pytest.raises(ShareAccessError) as excinfo:
        share_service.get_public_share_content(db_service, share.id)

    assert excinfo.value.reason == "not_found"
    assert db_service.get_share(share.id).view_count == 0


# --- Owner operations ---

def test_analytics_counts_unique_visitors(db_service, completed_session):
    share = _share(db_service, completed_session)
    for ip in ("10.0.0.1", "10.0.0.2", "10.0.0.1"):
        share_service.get_public_share_content(db_service, share.id, access_info={"ip_address": ip})

    analytics = share_service.get_share_analytics(db_service, share.id, "user_1")

    assert analytics["total_views"] == 3
    assert analytics["unique_visitors"] == 2
    assert len(analytics["recent_accesses"]) == 3


def test_update_only_touches_provided_fields(db_service, completed_session):
    share = _share(db_service, completed_session, description="First pass")

    updated = share_service.update_share(db_service, share.id, ShareUpdate(title="Final names"), "user_1")

    assert updated.title == "Final names"
    assert updated.description == "First pass"


def test_owner_operations_reject_other_users(db_service, completed_session):
    share = _share(db_service, completed_session)

    with pytest.raises(ForbiddenError):
        share_service.get_share_analytics(db_service, share.id, "intruder")
    with pytest.raises(ForbiddenError):
        share_service.delete_share(db_service, share.id, "intruder")


def test_list_user_shares_filters_active(db_service, completed_session):
    kept = _share(db_service, completed_session)
    dropped = _share(db_service, completed_session)
    share_service.deactivate_share(db_service, dropped.id, "user_1")

    active = share_service.list_user_shares(db_service, "user_1", active_only=True)

    assert [share.id for share in active] == [kept.id]
    assert len(share_service.list_user_shares(db_service, "user_1")) == 2


def test_deactivate_expired_shares(db_service, completed_session):
    share = _share(db_service, completed_session)
    share.expires_at = utcnow() - timedelta(days=1)
    db_service.save_share(share)

    assert share_service.deactivate_expired_shares(db_service) == 1
    assert db_service.get_share(share.id).is_active is False


# --- Projects as targets ---

def test_project_share_lists_its_sessions(db_service, make_session):
    project = project_service.create_project(db_service, ProjectCreate(name="  Coffee brand "), "user_1")
    make_session(project_id=project.id, status="completed", results=RESULTS)
    share = share_service.create_share(
        db_service,
        ShareCreate(target={"kind": "project", "id": project.id}, title="Project names"),
        "user_1",
    )

    content = share_service.get_public_share_content(db_service, share.id)["content"]

    assert project.id.startswith("proj_")
    assert content["name"] == "Coffee brand"
    assert content["generation_sessions"][0]["names"] == ["Brewly", "Beanstalk"]


def test_project_lookup_is_owner_scoped(db_service):
    project = project_service.create_project(db_service, ProjectCreate(name="Mine"), "user_1")

    assert project_service.get_project(db_service, project.id, "user_1").name == "Mine"
    assert [p.id for p in project_service.list_projects(db_service, "user_1")] == [project.id]
    with pytest.raises(ForbiddenError):
        project_service.get_project(db_service, project.id, "intruder")
