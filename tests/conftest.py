# /tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from namer.core import config
from namer.core.cache import flag_cache
from namer.db import base as db_base
from namer.services.database_service import DatabaseService


@pytest.fixture
def db_session():
    """
    A fresh in-memory SQLite database per test. StaticPool keeps the single
    connection alive so every session sees the same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db_base.Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        db_base.Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_service(db_session):
    return DatabaseService(db_session=db_session)


@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    """Redirects blob storage into the test's temporary directory."""
    root = tmp_path / "storage"
    root.mkdir()
    monkeypatch.setattr(config, "STORAGE_ROOT", str(root))
    return root


@pytest.fixture(autouse=True)
def clean_flag_cache():
    flag_cache.clear()
    yield
    flag_cache.clear()


@pytest.fixture
def make_session(db_service):
    """Factory for GenerationSession rows with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        record = {
            "id": f"session_test{counter['n']}",
            "user_id": "user_1",
            "status": "pending",
            "business_description": "An eco-friendly coffee subscription",
            "generation_mode": "creative",
            "deep_thinking": False,
            "requested_models": ["gpt-4", "gemini-1.5-pro"],
            "generation_strategy": "parallel",
            "progress_percentage": 0,
        }
        record.update(overrides)
        return db_service.add_generation_session(record)

    return _make
