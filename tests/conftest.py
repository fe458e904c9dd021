"""Shared test fixtures for the Study Room test suite.

Tests run against an in-memory SQLite database (one shared connection via
StaticPool) with authentication enabled, so every request must carry a
bearer token and cross-owner isolation is exercised for real. Each test
starts from empty tables.
"""

import os
from datetime import datetime, timezone

# Configure the app before any studyroom imports read settings.
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite://")
os.environ["AUTH_ENABLED"] = "true"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_FORMAT"] = "text"
os.environ["TEMPLATE_CATALOG_PATH"] = ""

import pytest
from sqlalchemy import text
from fastapi.testclient import TestClient

from studyroom.database import SessionLocal, get_db, init_db
from studyroom.main import app
from studyroom.core.config import settings
from studyroom.core.token_factory import create_token
from studyroom.middleware.request_context import _rate_buckets

init_db()

OWNER_A = "owner-a"
OWNER_B = "owner-b"

# Fixed clock for service-level tests: a Monday, mid-morning UTC.
NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)

# Child tables first so foreign keys never block the sweep.
_CLEAN_TABLES = [
    "study_focus_entries",
    "study_todos",
    "study_items",
    "study_folders",
    "study_workspaces",
]


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every table before each test.

    Runs before the test (not after) so a failing test leaves its data
    available for debugging.
    """
    db = SessionLocal()
    try:
        for table in _CLEAN_TABLES:
            db.execute(text(f"DELETE FROM {table}"))
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    _rate_buckets.clear()  # Reset rate limiter so tests don't hit 429
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _headers_for(owner_id: str) -> dict:
    token = create_token(owner_id, secret=settings.jwt_secret_key)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers() -> dict:
    """Bearer headers for OWNER_A."""
    return _headers_for(OWNER_A)


@pytest.fixture()
def other_headers() -> dict:
    """Bearer headers for OWNER_B."""
    return _headers_for(OWNER_B)


def make_item(workspace_id: str, **overrides) -> dict:
    """Factory for link item creation payloads."""
    payload = {
        "workspace_id": workspace_id,
        "type": "link",
        "title": "Express Guide",
        "url": "https://expressjs.com/",
        "tags": ["docs"],
    }
    payload.update(overrides)
    return payload
