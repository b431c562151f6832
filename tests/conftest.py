"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base
from app.services.auth import AuthService
from app.store import get_store
from app.store import tables  # noqa: F401
from app.store.memory import MemoryStore
from app.store.sql import SqlStore


@pytest.fixture(name="upload_dir")
def upload_dir_fixture(tmp_path, monkeypatch):
    """Point the content directory at a temporary folder."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(get_settings(), "UPLOAD_DIR", str(path))
    return path


@pytest.fixture(name="store")
def store_fixture():
    """Fresh in-memory store for each test."""
    return MemoryStore()


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="sql_store")
def sql_store_fixture(db_session):
    return SqlStore(db_session)


@pytest.fixture(name="client")
def client_fixture(store, upload_dir):
    """Create a test client with the store injected and rate limiting disabled."""
    from app.rate_limit import limiter
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def _make_user(store, email: str, city: str, country: str) -> dict:
    result = AuthService().signup(store, email, "password123", city, country)
    return {
        "user_id": result.user.id,
        "email": result.user.email,
        "token": result.token,
        "headers": {"Authorization": f"Bearer {result.token}"},
    }


@pytest.fixture(name="test_user")
def test_user_fixture(store):
    """Create a test user and return ids, token and auth headers."""
    return _make_user(store, "alice@example.com", "Paris", "France")


@pytest.fixture(name="other_user")
def other_user_fixture(store):
    """A second user for ownership and visibility checks."""
    return _make_user(store, "bob@example.com", "Lima", "Peru")
