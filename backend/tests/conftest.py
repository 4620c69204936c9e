"""Pytest configuration and fixtures for tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import Base, create_db_engine, create_session_factory
from app.main import create_app
from app.services import admin_service
from app.services.token_service import AdminIdentity

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "owner-pass"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret="test-secret",
        upload_dir=str(tmp_path / "uploads"),
        site_base="https://api.example.com",
    )


@pytest.fixture
def engine():
    """Create an in-memory SQLite database for service-level tests."""
    engine = create_db_engine("sqlite://")
    # Import all models so they're registered
    import app.models  # noqa: F401

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    """Provide a fresh database session for each test."""
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(settings):
    """Application client backed by its own in-memory database."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def app_db(client) -> Session:
    """Session on the same database the client's application uses."""
    session = client.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def owner(app_db) -> AdminIdentity:
    admin = admin_service.create_admin(app_db, OWNER_EMAIL, OWNER_PASSWORD, "Owner")
    return AdminIdentity(id=admin.id, email=admin.email)


@pytest.fixture
def auth_headers(client, owner) -> dict[str, str]:
    token = client.app.state.token_service.issue(owner)
    return {"Authorization": f"Bearer {token}"}
