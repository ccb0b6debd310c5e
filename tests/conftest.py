"""
Pytest fixtures for Credibility API tests. Uses an in-memory SQLite DB.
"""

from __future__ import annotations

import os

# Keep the module-level engine off disk before anything imports the app
os.environ.setdefault("CRED_DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def session_factory():
    """Fresh in-memory database with the credibility table created."""
    from credibility_api.database import init_db

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    """A session on the test database."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """FastAPI TestClient with get_db pointed at the test database."""
    from fastapi.testclient import TestClient

    from credibility_api.app import app
    from credibility_api.database import get_db

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
