# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from database.db import build_engine, build_session_factory
from database.migrations import run_migrations


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """TestClient backed by a fresh in-memory database (lifespan runs migrations)."""
    with TestClient(create_app("sqlite://")) as c:
        yield c
