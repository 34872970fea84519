"""
Test configuration and fixtures
"""
import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SQLITE_FILE_NAME", ":memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401  registers the tables
from core.security import create_staff_token
from crud import dining_tables as crud_tables
from db.session import get_db
from main import app
from schemas.dining_tables import DiningTableCreate

from tests.fakes import FakeBackend, FakeScheduler, make_record


@pytest.fixture
def db_engine():
    """Fresh in-memory database shared by every connection of a test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db_session(db_engine):
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def client(db_session):
    """Create a test client with test database"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def staff_headers():
    return {"Authorization": f"Bearer {create_staff_token('ana')}"}


@pytest.fixture
def dining_table(db_session):
    return crud_tables.create_table(
        db_session,
        DiningTableCreate(code="7", name="Terraza", description="Near the window")
    )


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def fake_backend():
    return FakeBackend(make_record(needs_attention=False))
