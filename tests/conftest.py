"""
Shared test fixtures: SQLite test database, test client, fixed clock.
"""

import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from trenchcalc.database import Base, get_db
from trenchcalc.main import app
from trenchcalc.schemas import default_inputs


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def inputs():
    """Fresh default inputs for each test."""
    return default_inputs()


@pytest.fixture
def ticking_clock():
    """Clock that advances one millisecond per call, so audit timestamps are distinct."""
    state = {"now": datetime(2024, 1, 1, 8, 0, 0)}

    def clock():
        state["now"] += timedelta(milliseconds=1)
        return state["now"]

    return clock
