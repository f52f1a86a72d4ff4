# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["BUILDING_DIRECTORY_URL"] = ""

from src.api.deps import get_db
from src.events import event_bus
from src.main import app
from src.models import Building, StaffMember
from src.models.base import Base

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def isolated_event_bus():
    """Drop handlers registered by a test."""
    yield
    event_bus.unsubscribe_all("test")


@pytest.fixture
def staff_member(db_session) -> StaffMember:
    """Create a staff member without any permissions."""
    staff = StaffMember(username="jdoe", full_name="Jane Doe", is_active=True)
    db_session.add(staff)
    db_session.commit()
    db_session.refresh(staff)
    return staff


@pytest.fixture
def building(db_session) -> Building:
    """Create a building in the local directory."""
    building = Building(name="Harbour View")
    db_session.add(building)
    db_session.commit()
    db_session.refresh(building)
    return building
