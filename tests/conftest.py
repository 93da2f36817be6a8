"""
Test configuration and fixtures for the links service.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from links_app.database.connection import Base, get_db
from links_app.dependencies import get_report_storage
from links_app.models.link import Link
from links_app.storage.strategies import InMemoryReportStorage

# Test database configuration
# File-backed so the export worker threads can open their own connections
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)
    
    # Create session
    db = TestingSessionLocal()
    
    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def report_storage():
    """In-memory report storage, inspectable after an export"""
    return InMemoryReportStorage(public_url="https://storage.example.com/")


@pytest.fixture(scope="function")
def client(db_session, report_storage):
    """
    Create a test client with database and storage dependencies overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session
    
    # Override the dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_storage] = lambda: report_storage
    
    # Create test client
    with TestClient(app) as test_client:
        yield test_client
    
    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_link(db_session):
    """
    Factory inserting links with strictly increasing creation times,
    one second apart, so the newest link is the last one made.
    """
    sequence = count()
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    
    def _make_link(**overrides) -> Link:
        index = next(sequence)
        values = {
            "url": "https://example.com/",
            "short_url": f"alias{index}",
            "created_at": start + timedelta(seconds=index),
        }
        values.update(overrides)
        link = Link(**values)
        db_session.add(link)
        db_session.commit()
        db_session.refresh(link)
        return link
    
    return _make_link
