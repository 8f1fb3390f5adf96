"""Pytest fixtures and configuration for teamstandup tests."""

import os

# Must be set before any teamstandup module builds its engine.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from teamstandup.auth import passwords
from teamstandup.auth.passwords import hash_password
from teamstandup.database.database import Base
from teamstandup.database.refresh_token_repository import RefreshTokenRepository
from teamstandup.database.standup_repository import StandupRepository
from teamstandup.database.user_repository import UserRepository


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap bcrypt work factor so auth tests stay fast."""
    monkeypatch.setattr(passwords, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def other_user_id():
    return "other-user-456"


@pytest.fixture(scope="function")
def db_session(test_user_id, other_user_id):
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test,
    seeded with two active users.
    """
    from teamstandup.database.models import UserDB

    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    now = datetime.utcnow()
    password_hash = hash_password(TEST_PASSWORD)
    session.add_all([
        UserDB(
            id=test_user_id,
            email="test@example.com",
            password_hash=password_hash,
            name="Test User",
            created_at=now,
            updated_at=now,
        ),
        UserDB(
            id=other_user_id,
            email="other@example.com",
            password_hash=password_hash,
            name="Another User",
            created_at=now,
            updated_at=now,
        ),
    ])
    session.commit()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user_repository(db_session: Session):
    return UserRepository(db_session)


@pytest.fixture
def refresh_token_repository(db_session: Session):
    return RefreshTokenRepository(db_session)


@pytest.fixture
def standup_repository(db_session: Session):
    return StandupRepository(db_session)


@pytest.fixture
def auth_service(user_repository, refresh_token_repository):
    from teamstandup.services.auth_service import AuthService
    return AuthService(user_repository, refresh_token_repository)


@pytest.fixture
def standup_service(standup_repository):
    from teamstandup.services.standup_service import StandupService
    return StandupService(standup_repository)


@pytest.fixture
def user_service(user_repository, refresh_token_repository):
    from teamstandup.services.user_service import UserService
    return UserService(user_repository, refresh_token_repository)


@pytest.fixture
def test_client(db_session: Session):
    """FastAPI test client bound to the test session.

    Authentication is real: tests sign in through the API and the client
    carries the auth cookies between requests.
    """
    from teamstandup.api.app import app
    from teamstandup.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def logged_in_client(test_client):
    """Test client signed in as the seeded test user."""
    response = test_client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    return test_client
