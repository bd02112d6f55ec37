"""Pytest configuration and fixtures."""

import os

# Must be set before the app modules read their settings.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.user import ROLE_ADMIN, User  # noqa: E402
from app.services.auth import AuthService  # noqa: E402

TEST_PASSWORD = "Passw0rd!"


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


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_service")
def auth_service_fixture() -> AuthService:
    return AuthService()


def _register(db_session: Session, auth_service: AuthService, full_name: str, email: str) -> dict:
    result = auth_service.register(db_session, full_name, email, TEST_PASSWORD)
    return {
        "user_id": result.user.id,
        "email": result.user.email,
        "full_name": result.user.full_name,
        "access_token": result.tokens.access_token,
        "refresh_token": result.tokens.refresh_token,
    }


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService) -> dict:
    """Register a regular user and return its ids and tokens."""
    return _register(db_session, auth_service, "Test User", "test@example.com")


@pytest.fixture(name="admin_user")
def admin_user_fixture(db_session: Session, auth_service: AuthService) -> dict:
    """Register a user and promote it to admin."""
    data = _register(db_session, auth_service, "Admin User", "admin@example.com")
    user = db_session.get(User, data["user_id"])
    user.role = ROLE_ADMIN
    db_session.commit()
    return data
