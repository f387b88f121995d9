"""Shared pytest configuration."""

import os
from pathlib import Path

import pytest

# Point the app at a throwaway database before converter_app is imported
TEST_DB_DIR = Path(__file__).parent / "databases"
TEST_DB_DIR.mkdir(exist_ok=True)
os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_DIR}/test_app_default.db")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from converter_app.auth.jwt_auth import UserContext  # noqa: E402
from converter_app.models.database import Base  # noqa: E402


@pytest.fixture
def db_session():
    """Create a session bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def user():
    """Authenticated caller used by service tests."""
    return UserContext(user_id="test-user-456")


@pytest.fixture
def other_user():
    """A second caller who must never see the first caller's records."""
    return UserContext(user_id="other-user-789")
