import os
from datetime import datetime, timedelta, timezone

# Ensure JWT_SECRET exists before importing interview_tracker.main (it calls require_jwt_secret() at import time).
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from interview_tracker.core.base import Base
from interview_tracker.core import config as app_config
from interview_tracker.core.security import hash_password

# Import models so they register with SQLAlchemy metadata.
from interview_tracker.models.user import User  # noqa: F401
from interview_tracker.models.user_profile import UserProfile  # noqa: F401
from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.models.interview_rating import InterviewRating  # noqa: F401
from interview_tracker.models.interview_notification import InterviewNotification  # noqa: F401
from interview_tracker.models.interview_question import InterviewQuestion  # noqa: F401

from interview_tracker.core.database import get_db
from interview_tracker.dependencies.auth import get_current_user



@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # The in-memory DB persists across tests with StaticPool; reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "EMAIL_ENABLED",
        "EMAIL_PROVIDER",
        "FROM_EMAIL",
        "RESEND_API_KEY",
        "OPENAI_API_KEY",
        "QUESTIONS_PER_PAGE",
        "QUESTIONS_MAX_PAGES",
        "REMINDER_WINDOW_MINUTES",
        "STALE_INTERVIEW_RETENTION_HOURS",
        "SCHEDULER_SHARED_SECRET",
        "EXPIRY_SWEEP_ENABLED",
        "PASSWORD_MIN_LENGTH",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def app(db_session):
    app_config.settings.JWT_SECRET = app_config.settings.JWT_SECRET or "test_jwt_secret"
    app_config.settings.EXPIRY_SWEEP_ENABLED = False

    from interview_tracker.main import app as fastapi_app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def users(db_session):
    """
    Two distinct active users for ownership / isolation tests.
    """
    user_a = User(
        email="test@example.com",
        name="Test User",
        password_hash=hash_password("test_password_123"),
        is_active=True,
    )
    user_b = User(
        email="other@example.com",
        name="Other User",
        password_hash=hash_password("test_password_123"),
        is_active=True,
    )
    db_session.add_all([user_a, user_b])
    db_session.commit()
    db_session.refresh(user_a)
    db_session.refresh(user_b)
    return user_a, user_b


@pytest.fixture()
def client(app, users):
    """
    Default client authenticated as user_a.
    """
    user_a, _ = users
    app.dependency_overrides[get_current_user] = lambda: user_a
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary user.

    Usage:
        with client_for(user) as c:
            ...
    """

    @contextmanager
    def _client_for(user: User):
        app.dependency_overrides[get_current_user] = lambda: user
        with TestClient(app) as c:
            yield c
        app.dependency_overrides.pop(get_current_user, None)

    return _client_for


@pytest.fixture()
def make_interview(db_session):
    """
    Insert an interview directly, bypassing the API (e.g. to place one in the past).
    """

    def _make(user, *, scheduled_at=None, status=InterviewStatus.UPCOMING, company_name="Acme", role="Engineer"):
        iv = Interview(
            user_id=user.id,
            company_name=company_name,
            role=role,
            salary="18",
            scheduled_at=scheduled_at or (datetime.now(timezone.utc) + timedelta(days=3)),
            status=status.value,
        )
        db_session.add(iv)
        db_session.commit()
        db_session.refresh(iv)
        return iv

    return _make
