"""Pytest fixtures."""

import os

os.environ.pop("POSTGRES_HOST", None)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from framerr import create_app  # noqa: E402
from framerr.auth import hash_password  # noqa: E402
from framerr.core.constants import GROUP_ADMIN, GROUP_USER, SESSION_COOKIE_NAME  # noqa: E402
from framerr.extensions import SessionLocal, engine  # noqa: E402
from framerr.models import Base, User, UserSession  # noqa: E402
from framerr.services.system_config import update_webhook_config  # noqa: E402

TEST_PASSWORD = "correct horse battery staple"
WEBHOOK_TOKEN = "test-webhook-token-0123456789"

# Hashed once for the whole run
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
def app():
    """Create application."""
    application = create_app({"TESTING": True})
    Base.metadata.create_all(bind=engine)
    yield application
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def db_session(app):
    """Database session sharing the in-memory database with the app."""
    session = SessionLocal()
    yield session
    session.close()


def _create_user(db, username: str, group: str) -> User:
    user = User(
        username=username,
        display_name=username.title(),
        password_hash=TEST_PASSWORD_HASH,
        group=group,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_user(db_session):
    """Factory creating users: make_user("bob", admin=True)."""

    def factory(username: str, admin: bool = False) -> User:
        return _create_user(db_session, username, GROUP_ADMIN if admin else GROUP_USER)

    return factory


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", admin=True)


@pytest.fixture
def regular_user(make_user):
    return make_user("alice")


def _login(client: TestClient, db, user: User) -> TestClient:
    session = UserSession.start(db, user.id)
    client.cookies.set(SESSION_COOKIE_NAME, session.id)
    return client


@pytest.fixture
def admin_client(app, db_session, admin_user):
    """Test client with an admin session cookie."""
    return _login(TestClient(app), db_session, admin_user)


@pytest.fixture
def user_client(app, db_session, regular_user):
    """Test client with a regular user's session cookie."""
    return _login(TestClient(app), db_session, regular_user)


@pytest.fixture
def enable_webhook(db_session):
    """Enable a service's webhook with a known token and event lists."""

    def enable(service: str, admin_events=None, user_events=None, token=WEBHOOK_TOKEN):
        config = {"webhookEnabled": True, "webhookToken": token}
        if admin_events is not None:
            config["adminEvents"] = admin_events
        if user_events is not None:
            config["userEvents"] = user_events
        update_webhook_config(db_session, service, config)
        return config

    return enable
