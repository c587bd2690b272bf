# Shared fixtures: a throwaway SQLite file, a TestClient without lifespan
# (so the sweeper loop never starts), and helpers for users and reminders.

import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="reminder-app-tests-")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(_TEST_DB_DIR, "test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SWEEPER_ENABLED"] = "false"
os.environ["METRICS_ENABLED"] = "false"
os.environ["PUSH_ENABLED"] = "true"

from datetime import timedelta  # noqa: E402
from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from reminder_app.db.base import Base  # noqa: E402
from reminder_app.db.session import SessionLocal, engine  # noqa: E402
from reminder_app.main import app  # noqa: E402
from reminder_app.models import Reminder  # noqa: E402
from reminder_app.utils.timezone import utc_now  # noqa: E402
from tests.helpers import EXPO_TOKEN  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(client):
    """Sign up a user and return ``{"id", "email", "token", "headers"}``."""

    def _make(email: str = "alex@example.com", password: str = "secret123", push_token: str | None = None):
        resp = client.post("/api/v1/auth/signup", json={"email": email, "password": password, "name": "Alex"})
        assert resp.status_code == 201, resp.text
        data = resp.json()
        headers = {"Authorization": f"Bearer {data['access_token']}"}
        if push_token:
            resp = client.put("/api/v1/notifications/push-token", json={"push_token": push_token}, headers=headers)
            assert resp.status_code == 204
        return {"id": data["user"]["id"], "email": email, "token": data["access_token"], "headers": headers}

    return _make


@pytest.fixture
def user(make_user):
    return make_user(push_token=EXPO_TOKEN)


@pytest.fixture
def insert_reminder(db):
    """Write a reminder straight to the store, bypassing the no-past-dates rule on create."""

    def _insert(user_id: int, title: str = "Call mom", due_in: timedelta = timedelta(minutes=-5), **fields):
        reminder = Reminder(user_id=user_id, title=title, due_date=utc_now() + due_in, **fields)
        db.add(reminder)
        db.commit()
        db.refresh(reminder)
        return reminder

    return _insert


@pytest.fixture
def expo_post():
    """Stub the Expo push endpoint; the mock records every delivery attempt."""
    with patch("reminder_app.reminders.dispatcher.requests.post") as mock_post:
        mock_post.return_value.json.return_value = {"data": {"status": "ok", "id": "ticket-1"}}
        yield mock_post
