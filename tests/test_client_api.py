# Tests for the REST client and the token store.

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from reminder_app.client.api import ReminderAPI, ReminderAPIError, UnauthorizedError
from reminder_app.client.storage import TokenStore

BASE_URL = "http://api.test/api/v1"


def _response(status_code=200, body=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = b"" if body is None else b"{}"
    resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def store():
    return TokenStore()


@pytest.fixture
def api(session, store):
    return ReminderAPI(base_url=BASE_URL + "/", token_store=store, timeout=5, session=session)


class TestRequests:
    def test_bearer_token_sent(self, api, session, store):
        store.save("abc")
        session.request.return_value = _response(200, [])

        assert api.list_reminders() == []
        session.request.assert_called_once_with(
            "GET",
            f"{BASE_URL}/reminders",
            json=None,
            headers={"Content-Type": "application/json", "Authorization": "Bearer abc"},
            timeout=5,
        )

    def test_no_token_no_auth_header(self, api, session):
        session.request.return_value = _response(200, [])
        api.list_reminders()
        assert "Authorization" not in session.request.call_args.kwargs["headers"]

    def test_login_stores_token(self, api, session, store):
        session.request.return_value = _response(200, {"access_token": "jwt-1", "token_type": "bearer"})
        api.login("alex@example.com", "secret123")
        assert store.get() == "jwt-1"
        assert api.has_token

        api.logout()
        assert not api.has_token

    def test_401_raises_unauthorized(self, api, session):
        session.request.return_value = _response(401, {"error": True, "message": "Could not validate credentials"})
        with pytest.raises(UnauthorizedError) as exc:
            api.list_reminders()
        assert exc.value.status_code == 401
        assert exc.value.message == "Could not validate credentials"

    def test_error_message_from_body(self, api, session):
        session.request.return_value = _response(400, {"error": True, "message": "Invalid updates: foo"})
        with pytest.raises(ReminderAPIError) as exc:
            api.update_reminder("r1", {"foo": 1})
        assert exc.value.status_code == 400
        assert "Invalid updates" in exc.value.message

    def test_validation_error_detail(self, api, session):
        session.request.return_value = _response(422, {"detail": [{"msg": "field required"}]})
        with pytest.raises(ReminderAPIError) as exc:
            api.get_reminder("r1")
        assert exc.value.status_code == 422

    def test_unparseable_error_body(self, api, session):
        resp = _response(502)
        resp.json.side_effect = ValueError("not json")
        session.request.return_value = resp
        with pytest.raises(ReminderAPIError) as exc:
            api.list_reminders()
        assert exc.value.message == "HTTP 502"

    def test_transport_error_wrapped(self, api, session):
        session.request.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(ReminderAPIError) as exc:
            api.list_reminders()
        assert exc.value.status_code is None

    def test_no_content(self, api, session):
        session.request.return_value = _response(204)
        assert api.register_push_token("ExponentPushToken[abc]") is None


class TestReminderCalls:
    def test_create_sends_pending_and_iso_due_date(self, api, session):
        session.request.return_value = _response(201, {"id": "r1"})
        due = datetime(2030, 1, 1, 9, 30, tzinfo=timezone.utc)

        api.create_reminder("Call mom", due, priority="high")
        args, kwargs = session.request.call_args
        assert args == ("POST", f"{BASE_URL}/reminders")
        assert kwargs["json"] == {
            "title": "Call mom",
            "dueDate": "2030-01-01T09:30:00+00:00",
            "status": "pending",
            "priority": "high",
        }

    def test_update_serializes_datetimes(self, api, session):
        session.request.return_value = _response(200, {"id": "r1"})
        api.update_reminder("r1", {"dueDate": datetime(2030, 1, 1, 9, 30), "title": "x"})
        assert session.request.call_args.kwargs["json"] == {"dueDate": "2030-01-01T09:30:00+00:00", "title": "x"}

    def test_mark_completed(self, api, session):
        session.request.return_value = _response(200, {"id": "r1", "status": "completed"})
        api.mark_completed("r1")
        args, kwargs = session.request.call_args
        assert args == ("PATCH", f"{BASE_URL}/reminders/r1")
        assert kwargs["json"] == {"status": "completed", "completed": True}

    def test_delete(self, api, session):
        session.request.return_value = _response(200, {"id": "r1"})
        assert api.delete_reminder("r1") == {"id": "r1"}
        assert session.request.call_args.args == ("DELETE", f"{BASE_URL}/reminders/r1")


class TestTokenStore:
    def test_persists_between_instances(self, tmp_path):
        path = tmp_path / "auth" / "token.json"
        TokenStore(str(path)).save("jwt-1")
        assert TokenStore(str(path)).get() == "jwt-1"

    def test_clear_removes_file(self, tmp_path):
        path = tmp_path / "token.json"
        store = TokenStore(str(path))
        store.save("jwt-1")
        store.clear()
        assert store.get() is None
        assert not path.exists()

    def test_unreadable_file_means_logged_out(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text("{not json", encoding="utf-8")
        assert TokenStore(str(path)).get() is None
