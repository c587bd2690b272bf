# Tests for push-token registration and notification settings.

from tests.helpers import EXPO_TOKEN, fetch_user

BASE = "/api/v1/notifications"


class TestPushToken:
    def test_register_and_clear(self, client, make_user):
        account = make_user()
        resp = client.put(f"{BASE}/push-token", json={"push_token": EXPO_TOKEN}, headers=account["headers"])
        assert resp.status_code == 204
        assert fetch_user(account["id"]).push_token == EXPO_TOKEN

        resp = client.delete(f"{BASE}/push-token", headers=account["headers"])
        assert resp.status_code == 204
        assert fetch_user(account["id"]).push_token is None

    def test_empty_token_rejected(self, client, make_user):
        account = make_user()
        resp = client.put(f"{BASE}/push-token", json={"push_token": ""}, headers=account["headers"])
        assert resp.status_code == 422

    def test_requires_auth(self, client):
        assert client.put(f"{BASE}/push-token", json={"push_token": EXPO_TOKEN}).status_code == 401


class TestNotificationSettings:
    def test_enabled_by_default(self, client, make_user):
        account = make_user()
        resp = client.get(f"{BASE}/settings", headers=account["headers"])
        assert resp.status_code == 200
        assert resp.json() == {"notifications_enabled": True}

    def test_disable(self, client, make_user):
        account = make_user()
        resp = client.put(f"{BASE}/settings", json={"notifications_enabled": False}, headers=account["headers"])
        assert resp.json() == {"notifications_enabled": False}
        assert client.get(f"{BASE}/settings", headers=account["headers"]).json() == {"notifications_enabled": False}

    def test_disabled_user_gets_no_expiry_push(self, client, user, insert_reminder, expo_post):
        client.put(f"{BASE}/settings", json={"notifications_enabled": False}, headers=user["headers"])
        overdue = insert_reminder(user["id"])

        resp = client.get(f"/api/v1/reminders/{overdue.id}", headers=user["headers"])
        assert resp.json()["status"] == "expired"
        expo_post.assert_not_called()
