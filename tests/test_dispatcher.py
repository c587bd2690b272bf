# Tests for push delivery: provider routing, failure handling and recipient checks.

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import requests

from reminder_app.core.config import settings
from reminder_app.reminders import dispatcher
from reminder_app.reminders.dispatcher import (
    build_expiry_message,
    dispatch_expiry_push,
    is_expo_token,
    notify_reminder_expired,
    send_push,
)
from tests.helpers import EXPO_TOKEN


def _reminder(title="Call mom"):
    return SimpleNamespace(id="abc123", user_id=1, title=title)


def _db_with_user(**fields):
    user = SimpleNamespace(id=1, push_token=EXPO_TOKEN, notifications_enabled=True)
    for key, value in fields.items():
        setattr(user, key, value)
    db = MagicMock()
    db.get.return_value = user
    return db


class TestExpiryMessage:
    def test_message_shape(self):
        message = build_expiry_message(_reminder(), EXPO_TOKEN)
        assert message == {
            "to": EXPO_TOKEN,
            "sound": "default",
            "title": "Reminder Expired",
            "body": 'Your reminder "Call mom" has expired',
            "data": {"reminderId": "abc123"},
        }

    def test_expo_token_detection(self):
        assert is_expo_token("ExponentPushToken[xyz]")
        assert is_expo_token("ExpoPushToken[xyz]")
        assert not is_expo_token("fcm-registration-token")


class TestSendPush:
    def test_expo_delivery(self, expo_post):
        message = build_expiry_message(_reminder(), EXPO_TOKEN)
        assert send_push(message) is True
        expo_post.assert_called_once()
        args, kwargs = expo_post.call_args
        assert args[0] == settings.EXPO_PUSH_URL
        assert kwargs["json"] == message
        assert kwargs["timeout"] == settings.PUSH_TIMEOUT_SECONDS

    def test_expo_error_ticket_is_failure(self, expo_post):
        expo_post.return_value.json.return_value = {
            "data": {"status": "error", "message": "DeviceNotRegistered"}
        }
        assert send_push(build_expiry_message(_reminder(), EXPO_TOKEN)) is False

    def test_transport_error_never_raises(self, expo_post):
        expo_post.side_effect = requests.Timeout("timed out")
        assert send_push(build_expiry_message(_reminder(), EXPO_TOKEN)) is False

    def test_http_error_never_raises(self, expo_post):
        expo_post.return_value.raise_for_status.side_effect = requests.HTTPError("502 Bad Gateway")
        assert send_push(build_expiry_message(_reminder(), EXPO_TOKEN)) is False

    @patch("reminder_app.reminders.dispatcher.send_via_fcm", return_value=True)
    def test_non_expo_token_goes_to_fcm(self, mock_fcm, expo_post):
        message = build_expiry_message(_reminder(), "fcm-registration-token")
        assert send_push(message) is True
        mock_fcm.assert_called_once_with(message)
        expo_post.assert_not_called()

    @patch("reminder_app.reminders.dispatcher._ensure_firebase_initialized", return_value=False)
    def test_fcm_without_credentials_is_failure(self, _mock_init):
        assert send_push(build_expiry_message(_reminder(), "fcm-registration-token")) is False


class TestNotifyReminderExpired:
    def test_sends_to_owner_token(self, expo_post):
        assert notify_reminder_expired(_db_with_user(), _reminder()) is True
        assert expo_post.call_args.kwargs["json"]["to"] == EXPO_TOKEN

    def test_no_token_skips(self, expo_post):
        assert notify_reminder_expired(_db_with_user(push_token=None), _reminder()) is False
        expo_post.assert_not_called()

    def test_notifications_disabled_skips(self, expo_post):
        assert notify_reminder_expired(_db_with_user(notifications_enabled=False), _reminder()) is False
        expo_post.assert_not_called()

    def test_push_disabled_globally(self, expo_post):
        with patch.object(dispatcher.settings, "PUSH_ENABLED", False):
            assert notify_reminder_expired(_db_with_user(), _reminder()) is False
        expo_post.assert_not_called()

    def test_dispatch_for_deleted_reminder_is_quiet(self, expo_post):
        dispatch_expiry_push("no-such-reminder")
        expo_post.assert_not_called()
