from typing import Dict, Any, Optional
import json
import logging
import os

import requests
from firebase_admin import messaging, credentials, initialize_app, _apps  # type: ignore
from sqlalchemy.orm import Session

from reminder_app.core.config import settings
from reminder_app.core.database_utils import get_db_session
from reminder_app.models.reminder import Reminder
from reminder_app.models.user import User
from .metrics import push_dispatch_success_total, push_dispatch_failed_total

logger = logging.getLogger(__name__)

EXPO_TOKEN_PREFIXES = ("ExponentPushToken[", "ExpoPushToken[")


def is_expo_token(token: str) -> bool:
    return token.startswith(EXPO_TOKEN_PREFIXES)


def build_expiry_message(reminder: Reminder, token: str) -> Dict[str, Any]:
    return {
        "to": token,
        "sound": "default",
        "title": "Reminder Expired",
        "body": f'Your reminder "{reminder.title}" has expired',
        "data": {"reminderId": str(reminder.id)},
    }


def _ensure_firebase_initialized() -> bool:
    if _apps:
        return True

    proj = settings.FCM_PROJECT_ID
    creds_json: Optional[str] = settings.FCM_CREDENTIALS_JSON or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if not creds_json or creds_json.strip() == "":
        logger.warning("⚠️ [Push] No FCM credentials provided - FCM push notifications are disabled")
        return False

    try:
        if creds_json.strip().startswith("{"):
            cred = credentials.Certificate(json.loads(creds_json))
        else:
            cred = credentials.Certificate(creds_json)
        initialize_app(cred, options={"projectId": proj} if proj else None)
        logger.info(f"✅ [Push] Firebase app initialized | project_id={proj}")
        return True
    except Exception as e:
        logger.error(f"❌ [Push] Failed to initialize Firebase: {e!r}")
        return False


def send_via_expo(message: Dict[str, Any]) -> bool:
    response = requests.post(
        settings.EXPO_PUSH_URL,
        json=message,
        headers={
            "Accept": "application/json",
            "Accept-encoding": "gzip, deflate",
            "Content-Type": "application/json",
        },
        timeout=settings.PUSH_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    ticket = (response.json() or {}).get("data")
    if isinstance(ticket, list):
        ticket = ticket[0] if ticket else None
    if isinstance(ticket, dict) and ticket.get("status") == "error":
        logger.warning(f"❌ [Push] Expo rejected message: {ticket.get('message')}")
        return False
    return True


def send_via_fcm(message: Dict[str, Any]) -> bool:
    if not _ensure_firebase_initialized():
        return False
    fcm_message = messaging.Message(
        token=message["to"],
        notification=messaging.Notification(title=message["title"], body=message["body"]),
        data={key: str(value) for key, value in message.get("data", {}).items()},
        apns=messaging.APNSConfig(headers={"apns-push-type": "alert", "apns-priority": "10"}),
    )
    result = messaging.send(fcm_message, dry_run=False)
    logger.debug(f"[Push] FCM message id: {result}")
    return True


def send_push(message: Dict[str, Any]) -> bool:
    """Best-effort delivery. Never raises; returns whether the provider accepted the message."""
    token = message.get("to") or ""
    provider = "expo" if is_expo_token(token) else "fcm"
    try:
        logger.info(f"🚀 [Push] Sending via {provider} to token: {token[:20]}...")
        ok = send_via_expo(message) if provider == "expo" else send_via_fcm(message)
    except Exception as e:
        logger.error(f"❌ [Push] Failed to send notification via {provider}: {e!r}")
        ok = False

    if ok:
        push_dispatch_success_total.inc()
        logger.info(f"✅ [Push] Notification sent | reminder={message.get('data', {}).get('reminderId')}")
    else:
        push_dispatch_failed_total.inc()
    return ok


def notify_reminder_expired(db: Session, reminder: Reminder) -> bool:
    """Push an expiry notice to the reminder owner's registered device, if any."""
    if not settings.PUSH_ENABLED:
        return False
    user = db.get(User, reminder.user_id)
    if not user or not user.push_token:
        logger.debug(f"[Push] No push token for user {reminder.user_id}; skipping reminder {reminder.id}")
        return False
    if not user.notifications_enabled:
        logger.debug(f"[Push] Notifications disabled for user {user.id}; skipping reminder {reminder.id}")
        return False
    return send_push(build_expiry_message(reminder, user.push_token))


def dispatch_expiry_push(reminder_id: str) -> None:
    """Background-task entry point used by request handlers after an inline expiry."""
    try:
        with get_db_session() as db:
            reminder = db.get(Reminder, reminder_id)
            if reminder is not None:
                notify_reminder_expired(db, reminder)
    except Exception as e:
        logger.error(f"❌ [Push] Expiry push for reminder {reminder_id} failed: {e!r}")
