from datetime import datetime, timedelta, timezone

from reminder_app.db.session import SessionLocal
from reminder_app.models import Reminder, User

EXPO_TOKEN = "ExponentPushToken[test-device]"


def future_iso(**delta) -> str:
    return (datetime.now(timezone.utc) + timedelta(**delta)).isoformat()


def fetch_reminder(reminder_id: str):
    with SessionLocal() as session:
        return session.get(Reminder, reminder_id)


def fetch_user(user_id: int):
    with SessionLocal() as session:
        return session.get(User, user_id)


class FakeClock:
    """Manually advanced epoch-seconds clock for the local notification scheduler."""

    def __init__(self, start: float):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_to(self, moment: datetime) -> None:
        self.now = moment.timestamp()
