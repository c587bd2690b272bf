"""Create/edit flow for a single reminder, plus the device-notification side effects."""

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable, Dict, Optional

from reminder_app.utils.timezone import to_utc_aware
from .api import ReminderAPI
from .navigation import HOME_SCREEN, Navigator
from .notifications import LocalNotificationScheduler

logger = logging.getLogger(__name__)


class ReminderValidationError(ValueError):
    def __init__(self, title: str, message: str):
        super().__init__(message)
        self.title = title
        self.message = message


def validate_reminder_input(title: str, due_date: datetime, now: Optional[datetime] = None) -> str:
    """Return the trimmed title, or raise ReminderValidationError.

    The due date is compared against the wall clock at submit time only.
    """
    clean_title = (title or "").strip()
    if not clean_title:
        raise ReminderValidationError("Missing Title", "Please enter a title for your reminder.")
    now = to_utc_aware(now) if now else datetime.now(dt_timezone.utc)
    if to_utc_aware(due_date) < now:
        raise ReminderValidationError("Invalid Date", "You cannot set a reminder in the past.")
    return clean_title


class ReminderEditor:
    def __init__(
        self,
        api: ReminderAPI,
        scheduler: LocalNotificationScheduler,
        navigator: Optional[Navigator] = None,
        reminder_id: Optional[str] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.api = api
        self.scheduler = scheduler
        self.navigator = navigator
        self.reminder_id = reminder_id
        self._now = now

    @property
    def is_editing(self) -> bool:
        return self.reminder_id is not None

    def save(
        self,
        title: str,
        due_date: datetime,
        description: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Dict[str, Any]:
        clean_title = validate_reminder_input(title, due_date, now=self._now() if self._now else None)

        if self.reminder_id:
            changes: Dict[str, Any] = {"title": clean_title, "dueDate": due_date, "status": "pending"}
            if description is not None:
                changes["description"] = description
            if priority is not None:
                changes["priority"] = priority
            saved = self.api.update_reminder(self.reminder_id, changes)
        else:
            saved = self.api.create_reminder(clean_title, due_date, description=description, priority=priority)

        # schedule() drops any earlier notification for the same reminder
        self.scheduler.schedule(saved["id"], clean_title, due_date)
        logger.info(f"[Editor] Saved reminder {saved['id']} ({'updated' if self.is_editing else 'created'})")

        if self.navigator:
            self.navigator.navigate(HOME_SCREEN)
        return saved
