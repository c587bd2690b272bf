"""
Status-transition rules shared by the API, the sweeper and the client.

    pending --(due time passes, sweep or inline check)--> expired
    pending --(local notification delivered/tapped)-----> completed
    any     --(explicit user edit of status)------------> any

The sweep and the inline check only ever act on pending reminders. Editing
the due date of an expired reminder into the future does not revert it to
pending; only an explicit status update does.
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from reminder_app import crud
from reminder_app.models.reminder import Reminder, ReminderStatus
from reminder_app.reminders.metrics import reminders_expired_total
from reminder_app.utils.timezone import utc_now

logger = logging.getLogger(__name__)


def is_overdue(reminder: Reminder, now: Optional[datetime] = None) -> bool:
    now = now or utc_now()
    return reminder.status == ReminderStatus.PENDING.value and reminder.due_date < now


def reconcile_status(db: Session, reminder: Reminder, now: Optional[datetime] = None) -> bool:
    """Expire ``reminder`` in place if it is overdue.

    Returns True when this call performed the pending -> expired transition,
    meaning the caller owns the follow-up push.
    """
    now = now or utc_now()
    if not is_overdue(reminder, now):
        return False
    flipped = crud.reminder.expire_if_pending(db, reminder_id=reminder.id, now=now)
    db.refresh(reminder)
    if flipped:
        reminders_expired_total.labels(source="inline").inc()
        logger.info(f"[Lifecycle] Reminder {reminder.id} expired on read (due {reminder.due_date.isoformat()})")
    return flipped


def normalize_changes(reminder: Reminder, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Turn validated PATCH fields into column values, keeping ``status`` and ``completed`` in step.

    - status set without completed: completed follows (status == completed)
    - completed=True without status: status becomes completed
    - completed=False without status: a completed reminder goes back to pending
    """
    values: Dict[str, Any] = {}
    for field, value in changes.items():
        values[field] = value.value if isinstance(value, Enum) else value

    if "status" in values and "completed" not in values:
        values["completed"] = values["status"] == ReminderStatus.COMPLETED.value
    elif "completed" in values and "status" not in values:
        if values["completed"]:
            values["status"] = ReminderStatus.COMPLETED.value
        elif reminder.status == ReminderStatus.COMPLETED.value:
            values["status"] = ReminderStatus.PENDING.value
    return values
