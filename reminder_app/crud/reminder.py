from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from reminder_app.models.reminder import Reminder, ReminderStatus
from reminder_app.schemas.reminder import ReminderCreate
from reminder_app.utils.timezone import utc_now


class CRUDReminder:
    """Owner-scoped persistence for reminders.

    Every read and write that originates from a user request filters on
    ``user_id``; only the expiry sweep queries across owners.
    """

    def create(self, db: Session, *, user_id: int, obj_in: ReminderCreate) -> Reminder:
        db_obj = Reminder(
            user_id=user_id,
            title=obj_in.title,
            description=obj_in.description,
            due_date=obj_in.due_date,
            priority=obj_in.priority.value,
            status=ReminderStatus.PENDING.value,
            completed=False,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, *, reminder_id: str, user_id: int) -> Optional[Reminder]:
        return (
            db.query(Reminder)
            .filter(Reminder.id == reminder_id, Reminder.user_id == user_id)
            .first()
        )

    def list_for_user(self, db: Session, *, user_id: int) -> List[Reminder]:
        stmt = (
            select(Reminder)
            .where(Reminder.user_id == user_id)
            .order_by(Reminder.due_date.asc())
        )
        return list(db.execute(stmt).scalars())

    def update(self, db: Session, *, db_obj: Reminder, changes: Dict[str, Any]) -> Reminder:
        for field, value in changes.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, reminder_id: str, user_id: int) -> Optional[Reminder]:
        db_obj = self.get(db, reminder_id=reminder_id, user_id=user_id)
        if not db_obj:
            return None
        db.delete(db_obj)
        db.commit()
        return db_obj

    def get_overdue(self, db: Session, *, now: datetime, limit: int = 500) -> List[Reminder]:
        stmt = (
            select(Reminder)
            .where(Reminder.status == ReminderStatus.PENDING.value)
            .where(Reminder.due_date < now)
            .order_by(Reminder.due_date.asc())
            .limit(limit)
        )
        return list(db.execute(stmt).scalars())

    def expire_if_pending(self, db: Session, *, reminder_id: str, now: datetime) -> bool:
        """Conditionally move one reminder to expired.

        The WHERE clause re-checks status and due date at write time, so a
        concurrent edit that completed the reminder (or moved it into the
        future) is never overwritten. Returns True only for the caller whose
        write actually flipped the row.
        """
        result = db.execute(
            update(Reminder)
            .where(Reminder.id == reminder_id)
            .where(Reminder.status == ReminderStatus.PENDING.value)
            .where(Reminder.due_date < now)
            .values(status=ReminderStatus.EXPIRED.value, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount == 1


reminder = CRUDReminder()
