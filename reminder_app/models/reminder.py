"""
Reminder model - one row per user-owned, time-based reminder
"""
from reminder_app.utils.timezone import utc_now
from enum import Enum
import uuid

from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship

from reminder_app.db.base import Base


class ReminderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


def _new_id() -> str:
    return uuid.uuid4().hex


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    # Stored as UTC-naive
    due_date = Column(DateTime, nullable=False, index=True)
    priority = Column(String(16), nullable=False, default=ReminderPriority.MEDIUM.value)
    status = Column(String(16), nullable=False, default=ReminderStatus.PENDING.value)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="reminders")

    __table_args__ = (
        Index("ix_reminders_status_due", "status", "due_date"),
        Index("ix_reminders_user_due", "user_id", "due_date"),
    )
