"""
Reminder request/response schemas.

The wire format is camelCase (``dueDate``, ``createdAt``) to match the mobile
client; attribute names stay snake_case.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from reminder_app.models.reminder import ReminderPriority, ReminderStatus
from reminder_app.utils.timezone import to_utc_aware, to_utc_naive, utc_now


# Wire names a PATCH body may carry; anything else rejects the whole update
ALLOWED_UPDATE_FIELDS = frozenset({"title", "description", "dueDate", "priority", "completed", "status"})


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("title must not be empty")
    return value


class ReminderCreate(BaseModel):
    """Schema for creating a reminder. Status is always forced to pending."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str
    description: Optional[str] = None
    due_date: datetime
    priority: ReminderPriority = ReminderPriority.MEDIUM
    status: Optional[ReminderStatus] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("due_date")
    @classmethod
    def due_date_not_in_past(cls, v: datetime) -> datetime:
        v = to_utc_naive(v)
        if v < utc_now():
            raise ValueError("dueDate cannot be in the past")
        return v


class ReminderUpdate(BaseModel):
    """Schema for partial updates; unknown fields are forbidden."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[ReminderPriority] = None
    completed: Optional[bool] = None
    status: Optional[ReminderStatus] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("title must not be null")
        return _clean_title(v)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            raise ValueError("dueDate must not be null")
        return to_utc_naive(v)

    # Defaults are not validated, so only an explicit null reaches these
    @field_validator("priority", "completed", "status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field must not be null")
        return v


class ReminderRead(BaseModel):
    """Schema for reading a reminder"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: int
    title: str
    description: Optional[str] = None
    due_date: datetime
    priority: ReminderPriority
    status: ReminderStatus
    completed: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def attach_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_aware(v)
