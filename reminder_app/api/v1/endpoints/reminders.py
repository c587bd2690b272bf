import logging
from typing import Any, Dict, List

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from reminder_app import crud
from reminder_app.api import deps
from reminder_app.models.user import User
from reminder_app.reminders.dispatcher import dispatch_expiry_push
from reminder_app.reminders.lifecycle import normalize_changes, reconcile_status
from reminder_app.reminders.metrics import reminders_created_total
from reminder_app.schemas.reminder import ALLOWED_UPDATE_FIELDS, ReminderCreate, ReminderRead, ReminderUpdate
from reminder_app.utils.timezone import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Reminder not found")


@router.post("", response_model=ReminderRead, status_code=status.HTTP_201_CREATED)
def create_reminder_endpoint(
    payload: ReminderCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    reminder = crud.reminder.create(db, user_id=current_user.id, obj_in=payload)
    reminders_created_total.inc()
    logger.info(f"[Reminders] Created {reminder.id} for user {current_user.id} due {reminder.due_date.isoformat()}")
    return reminder


@router.get("", response_model=List[ReminderRead])
def list_reminders_endpoint(
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """All of the caller's reminders, soonest first, each status-reconciled."""
    items = crud.reminder.list_for_user(db, user_id=current_user.id)
    now = utc_now()
    for item in items:
        if reconcile_status(db, item, now=now):
            background_tasks.add_task(dispatch_expiry_push, item.id)
    return items


@router.get("/{reminder_id}", response_model=ReminderRead)
def get_reminder_endpoint(
    reminder_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    reminder = crud.reminder.get(db, reminder_id=reminder_id, user_id=current_user.id)
    if not reminder:
        raise _not_found()
    if reconcile_status(db, reminder):
        background_tasks.add_task(dispatch_expiry_push, reminder.id)
    return reminder


@router.patch("/{reminder_id}", response_model=ReminderRead)
def update_reminder_endpoint(
    reminder_id: str,
    background_tasks: BackgroundTasks,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """Partial update. Any field outside the allowed set rejects the whole body."""
    unknown = set(payload) - ALLOWED_UPDATE_FIELDS
    if unknown:
        raise HTTPException(status_code=400, detail=f"Invalid updates: {', '.join(sorted(unknown))}")
    try:
        update_in = ReminderUpdate.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail="; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()),
        )

    reminder = crud.reminder.get(db, reminder_id=reminder_id, user_id=current_user.id)
    if not reminder:
        raise _not_found()

    changes = normalize_changes(reminder, update_in.model_dump(exclude_unset=True))
    reminder = crud.reminder.update(db, db_obj=reminder, changes=changes)
    if reconcile_status(db, reminder):
        background_tasks.add_task(dispatch_expiry_push, reminder.id)
    return reminder


@router.delete("/{reminder_id}", response_model=ReminderRead)
def delete_reminder_endpoint(
    reminder_id: str,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    reminder = crud.reminder.remove(db, reminder_id=reminder_id, user_id=current_user.id)
    if not reminder:
        raise _not_found()
    return reminder
