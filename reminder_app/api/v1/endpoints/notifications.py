from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from reminder_app import crud
from reminder_app.api import deps
from reminder_app.models.user import User
from reminder_app.schemas.notifications import NotificationSettings, PushTokenUpdate


router = APIRouter()


@router.get("/settings", response_model=NotificationSettings)
def get_notification_settings(
    current_user: User = Depends(deps.get_current_active_user),
):
    return NotificationSettings(notifications_enabled=current_user.notifications_enabled)


@router.put("/settings", response_model=NotificationSettings)
def update_notification_settings(
    payload: NotificationSettings,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    user = crud.user.set_notifications_enabled(db, db_obj=current_user, enabled=payload.notifications_enabled)
    return NotificationSettings(notifications_enabled=user.notifications_enabled)


@router.put("/push-token", status_code=204)
def register_push_token(
    payload: PushTokenUpdate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """Store the device token expiry pushes are delivered to."""
    crud.user.set_push_token(db, db_obj=current_user, push_token=payload.push_token)
    return Response(status_code=204)


@router.delete("/push-token", status_code=204)
def clear_push_token(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    crud.user.set_push_token(db, db_obj=current_user, push_token=None)
    return Response(status_code=204)
