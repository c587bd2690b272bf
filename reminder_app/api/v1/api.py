from fastapi import APIRouter

from reminder_app.api.v1.endpoints import auth
from reminder_app.api.v1.endpoints import reminders
from reminder_app.api.v1.endpoints import notifications

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
