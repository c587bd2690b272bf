from pydantic import BaseModel, Field


class NotificationSettings(BaseModel):
    notifications_enabled: bool


class PushTokenUpdate(BaseModel):
    push_token: str = Field(..., min_length=1)
