from .user import User, UserCreate, LoginRequest, AuthResponse, Token, TokenPayload
from .reminder import ReminderCreate, ReminderUpdate, ReminderRead, ALLOWED_UPDATE_FIELDS
from .notifications import NotificationSettings, PushTokenUpdate
