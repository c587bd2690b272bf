from .user import User
from .reminder import Reminder, ReminderPriority, ReminderStatus
