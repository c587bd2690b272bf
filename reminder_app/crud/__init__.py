from .user import user
from .reminder import reminder

__all__ = ["user", "reminder"]
