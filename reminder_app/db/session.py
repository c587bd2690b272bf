from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from reminder_app.core.config import settings


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # The sweeper and request handlers use the engine from different threads
        return {"connect_args": {"check_same_thread": False}, "echo": False}
    # PostgreSQL configuration with connection pooling
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 300,   # Recycle connections every 5 minutes
        "pool_pre_ping": True,  # Validate connections before use
        "pool_timeout": 30,
        "echo": False,          # Set to True for SQL logging
    }


engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, **_engine_kwargs())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
