"""
Database utility functions for consistent session management across the application.

Request handlers receive their session from the ``get_db`` dependency; background
work (the expiry sweeper, push dispatch) opens sessions through ``get_db_session``.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy import inspect, text
from sqlalchemy.orm import Session

from reminder_app.db.session import SessionLocal

logger = logging.getLogger(__name__)


@contextmanager
def get_db_session(session_factory: Optional[Callable[[], Session]] = None) -> Generator[Session, None, None]:
    """
    Get a database session with proper cleanup using context manager.

    Commits on success, rolls back and re-raises on any exception.

    Usage:
        with get_db_session() as db:
            result = db.query(Model).all()
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        db.close()


def ping_database(db: Session) -> bool:
    """Return True when a trivial statement round-trips."""
    db.execute(text("SELECT 1"))
    return True


def get_missing_tables(db: Session, required_tables: list[str]) -> list[str]:
    inspector = inspect(db.bind)
    existing_tables = inspector.get_table_names()
    return [table for table in required_tables if table not in existing_tables]
