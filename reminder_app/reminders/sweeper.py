"""
Expiry sweeper - periodic scan that moves overdue pending reminders to expired
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from reminder_app import crud
from reminder_app.core.config import settings
from reminder_app.core.database_utils import get_db_session
from reminder_app.db.session import SessionLocal
from reminder_app.models.reminder import Reminder
from reminder_app.utils.timezone import utc_now
from .dispatcher import notify_reminder_expired
from .metrics import reminders_expired_total, sweeper_runs_total, sweeper_errors_total

logger = logging.getLogger(__name__)

Notifier = Callable[[Session, Reminder], bool]


class ExpirySweeper:
    """
    Owns the recurring expiry check for one server process.

    ``start()``/``stop()`` are tied to the application lifespan; ``sweep_once()``
    is the unit of work and can be driven directly (tests, admin scripts).
    Each transition is a conditional write, so a manual edit that lands
    between the scan and the write is never overwritten.
    """

    def __init__(
        self,
        interval_seconds: Optional[int] = None,
        batch_size: Optional[int] = None,
        session_factory: Callable[[], Session] = SessionLocal,
        notifier: Notifier = notify_reminder_expired,
    ):
        self.interval_seconds = settings.SWEEPER_INTERVAL_SECONDS if interval_seconds is None else interval_seconds
        self.batch_size = settings.SWEEPER_BATCH_SIZE if batch_size is None else batch_size
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        self.session_factory = session_factory
        self.notifier = notifier

        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    def sweep_once(self, now: Optional[datetime] = None) -> List[str]:
        """Expire every overdue pending reminder. Returns the ids this run expired.

        Overdue rows are fetched ``batch_size`` at a time until a short batch
        shows nothing is left. Expired rows drop out of the pending filter, so
        each query only returns rows not yet handled.
        """
        now = now or utc_now()
        expired_ids: List[str] = []
        sweeper_runs_total.inc()

        with get_db_session(self.session_factory) as db:
            while True:
                candidates = crud.reminder.get_overdue(db, now=now, limit=self.batch_size)
                for reminder in candidates:
                    if self._expire(db, reminder, now):
                        expired_ids.append(reminder.id)
                if len(candidates) < self.batch_size:
                    break

        if expired_ids:
            logger.info(f"📊 [Sweeper] Expired {len(expired_ids)} reminder(s)")
        return expired_ids

    def _expire(self, db: Session, reminder: Reminder, now: datetime) -> bool:
        if not crud.reminder.expire_if_pending(db, reminder_id=reminder.id, now=now):
            # Completed or rescheduled since the scan
            return False
        reminders_expired_total.labels(source="sweep").inc()
        db.refresh(reminder)
        logger.info(f"⏰ [Sweeper] Reminder {reminder.id} expired (due {reminder.due_date.isoformat()})")
        try:
            self.notifier(db, reminder)
        except Exception as e:
            # Push failure never rolls back the status change
            logger.error(f"❌ [Sweeper] Push for reminder {reminder.id} failed: {e!r}")
        return True

    async def start(self):
        """Start the background sweep loop"""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info(f"🚀 [Sweeper] Started with {self.interval_seconds}s interval")

    async def stop(self):
        """Stop the background sweep loop"""
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("[Sweeper] Stopped")

    async def _sweep_loop(self):
        while self._running:
            try:
                await asyncio.to_thread(self.sweep_once)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Next tick retries the full scan
                sweeper_errors_total.inc()
                logger.error(f"❌ [Sweeper] Sweep failed: {e!r}")
            await asyncio.sleep(self.interval_seconds)
