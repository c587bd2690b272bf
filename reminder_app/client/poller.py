"""Client poller: keeps the visible reminder list fresh while the list has focus."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from .api import ReminderAPI, ReminderAPIError, UnauthorizedError
from .config import get_client_settings

logger = logging.getLogger(__name__)

ReminderList = List[Dict[str, Any]]


class ReminderListPoller:
    """
    Re-fetches the current user's reminders on a fixed interval.

    ``focus()`` loads immediately and keeps polling until ``blur()``; each
    successful response replaces the list verbatim. A failed request keeps
    the previous list, reports through ``on_error`` and the next tick tries
    again. A 401 clears the stored token and stops polling. One instance
    never runs two polling threads at once.
    """

    def __init__(
        self,
        api: ReminderAPI,
        interval_seconds: Optional[float] = None,
        on_update: Optional[Callable[[ReminderList], None]] = None,
        on_error: Optional[Callable[[ReminderAPIError], None]] = None,
    ) -> None:
        self.api = api
        self.interval_seconds = (
            get_client_settings().poll_interval_seconds if interval_seconds is None else interval_seconds
        )
        self.on_update = on_update
        self.on_error = on_error

        self._reminders: ReminderList = []
        self._lock = threading.Lock()
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def reminders(self) -> ReminderList:
        with self._lock:
            return list(self._reminders)

    @property
    def is_polling(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def focus(self) -> None:
        if self.is_polling:
            return
        stop = threading.Event()
        self._stop = stop
        self._thread = threading.Thread(target=self._runner, args=(stop,), daemon=True)
        self._thread.start()
        logger.debug("[Poller] Started")

    def blur(self, timeout: float = 2.0) -> None:
        if self._stop is not None:
            self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self._thread = None
        logger.debug("[Poller] Stopped")

    def refresh(self, stop: Optional[threading.Event] = None) -> bool:
        """Fetch once. Returns True when the list was replaced."""
        if not self.api.has_token:
            logger.debug("[Poller] No token stored; skipping refresh")
            return False
        try:
            data = self.api.list_reminders()
        except UnauthorizedError as e:
            # Dead token: drop it and stop; the caller sends the user to log in
            logger.warning(f"[Poller] Session rejected, logging out: {e.message}")
            self.api.logout()
            self.blur()
            if self.on_error:
                self.on_error(e)
            return False
        except ReminderAPIError as e:
            logger.error(f"[Poller] Failed to load reminders: {e.message}")
            if self.on_error:
                self.on_error(e)
            return False

        # A response that lands after blur() belongs to a stopped poll
        if stop is not None and stop.is_set():
            return False
        with self._lock:
            self._reminders = list(data)
        if self.on_update:
            self.on_update(self.reminders)
        return True

    def delete_reminder(self, reminder_id: str) -> None:
        """Delete from the list view, then reload straight away."""
        self.api.delete_reminder(reminder_id)
        self.refresh()

    def _runner(self, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                self.refresh(stop)
            except Exception:
                logger.exception("[Poller] Unexpected error during refresh")
            stop.wait(self.interval_seconds)
