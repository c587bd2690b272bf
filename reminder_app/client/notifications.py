"""On-device notification scheduler.

Stands in for the phone's notification subsystem: one pending notification
per reminder id, fired from a background thread at its due time, reported
back to the app as inbound events (delivered while foregrounded, or tapped).
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from reminder_app.utils.timezone import to_utc_aware

logger = logging.getLogger(__name__)

DEFAULT_BODY = "Time for your reminder!"


class NotificationEventKind(str, Enum):
    DELIVERED = "delivered"
    TAPPED = "tapped"


@dataclass(frozen=True)
class LocalNotification:
    identifier: str
    title: str
    body: str
    fire_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NotificationEvent:
    kind: NotificationEventKind
    notification: LocalNotification

    @property
    def reminder_id(self) -> Optional[str]:
        return self.notification.data.get("reminderId")


Listener = Callable[[NotificationEvent], None]


@dataclass(order=True)
class _Scheduled:
    run_at: float
    seq: int
    notification: LocalNotification = field(compare=False)


class Subscription:
    def __init__(self, listeners: List[Listener], callback: Listener, lock: threading.Lock):
        self._listeners = listeners
        self._callback = callback
        self._lock = lock

    def remove(self) -> None:
        with self._lock:
            if self._callback in self._listeners:
                self._listeners.remove(self._callback)


class LocalNotificationScheduler:
    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        tick_seconds: float = 0.25,
        foreground: bool = True,
        autostart: bool = True,
    ) -> None:
        self._clock = clock
        self._tick_seconds = tick_seconds
        self._foreground = foreground

        self._queue: List[_Scheduled] = []
        self._pending: Dict[str, _Scheduled] = {}
        self._presented: Dict[str, LocalNotification] = {}
        self._seq = itertools.count()
        self._lock = threading.Lock()
        self._received_listeners: List[Listener] = []
        self._response_listeners: List[Listener] = []

        self._shutdown = threading.Event()
        self._thread: Optional[threading.Thread] = None
        if autostart:
            self.start()

    # --- lifecycle ---
    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._shutdown.clear()
        self._thread = threading.Thread(target=self._runner, daemon=True)
        self._thread.start()

    def shutdown(self) -> None:
        self._shutdown.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2)

    def set_foreground(self, foreground: bool) -> None:
        self._foreground = foreground

    # --- listeners ---
    def add_received_listener(self, callback: Listener) -> Subscription:
        """Called when a notification fires while the app is in the foreground."""
        with self._lock:
            self._received_listeners.append(callback)
        return Subscription(self._received_listeners, callback, self._lock)

    def add_response_listener(self, callback: Listener) -> Subscription:
        """Called when the user taps a delivered notification."""
        with self._lock:
            self._response_listeners.append(callback)
        return Subscription(self._response_listeners, callback, self._lock)

    # --- scheduling ---
    def schedule(
        self,
        reminder_id: str,
        title: str,
        fire_at: datetime,
        body: str = DEFAULT_BODY,
    ) -> Optional[str]:
        """Replace any pending notification for ``reminder_id`` with one firing at ``fire_at``.

        Returns the notification identifier, or None when ``fire_at`` is not
        in the future (the previous notification is still cancelled).
        """
        fire_at = to_utc_aware(fire_at)
        notification = LocalNotification(
            identifier=str(reminder_id),
            title=title,
            body=body,
            fire_at=fire_at,
            data={"reminderId": str(reminder_id)},
        )
        with self._lock:
            self._drop_pending(notification.identifier)
            if fire_at.timestamp() <= self._clock():
                logger.info(f"[LocalNotify] Not scheduling {reminder_id}: due time already passed")
                return None
            entry = _Scheduled(run_at=fire_at.timestamp(), seq=next(self._seq), notification=notification)
            self._pending[notification.identifier] = entry
            heapq.heappush(self._queue, entry)
        logger.info(f"[LocalNotify] Scheduled {reminder_id} at {fire_at.isoformat()}")
        return notification.identifier

    def cancel(self, identifier: str) -> bool:
        with self._lock:
            removed = self._drop_pending(str(identifier))
        if removed:
            logger.info(f"[LocalNotify] Cancelled {identifier}")
        return removed

    def pending(self) -> List[LocalNotification]:
        with self._lock:
            entries = sorted(self._pending.values())
        return [entry.notification for entry in entries]

    def presented(self) -> List[LocalNotification]:
        with self._lock:
            return list(self._presented.values())

    # --- firing ---
    def fire_due(self, now: Optional[float] = None) -> List[LocalNotification]:
        """Deliver every notification whose time has come."""
        now = self._clock() if now is None else now
        fired: List[LocalNotification] = []
        with self._lock:
            foreground = self._foreground
            while self._queue and self._queue[0].run_at <= now:
                entry = heapq.heappop(self._queue)
                del self._pending[entry.notification.identifier]
                # Foreground deliveries are handled by the received listeners and never tapped
                if not foreground:
                    self._presented[entry.notification.identifier] = entry.notification
                fired.append(entry.notification)
            listeners = list(self._received_listeners) if foreground else []

        for notification in fired:
            logger.info(f"[LocalNotify] Delivered {notification.identifier} (foreground={foreground})")
            self._emit(listeners, NotificationEvent(NotificationEventKind.DELIVERED, notification))
        return fired

    def tap(self, identifier: str) -> bool:
        """The user tapped a delivered notification."""
        with self._lock:
            notification = self._presented.pop(str(identifier), None)
            listeners = list(self._response_listeners)
        if notification is None:
            return False
        logger.info(f"[LocalNotify] Tapped {identifier}")
        self._emit(listeners, NotificationEvent(NotificationEventKind.TAPPED, notification))
        return True

    def _drop_pending(self, identifier: str) -> bool:
        """Remove the pending entry for ``identifier`` from the index and the heap. Caller holds the lock."""
        entry = self._pending.pop(identifier, None)
        if entry is None:
            return False
        self._queue.remove(entry)
        heapq.heapify(self._queue)
        return True

    def _emit(self, listeners: List[Listener], event: NotificationEvent) -> None:
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"[LocalNotify] Listener failed for {event.kind.value} {event.notification.identifier}")

    def _runner(self) -> None:
        while not self._shutdown.is_set():
            self.fire_due()
            self._shutdown.wait(self._tick_seconds)
