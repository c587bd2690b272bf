import logging
from typing import List, Optional

from .api import ReminderAPI, ReminderAPIError
from .navigation import HOME_SCREEN, Navigator
from .notifications import LocalNotificationScheduler, NotificationEvent, Subscription

logger = logging.getLogger(__name__)


class NotificationResponder:
    """
    Reconciles device notification events with server state.

    - delivered while foregrounded: mark the reminder completed
    - tapped: mark completed, then go back (or to the list if there is no history)
    """

    def __init__(self, api: ReminderAPI, scheduler: LocalNotificationScheduler, navigator: Optional[Navigator] = None):
        self.api = api
        self.scheduler = scheduler
        self.navigator = navigator
        self._subscriptions: List[Subscription] = []

    def attach(self) -> None:
        if self._subscriptions:
            return
        self._subscriptions = [
            self.scheduler.add_received_listener(self.handle_delivered),
            self.scheduler.add_response_listener(self.handle_tapped),
        ]

    def detach(self) -> None:
        for subscription in self._subscriptions:
            subscription.remove()
        self._subscriptions = []

    def handle_delivered(self, event: NotificationEvent) -> None:
        if event.reminder_id:
            self._mark_completed(event.reminder_id)

    def handle_tapped(self, event: NotificationEvent) -> None:
        if not event.reminder_id:
            return
        self._mark_completed(event.reminder_id)
        if self.navigator is None:
            return
        if self.navigator.can_go_back():
            self.navigator.go_back()
        else:
            self.navigator.navigate(HOME_SCREEN)

    def _mark_completed(self, reminder_id: str) -> bool:
        try:
            self.api.mark_completed(reminder_id)
        except ReminderAPIError as e:
            logger.error(f"[Responder] Error updating reminder {reminder_id} status: {e.message}")
            return False
        logger.info(f"[Responder] Reminder {reminder_id} marked completed")
        return True
