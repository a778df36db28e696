import threading
from dataclasses import replace
from datetime import datetime

from intake.logging.logger import Log
from intake.notification.base import BaseNotifier
from intake.notification.messages import format_message
from intake.notification.models import NotificationEvent, NotificationPreferences


class NotificationService:
    """Applies the user's preferences and formats messages before sending.

    Raises whatever the notifier raises. Callers on the pipeline path treat
    delivery as best-effort and swallow those errors themselves.
    """

    def __init__(
        self,
        notifier: BaseNotifier,
        preferences: NotificationPreferences | None = None,
    ) -> None:
        self._notifier = notifier
        self._preferences = preferences or NotificationPreferences()
        self._lock = threading.Lock()

    @property
    def notifier(self) -> BaseNotifier:
        return self._notifier

    @property
    def preferences(self) -> NotificationPreferences:
        with self._lock:
            return self._preferences

    def update_preferences(self, **changes: bool) -> NotificationPreferences:
        with self._lock:
            self._preferences = replace(self._preferences, **changes)
            return self._preferences

    def notify(self, event: NotificationEvent) -> bool:
        """Send the event. Returns False when preferences filtered it out."""
        if not self.preferences.allows(event.type):
            Log.debug(f"Notification {event.type.value} skipped by preferences")
            return False
        self._notifier.send_message(format_message(event, datetime.now()))
        return True
