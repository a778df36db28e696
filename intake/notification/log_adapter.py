from intake.logging.logger import Log
from intake.notification.base import BaseNotifier
from intake.notification.models import NotifierStatus


class LogNotifier(BaseNotifier):
    """Writes notifications to the application log instead of a chat."""

    name = "Log"

    @property
    def is_configured(self) -> bool:
        return True

    def send_message(self, text: str) -> None:
        Log.info(f"Notification: {text}")

    def status(self) -> NotifierStatus:
        return NotifierStatus(configured=True, connected=True, provider="log")
