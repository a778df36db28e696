from abc import ABC, abstractmethod

from intake.notification.models import NotifierStatus


class BaseNotifier(ABC):
    """Contract for chat notification adapters."""

    name: str = "Notifier"

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the adapter has everything it needs to send."""

    @abstractmethod
    def send_message(self, text: str) -> None:
        """Deliver a message.

        Raises:
            NotificationError: on any failure.
        """

    @abstractmethod
    def status(self) -> NotifierStatus:
        """Check the connection without raising."""
