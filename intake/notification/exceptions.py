from intake.processor.exceptions import CapabilityError, TransientCapabilityError


class NotificationError(CapabilityError):
    """Raised when a notification cannot be delivered."""

    capability = "notification"


class NotificationNetworkError(NotificationError, TransientCapabilityError):
    """Raised when the chat API cannot be reached or times out."""


class NotificationNotConfiguredError(NotificationError):
    """Raised when the notifier lacks its token or chat id."""
