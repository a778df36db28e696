from intake.processor.exceptions import CapabilityError, TransientCapabilityError


class CloudStorageError(CapabilityError):
    """Raised when a cloud storage operation fails."""

    capability = "cloud_storage"


class CloudStorageNetworkError(CloudStorageError, TransientCapabilityError):
    """Raised when the storage endpoint cannot be reached or times out."""


class CloudStorageNotConfiguredError(CloudStorageError):
    """Raised when an operation needs cloud storage but none is configured."""


class RemoteFileNotFoundError(CloudStorageError):
    """Raised when the requested remote file does not exist."""
