from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RemoteFile:
    """Metadata of a file held in cloud storage."""

    id: str
    name: str
    media_type: str
    size: int
    modified_at: datetime | None = None


@dataclass(frozen=True)
class StorageStatus:
    configured: bool
    connected: bool
    provider: str
    location: str | None = None
    error: str | None = None
