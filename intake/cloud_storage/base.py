from abc import ABC, abstractmethod
from pathlib import Path

from intake.cloud_storage.models import RemoteFile, StorageStatus


class BaseCloudStorage(ABC):
    """Contract for cloud storage adapters."""

    name: str = "Cloud Storage"

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials and a target location are present."""

    @abstractmethod
    def upload(self, path: Path, *, name: str, media_type: str) -> str:
        """Upload a local file and return its remote identifier.

        Raises:
            CloudStorageError: on any failure.
        """

    @abstractmethod
    def get_metadata(self, file_id: str) -> RemoteFile:
        """Return metadata of a remote file.

        Raises:
            RemoteFileNotFoundError: if the file does not exist.
            CloudStorageError: on any other failure.
        """

    @abstractmethod
    def download(self, file_id: str) -> bytes:
        """Return the content of a remote file.

        Raises:
            RemoteFileNotFoundError: if the file does not exist.
            CloudStorageError: on any other failure.
        """

    @abstractmethod
    def list_files(self, limit: int = 100) -> list[RemoteFile]:
        """List remote files, most recently modified first."""

    @abstractmethod
    def status(self) -> StorageStatus:
        """Check connectivity without raising."""
