from pathlib import Path
from typing import NoReturn

from intake.cloud_storage.base import BaseCloudStorage
from intake.cloud_storage.exceptions import CloudStorageNotConfiguredError
from intake.cloud_storage.models import RemoteFile, StorageStatus


class UnconfiguredCloudStorage(BaseCloudStorage):
    """Stand-in used when no cloud storage provider is configured."""

    @property
    def is_configured(self) -> bool:
        return False

    def upload(self, path: Path, *, name: str, media_type: str) -> str:
        self._fail()

    def get_metadata(self, file_id: str) -> RemoteFile:
        self._fail()

    def download(self, file_id: str) -> bytes:
        self._fail()

    def list_files(self, limit: int = 100) -> list[RemoteFile]:
        self._fail()

    def status(self) -> StorageStatus:
        return StorageStatus(configured=False, connected=False, provider="none")

    @staticmethod
    def _fail() -> NoReturn:
        raise CloudStorageNotConfiguredError("Cloud storage is not configured")
