"""S3-compatible cloud storage (AWS S3, Cloudflare R2, MinIO) via boto3."""

import uuid
from pathlib import Path
from typing import Any

import boto3
from botocore.client import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from intake.cloud_storage.base import BaseCloudStorage
from intake.cloud_storage.exceptions import (
    CloudStorageError,
    CloudStorageNetworkError,
    RemoteFileNotFoundError,
)
from intake.cloud_storage.models import RemoteFile, StorageStatus
from intake.logging.logger import Log

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
_NETWORK_ERRORS = (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)


class S3CloudStorage(BaseCloudStorage):
    """Stores files under a key prefix in one bucket.

    The object key is the remote identifier. The original file name is kept
    in the object's user metadata so imports can restore it.
    """

    name = "S3 Storage"

    def __init__(
        self,
        *,
        bucket: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: str | None = None,
        region: str = "auto",
        prefix: str = "",
        timeout_seconds: int = 30,
        client: Any | None = None,
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._has_credentials = bool(access_key_id and secret_access_key)
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
            region_name=region,
            config=Config(
                signature_version="s3v4",
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 1},
            ),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._bucket) and self._has_credentials

    def upload(self, path: Path, *, name: str, media_type: str) -> str:
        key = f"{self._prefix}{uuid.uuid4().hex}-{Path(name).name}"
        try:
            with path.open("rb") as body:
                self._client.put_object(
                    Bucket=self._bucket,
                    Key=key,
                    Body=body,
                    ContentType=media_type,
                    Metadata={"original-name": name},
                )
        except OSError as exc:
            raise CloudStorageError(f"Cannot read {path}: {exc}") from exc
        except (BotoCoreError, ClientError) as exc:
            raise self._map_error(exc, key) from exc
        Log.info(f"Uploaded {name} to bucket {self._bucket} as {key}")
        return key

    def get_metadata(self, file_id: str) -> RemoteFile:
        try:
            head = self._client.head_object(Bucket=self._bucket, Key=file_id)
        except (BotoCoreError, ClientError) as exc:
            raise self._map_error(exc, file_id) from exc
        metadata = head.get("Metadata") or {}
        return RemoteFile(
            id=file_id,
            name=metadata.get("original-name") or self._display_name(file_id),
            media_type=head.get("ContentType") or "application/octet-stream",
            size=int(head.get("ContentLength") or 0),
            modified_at=head.get("LastModified"),
        )

    def download(self, file_id: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=file_id)
            data: bytes = response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise self._map_error(exc, file_id) from exc
        Log.info(f"Downloaded {len(data)} bytes for {file_id} from bucket {self._bucket}")
        return data

    def list_files(self, limit: int = 100) -> list[RemoteFile]:
        try:
            response = self._client.list_objects_v2(
                Bucket=self._bucket,
                Prefix=self._prefix,
                MaxKeys=limit,
            )
        except (BotoCoreError, ClientError) as exc:
            raise self._map_error(exc, self._prefix) from exc
        files = [
            RemoteFile(
                id=item["Key"],
                name=self._display_name(item["Key"]),
                media_type="application/octet-stream",
                size=int(item.get("Size") or 0),
                modified_at=item.get("LastModified"),
            )
            for item in response.get("Contents", [])
        ]
        return sorted(
            files,
            key=lambda f: f.modified_at.timestamp() if f.modified_at else 0.0,
            reverse=True,
        )

    def status(self) -> StorageStatus:
        if not self.is_configured:
            return StorageStatus(configured=False, connected=False, provider="s3")
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except (BotoCoreError, ClientError) as exc:
            Log.warning(f"Cloud storage status check failed: {exc}")
            return StorageStatus(
                configured=True,
                connected=False,
                provider="s3",
                location=self._bucket,
                error=str(exc),
            )
        return StorageStatus(configured=True, connected=True, provider="s3", location=self._bucket)

    def _display_name(self, key: str) -> str:
        name = key[len(self._prefix):] if key.startswith(self._prefix) else key
        stem, sep, rest = name.partition("-")
        if sep and len(stem) == 32:
            return rest
        return name

    def _map_error(self, exc: Exception, key: str) -> CloudStorageError:
        if isinstance(exc, ClientError):
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return RemoteFileNotFoundError(f"Remote file not found: {key}")
            return CloudStorageError(f"Cloud storage request failed ({code}): {exc}")
        if isinstance(exc, _NETWORK_ERRORS):
            return CloudStorageNetworkError(f"Cloud storage network error: {exc}")
        return CloudStorageError(f"Cloud storage error: {exc}")
