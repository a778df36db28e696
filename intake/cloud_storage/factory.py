from intake.cloud_storage.base import BaseCloudStorage
from intake.cloud_storage.s3_adapter import S3CloudStorage
from intake.cloud_storage.unconfigured_adapter import UnconfiguredCloudStorage
from intake.config.settings import Settings


class CloudStorageFactory:
    """Creates the configured cloud storage adapter."""

    PROVIDERS: tuple[str, ...] = ("none", "s3")

    @classmethod
    def create(cls, settings: Settings) -> BaseCloudStorage:
        provider = settings.cloud_storage_provider.lower()
        if provider == "none":
            return UnconfiguredCloudStorage()
        if provider == "s3":
            return S3CloudStorage(
                bucket=settings.cloud_storage_bucket,
                access_key_id=settings.cloud_storage_access_key_id,
                secret_access_key=settings.cloud_storage_secret_access_key,
                endpoint_url=settings.cloud_storage_endpoint_url,
                region=settings.cloud_storage_region,
                prefix=settings.cloud_storage_prefix,
                timeout_seconds=settings.cloud_storage_timeout_seconds,
            )
        raise ValueError(
            f"Unknown cloud storage provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
