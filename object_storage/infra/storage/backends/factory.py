"""Backend factory for creating object storage adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from object_storage.core.settings.storage import StorageDriver
from object_storage.infra.storage.exceptions import StorageNotConfiguredError

if TYPE_CHECKING:
    import logging

    from object_storage.core.settings.storage import StorageSettings
    from object_storage.infra.storage.protocol import ObjectStorage, S3ClientProtocol

SUPPORTED_DRIVERS: tuple[str, ...] = tuple(driver.value for driver in StorageDriver)


def create_object_storage(
    settings: StorageSettings,
    client: S3ClientProtocol,
    *,
    log: logging.Logger | None = None,
) -> ObjectStorage:
    """Factory function to create the adapter for the configured driver.

    Args:
        settings: Storage configuration settings
        client: Initialized S3 client the adapter sends requests through
        log: Optional diagnostic sink for the adapter

    Returns:
        Adapter implementing the ObjectStorage protocol

    Raises:
        StorageNotConfiguredError: If no bucket is set or the driver is unsupported

    Example:
        settings = get_storage_settings()
        async with S3ClientManager(settings) as client:
            storage = create_object_storage(settings, client)
            await storage.upload("file.txt", data)
    """
    if not settings.is_configured:
        msg = "Storage not configured. Set STORAGE_BUCKET."
        raise StorageNotConfiguredError(
            msg,
            metadata={"required_settings": ["STORAGE_BUCKET"]},
        )

    driver = settings.driver

    match driver:
        case StorageDriver.S3 | StorageDriver.SCALEWAY | StorageDriver.MINIO:
            # All three speak the S3 API; they differ only in endpoints
            from .s3.backend import S3ObjectStorage

            return S3ObjectStorage(client, settings, log=log)

        case _:
            msg = (
                f"Unsupported storage driver: {driver}. "
                f"Supported drivers: {', '.join(SUPPORTED_DRIVERS)}"
            )
            raise StorageNotConfiguredError(msg)
