"""S3 client lifecycle management.

The adapter never creates its own connection; it receives a ready client.
S3ClientManager owns that client: it builds the aioboto3 session and botocore
Config from StorageSettings and closes the connection pool on shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import aioboto3
from botocore.config import Config

from object_storage.core.settings import get_storage_settings
from object_storage.infra.logging.context import get_logger
from object_storage.infra.storage.backends.factory import create_object_storage
from object_storage.infra.storage.exceptions import (
    StorageError,
    StorageNotConfiguredError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

    from object_storage.core.settings.storage import StorageSettings
    from object_storage.infra.storage.protocol import ObjectStorage, S3ClientProtocol


class S3ClientManager:
    """Owns one aiobotocore S3 client for the lifetime of an application.

    Example:
        manager = S3ClientManager(settings)
        client = await manager.startup()
        ...
        await manager.shutdown()
    """

    def __init__(self, settings: StorageSettings) -> None:
        self.settings = settings
        self._session = aioboto3.Session()
        self._client_context: Any = None
        self._client: Any = None
        self._logger = get_logger(
            __name__, bucket=settings.bucket, driver=settings.driver.value
        )

    @property
    def is_started(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> S3ClientProtocol:
        """The open client.

        Raises:
            StorageError: If startup() has not been called
        """
        if self._client is None:
            msg = "S3 client not initialized. Call startup() first."
            raise StorageError(msg, code="STORAGE_NOT_INITIALIZED", status_code=503)
        return self._client

    def build_config(self) -> Config:
        """Build the botocore Config carrying retry, timeout and pool tuning."""
        return Config(
            retries={
                "max_attempts": self.settings.max_retries,
                "mode": self.settings.retry_mode,
            },
            connect_timeout=self.settings.timeout,
            read_timeout=self.settings.timeout,
            max_pool_connections=self.settings.max_pool_connections,
            s3={"addressing_style": self.settings.addressing_style},
        )

    async def startup(self) -> S3ClientProtocol:
        """Open the client and connection pool; idempotent."""
        if self._client is not None:
            self._logger.debug("S3 client already initialized")
            return self._client

        self._logger.info(
            "Initializing S3 client",
            extra={
                "endpoint": self.settings.api_endpoint,
                "region": self.settings.region,
            },
        )

        try:
            self._client_context = self._session.client(
                "s3",
                **self.settings.get_boto3_config(),
                config=self.build_config(),
            )
            self._client = await self._client_context.__aenter__()
        except Exception as e:
            self._client_context = None
            self._logger.exception("Failed to initialize S3 client", extra={"error": str(e)})
            raise StorageError(
                f"Failed to initialize S3 client: {e}",
                code="STORAGE_INITIALIZATION_ERROR",
            ) from e

        self._logger.info("S3 client initialized successfully")
        return self._client

    async def shutdown(self) -> None:
        """Close the client gracefully."""
        if self._client_context is None:
            self._logger.debug("S3 client not initialized, nothing to shutdown")
            return

        self._logger.info("Shutting down S3 client")

        try:
            await self._client_context.__aexit__(None, None, None)
        except Exception as e:
            self._logger.warning("Error closing S3 client", extra={"error": str(e)})
        finally:
            self._client = None
            self._client_context = None

        self._logger.info("S3 client shutdown complete")

    async def __aenter__(self) -> S3ClientProtocol:
        return await self.startup()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.shutdown()


@asynccontextmanager
async def open_object_storage(
    settings: StorageSettings | None = None,
    *,
    log: logging.Logger | None = None,
) -> AsyncIterator[ObjectStorage]:
    """Open a client and yield a ready adapter; closes the client on exit.

    Args:
        settings: Storage settings, loaded from the environment when omitted
        log: Optional diagnostic sink for the adapter

    Raises:
        StorageNotConfiguredError: If no bucket is configured; raised before
            any connection is opened

    Example:
        async with open_object_storage() as storage:
            url = await storage.upload("docs/readme.txt", b"hello")
    """
    settings = settings or get_storage_settings()
    if not settings.is_configured:
        msg = "Storage not configured. Set STORAGE_BUCKET."
        raise StorageNotConfiguredError(
            msg,
            metadata={"required_settings": ["STORAGE_BUCKET"]},
        )

    async with S3ClientManager(settings) as client:
        yield create_object_storage(settings, client, log=log)
