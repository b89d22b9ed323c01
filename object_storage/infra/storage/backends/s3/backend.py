"""S3-compatible object storage adapter.

Implements the ObjectStorage protocol on top of an aiobotocore S3 client for
AWS S3, Scaleway, MinIO and other S3-compatible services.

The bucket is a flat key space. Directories are zero-byte marker objects,
listings are prefix scans projected onto one path segment, and move is a
copy followed by a delete. copy, move and get_object probe existence first;
the probe and the action are separate requests, so a concurrent delete in
between surfaces as StorageKeyVanishedError rather than
StorageKeyNotExistsError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from object_storage.infra.logging.context import ContextBoundLogger
from object_storage.infra.storage.endpoints import public_endpoint_for, resolve_url
from object_storage.infra.storage.exceptions import (
    StorageError,
    StorageKeyNotExistsError,
    StorageKeyVanishedError,
    StorageNotConfiguredError,
    StoragePartialMoveError,
    StorageTransportError,
    is_not_found,
    map_boto_error,
)
from object_storage.infra.storage.instrumentation import track_storage_operation
from object_storage.infra.storage.keys import immediate_children

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from object_storage.core.settings.storage import StorageSettings
    from object_storage.infra.storage.protocol import S3ClientProtocol

logger = logging.getLogger(__name__)


class S3ObjectStorage:
    """Object storage adapter for an S3-compatible bucket.

    Stateless apart from the settings and client handle it was built with;
    both are never mutated, so one instance can serve any number of
    concurrent tasks.

    Attributes:
        settings: Storage configuration settings
        bucket: Bucket every operation targets
        public_endpoint: URL base used by resolve()

    Example:
        storage = S3ObjectStorage(client, settings)
        url = await storage.upload("docs/readme.txt", b"hello")
        await storage.list("docs")  # ["readme.txt"]
    """

    def __init__(
        self,
        client: S3ClientProtocol,
        settings: StorageSettings,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: Initialized S3 client (aiobotocore client or compatible)
            settings: Storage settings; must name a bucket
            log: Diagnostic sink, defaults to this module's logger

        Raises:
            StorageNotConfiguredError: If the settings carry no bucket
        """
        if not settings.bucket:
            msg = "Storage bucket is not configured. Set STORAGE_BUCKET."
            raise StorageNotConfiguredError(
                msg,
                metadata={"required_settings": ["STORAGE_BUCKET"]},
            )

        self.settings = settings
        self.bucket: str = settings.bucket
        self.public_endpoint = public_endpoint_for(settings)
        self._client = client
        self._acl = settings.acl
        self._logger = ContextBoundLogger(
            log or logger,
            bucket=self.bucket,
            driver=settings.driver.value,
        )

    @property
    def backend_name(self) -> str:
        """Driver identifier this adapter was configured for."""
        return self.settings.driver.value

    # ========================================================================
    # URL resolution
    # ========================================================================

    def resolve(self, key: str) -> str:
        """Resolve a key to its public URL (no I/O)."""
        return resolve_url(self.public_endpoint, key)

    # ========================================================================
    # Writes
    # ========================================================================

    async def upload(self, key: str, data: bytes) -> str:
        """Upload bytes to a key, creating or overwriting the object.

        Args:
            key: Object key
            data: Object content

        Returns:
            Resolved URL of the uploaded object

        Raises:
            StorageError: If the remote store rejects the write
        """
        size_bytes = len(data)
        async with track_storage_operation(
            "upload", key=key, bucket=self.bucket, size_bytes=size_bytes
        ):
            await self._request(
                "upload",
                key,
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentLength=size_bytes,
                ACL=self._acl,
            )

        self._logger.info(
            "Object uploaded",
            extra={"key": key, "size_bytes": size_bytes, "acl": self._acl},
        )
        return self.resolve(key)

    async def create_directory(self, key: str) -> None:
        """Create a directory marker: a zero-byte object at ``key``.

        The remote store has no hierarchy, so this never fails because a
        parent "directory" is missing, and the marker is indistinguishable
        from an empty file.

        Raises:
            StorageError: If the remote store rejects the write
        """
        async with track_storage_operation(
            "create_directory", key=key, bucket=self.bucket, size_bytes=0
        ):
            await self._request(
                "create_directory",
                key,
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=b"",
                ContentLength=0,
                ACL=self._acl,
            )

        self._logger.info("Directory marker created", extra={"key": key})

    # ========================================================================
    # Existence
    # ========================================================================

    async def exists(self, key: str) -> bool:
        """Check whether an object exists at ``key``.

        Uses a HEAD request, so no body is transferred. Any failure, a plain
        "not found" as well as access or network errors, is reported as
        ``False``; failures other than "not found" are logged.

        Returns:
            True if the remote store returned the object's metadata
        """
        async with track_storage_operation("exists", key=key, bucket=self.bucket) as ctx:
            try:
                await self._client.head_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                if not is_not_found(e):
                    self._logger.warning(
                        "Existence probe failed, reporting key as missing",
                        extra={"key": key, "error": str(e)},
                    )
                ctx["exists"] = False
                return False
            except Exception as e:
                self._logger.warning(
                    "Existence probe failed, reporting key as missing",
                    extra={"key": key, "error": str(e)},
                )
                ctx["exists"] = False
                return False

            ctx["exists"] = True
            return True

    # ========================================================================
    # Copy / move / delete
    # ========================================================================

    async def copy(self, source: str, destination: str) -> str:
        """Copy an existing object to a new key (server side).

        Args:
            source: Key of the object to copy
            destination: Key to copy to (overwritten if present)

        Returns:
            Resolved URL of the destination

        Raises:
            StorageKeyNotExistsError: If ``source`` does not exist; the copy
                request is not sent
            StorageKeyVanishedError: If ``source`` disappeared after the probe
            StorageError: If the copy fails
        """
        async with track_storage_operation(
            "copy", key=source, bucket=self.bucket, dest_key=destination
        ):
            if not await self.exists(source):
                raise StorageKeyNotExistsError(source, metadata={"bucket": self.bucket})

            await self._request(
                "copy",
                source,
                self._client.copy_object,
                missing_means_vanished=True,
                CopySource={"Bucket": self.bucket, "Key": source},
                Bucket=self.bucket,
                Key=destination,
                ACL=self._acl,
            )

        self._logger.info(
            "Object copied",
            extra={"source_key": source, "dest_key": destination, "acl": self._acl},
        )
        return self.resolve(destination)

    async def move(self, source: str, destination: str) -> str:
        """Move an object: copy to ``destination``, then delete ``source``.

        Not atomic. When the delete fails after a successful copy both objects
        exist and StoragePartialMoveError is raised, so the caller can retry
        just the delete.

        Returns:
            Resolved URL of the destination

        Raises:
            StorageKeyNotExistsError: If ``source`` does not exist
            StoragePartialMoveError: If the source could not be deleted
            StorageError: If the copy fails
        """
        async with track_storage_operation(
            "move", key=source, bucket=self.bucket, dest_key=destination
        ):
            url = await self.copy(source, destination)
            try:
                await self.delete(source)
            except StorageError as e:
                self._logger.error(
                    "Move left the source in place after copying it",
                    extra={"source_key": source, "dest_key": destination, "error": str(e)},
                )
                raise StoragePartialMoveError(
                    source,
                    destination,
                    url,
                    metadata={"bucket": self.bucket, "error": str(e)},
                ) from e

        self._logger.info(
            "Object moved",
            extra={"source_key": source, "dest_key": destination},
        )
        return url

    async def delete(self, key: str) -> None:
        """Delete the object at ``key``.

        No existence check; S3 treats deleting an absent key as success.

        Raises:
            StorageError: If the remote store rejects the delete
        """
        async with track_storage_operation("delete", key=key, bucket=self.bucket):
            await self._request(
                "delete",
                key,
                self._client.delete_object,
                Bucket=self.bucket,
                Key=key,
            )

        self._logger.info("Object deleted", extra={"key": key})

    # ========================================================================
    # Reads
    # ========================================================================

    async def get_object(self, source: str) -> bytes:
        """Fetch the full content of an object.

        Returns:
            Object data as bytes

        Raises:
            StorageKeyNotExistsError: If ``source`` does not exist
            StorageKeyVanishedError: If ``source`` disappeared after the probe
            StorageError: If the download fails
        """
        async with track_storage_operation(
            "get_object", key=source, bucket=self.bucket
        ) as ctx:
            if not await self.exists(source):
                raise StorageKeyNotExistsError(source, metadata={"bucket": self.bucket})

            data = await self._download(source)
            ctx["result_size"] = len(data)

        self._logger.info(
            "Object downloaded",
            extra={"key": source, "size_bytes": len(data)},
        )
        return data

    async def list(self, key: str | None = None, *, dedupe: bool | None = None) -> list[str]:
        """List the immediate children of ``key``.

        Every object whose key starts with ``key`` contributes the path
        segment right below it, in the remote store's order. Keys equal to
        the prefix contribute nothing.

        Args:
            key: Prefix to list under; None lists the whole bucket
            dedupe: Collapse repeated child names; defaults to the
                ``dedupe_listing`` setting

        Returns:
            Child names relative to ``key``

        Raises:
            StorageError: If listing fails
        """
        if dedupe is None:
            dedupe = self.settings.dedupe_listing

        async with track_storage_operation(
            "list", key=key or "", bucket=self.bucket
        ) as ctx:
            keys = [item async for item in self._iter_keys(key)]
            names = immediate_children(keys, key, dedupe=dedupe)
            ctx["objects"] = len(keys)
            ctx["children"] = len(names)

        self._logger.debug(
            "Listed objects",
            extra={"prefix": key, "objects": len(keys), "children": len(names)},
        )
        return names

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _iter_keys(self, prefix: str | None) -> AsyncIterator[str]:
        """Yield every key under ``prefix``, following continuation tokens."""
        kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "MaxKeys": self.settings.list_page_size,
        }
        if prefix is not None:
            kwargs["Prefix"] = prefix

        while True:
            response = await self._request(
                "list",
                prefix,
                self._client.list_objects_v2,
                **kwargs,
            )

            for item in response.get("Contents", []):
                if item.get("Key") is not None:
                    yield item["Key"]

            token = response.get("NextContinuationToken")
            if not response.get("IsTruncated") or token is None:
                break
            kwargs["ContinuationToken"] = token

    async def _download(self, key: str) -> bytes:
        """GET an object and read its whole body."""
        try:
            response = await self._client.get_object(Bucket=self.bucket, Key=key)
            body = await response["Body"].read()
        except ClientError as e:
            if is_not_found(e):
                raise StorageKeyVanishedError(
                    key, "get_object", metadata={"bucket": self.bucket}
                ) from e
            self._logger.exception(
                "Failed to download object", extra={"key": key, "error": str(e)}
            )
            raise map_boto_error(e, operation="get_object", key=key) from e
        except BotoCoreError as e:
            self._logger.exception(
                "Transport error during download", extra={"key": key, "error": str(e)}
            )
            raise StorageTransportError(
                f"Get_object failed: {e}",
                metadata={"operation": "get_object", "key": key, "bucket": self.bucket},
            ) from e

        return body if isinstance(body, bytes) else bytes(body)

    async def _request(
        self,
        operation: str,
        key: str | None,
        method: Callable[..., Awaitable[dict[str, Any]]],
        *,
        missing_means_vanished: bool = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send one request and translate SDK failures into StorageError.

        Args:
            operation: Operation name used in logs and error metadata
            key: Key the request targets
            method: Bound client method
            missing_means_vanished: Report a remote "not found" as
                StorageKeyVanishedError (the key passed an existence probe)
            **kwargs: Request parameters

        Returns:
            The raw response mapping
        """
        try:
            return await method(**kwargs)
        except ClientError as e:
            if missing_means_vanished and key is not None and is_not_found(e):
                raise StorageKeyVanishedError(
                    key, operation, metadata={"bucket": self.bucket}
                ) from e
            self._logger.exception(
                "S3 request failed",
                extra={"operation": operation, "key": key, "error": str(e)},
            )
            raise map_boto_error(e, operation=operation, key=key) from e
        except BotoCoreError as e:
            self._logger.exception(
                "Transport error talking to S3",
                extra={"operation": operation, "key": key, "error": str(e)},
            )
            raise StorageTransportError(
                f"{operation.capitalize()} failed: {e}",
                metadata={"operation": operation, "key": key, "bucket": self.bucket},
            ) from e
