"""Object storage capability protocol and the remote client surface it needs.

This module defines:
- ObjectStorage: the uniform capability exposed to callers
- S3ClientProtocol: the subset of the aiobotocore S3 client the adapter calls
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class S3ClientProtocol(Protocol):
    """Minimum surface required from the remote S3 client.

    Matches the keyword-argument API of an aiobotocore S3 client, so a client
    obtained from ``aioboto3.Session().client("s3")`` satisfies it directly.
    Request signing, retries and connection pooling are the client's job.
    """

    async def put_object(self, **kwargs: Any) -> dict[str, Any]: ...

    async def list_objects_v2(self, **kwargs: Any) -> dict[str, Any]: ...

    async def copy_object(self, **kwargs: Any) -> dict[str, Any]: ...

    async def get_object(self, **kwargs: Any) -> dict[str, Any]: ...

    async def head_object(self, **kwargs: Any) -> dict[str, Any]: ...

    async def delete_object(self, **kwargs: Any) -> dict[str, Any]: ...


@runtime_checkable
class ObjectStorage(Protocol):
    """Uniform object storage capability.

    Keys are ``/``-delimited strings; "directories" exist only by convention.
    Uses structural typing (Protocol) rather than inheritance.

    Example:
        async def publish(storage: ObjectStorage, data: bytes) -> str:
            await storage.create_directory("reports/")
            return await storage.upload("reports/latest.pdf", data)
    """

    def resolve(self, key: str) -> str:
        """Return the public URL of ``key`` (no I/O)."""
        ...

    async def upload(self, key: str, data: bytes) -> str:
        """Create or overwrite the object at ``key`` and return its URL.

        Raises:
            StorageError: If the remote store rejects the write
        """
        ...

    async def create_directory(self, key: str) -> None:
        """Write a zero-byte marker object at ``key``.

        Raises:
            StorageError: If the remote store rejects the write
        """
        ...

    async def list(self, key: str | None = None, *, dedupe: bool | None = None) -> list[str]:
        """Return the immediate child names under ``key``.

        ``dedupe`` collapses repeated names; None uses the configured default.

        Raises:
            StorageError: If listing fails
        """
        ...

    async def copy(self, source: str, destination: str) -> str:
        """Copy ``source`` to ``destination`` and return the destination URL.

        Raises:
            StorageKeyNotExistsError: If ``source`` does not exist
            StorageError: If the copy fails
        """
        ...

    async def move(self, source: str, destination: str) -> str:
        """Copy then delete ``source``; return the destination URL.

        Raises:
            StorageKeyNotExistsError: If ``source`` does not exist
            StoragePartialMoveError: If the copy succeeded but the delete failed
            StorageError: If the copy fails
        """
        ...

    async def get_object(self, source: str) -> bytes:
        """Return the full body of ``source``.

        Raises:
            StorageKeyNotExistsError: If ``source`` does not exist
            StorageError: If the download fails
        """
        ...

    async def delete(self, key: str) -> None:
        """Delete ``key``; deleting an absent key succeeds.

        Raises:
            StorageError: If the remote store rejects the delete
        """
        ...

    async def exists(self, key: str) -> bool:
        """Return whether ``key`` exists. Never raises storage errors."""
        ...
