"""Storage-specific exceptions for S3-compatible operations.

This module defines the error taxonomy of the object storage adapter,
providing structured error handling with HTTP status codes and metadata
following RFC 7807 Problem Details for HTTP APIs.

Taxonomy:
    - StorageNotConfiguredError: the adapter cannot be built (missing bucket).
    - StorageKeyNotExistsError: the existence probe run before copy/move/get
      reported the source as absent. Raised locally, the remote copy/get is
      never attempted.
    - StorageKeyVanishedError: the probe saw the source, but the remote store
      answered "not found" to the follow-up request (a concurrent delete or
      move won the race).
    - StoragePartialMoveError: a move whose copy succeeded but whose delete of
      the source failed; both objects exist.
    - Everything else reported by the remote store (ClientError) is mapped by
      map_boto_error; network/SDK failures become StorageTransportError.

Example:
    ```python
    from object_storage.infra.storage.exceptions import (
        StorageKeyNotExistsError,
        map_boto_error,
    )

    try:
        await client.copy_object(...)
    except ClientError as e:
        raise map_boto_error(e, operation="copy", key=key) from e
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from object_storage.core.exceptions import AppException

if TYPE_CHECKING:
    from botocore.exceptions import ClientError

# Error codes the S3 API (and compatible services) use for a missing object.
# HEAD requests carry no body, so botocore reports the bare status code.
NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class StorageError(AppException):
    """Base exception for all storage-related errors.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        code: Error code identifier for programmatic error handling.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error (metadata).

    Example:
        ```python
        raise StorageError(
            message="Failed to connect to storage backend",
            code="STORAGE_CONNECTION_ERROR",
            status_code=503,
            metadata={"endpoint": "s3.amazonaws.com"}
        )
        ```
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 500,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error message.
            code: Error code for programmatic handling.
            status_code: HTTP status code (default: 500).
            metadata: Additional error context.
        """
        self.code = code
        self.message = message
        super().__init__(
            status_code=status_code,
            detail=message,
            type=code.lower().replace("_", "-"),
            extra=metadata or {},
        )


class StorageNotConfiguredError(StorageError):
    """Exception raised when storage is not properly configured.

    Raised eagerly when the adapter is constructed, never deferred to the
    first remote call.

    Example:
        ```python
        raise StorageNotConfiguredError(
            "Storage bucket is not configured",
            metadata={"required_settings": ["STORAGE_BUCKET"]}
        )
        ```
    """

    def __init__(
        self,
        message: str = "Storage is not configured",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_CONFIGURED",
            status_code=503,
            metadata=metadata,
        )


class StorageKeyNotExistsError(StorageError):
    """Exception raised when an operation requires a key that does not exist.

    Raised by copy, move and get_object before any request other than the
    existence probe has been sent.
    """

    def __init__(
        self,
        key: str,
        metadata: dict[str, Any] | None = None,
        *,
        message: str | None = None,
        code: str = "STORAGE_KEY_NOT_EXISTS",
    ) -> None:
        self.key = key
        super().__init__(
            message=message or f"Key does not exist: {key}",
            code=code,
            status_code=404,
            metadata={"key": key, **(metadata or {})},
        )


class StorageKeyVanishedError(StorageKeyNotExistsError):
    """Exception raised when a key disappears between the probe and the action.

    Subclasses StorageKeyNotExistsError so callers that only care about
    "the source is gone" can catch both, while callers that want to detect
    concurrent deletes can tell them apart.
    """

    def __init__(
        self,
        key: str,
        operation: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        super().__init__(
            key,
            metadata={"operation": operation, **(metadata or {})},
            message=f"Key {key} was removed before {operation} completed",
            code="STORAGE_KEY_VANISHED",
        )


class StorageFileNotFoundError(StorageError):
    """Exception raised when the remote store reports a missing object or bucket."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_FOUND",
            status_code=404,
            metadata=metadata,
        )


class StoragePartialMoveError(StorageError):
    """Exception raised when a move copied the object but could not delete the source.

    The destination holds a full copy; only the delete needs retrying.

    Attributes:
        source: Key that should have been deleted.
        destination: Key the object was copied to.
        url: Resolved URL of the destination.
    """

    def __init__(
        self,
        source: str,
        destination: str,
        url: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.source = source
        self.destination = destination
        self.url = url
        super().__init__(
            message=(
                f"Copied {source} to {destination} but failed to delete the source"
            ),
            code="STORAGE_PARTIAL_MOVE",
            status_code=500,
            metadata={
                "source_key": source,
                "dest_key": destination,
                "url": url,
                **(metadata or {}),
            },
        )


class StorageTransportError(StorageError):
    """Exception raised when the remote store cannot be reached.

    Covers connection failures, endpoint resolution problems and missing
    credentials, i.e. every botocore failure that carries no S3 error code.
    """

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_TRANSPORT_ERROR",
            status_code=502,
            metadata=metadata,
        )


class StoragePermissionError(StorageError):
    """Exception raised when storage operations fail due to access permissions."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_PERMISSION_DENIED",
            status_code=403,
            metadata=metadata,
        )


class StorageQuotaExceededError(StorageError):
    """Exception raised when storage quota limits are exceeded."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_QUOTA_EXCEEDED",
            status_code=507,
            metadata=metadata,
        )


class StorageValidationError(StorageError):
    """Exception raised when the remote store rejects a request as malformed."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_VALIDATION_ERROR",
            status_code=400,
            metadata=metadata,
        )


class StorageTimeoutError(StorageError):
    """Exception raised when storage operations exceed time limits."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_TIMEOUT",
            status_code=504,
            metadata=metadata,
        )


def error_code(error: ClientError) -> str:
    """Return the S3 error code carried by a botocore ClientError."""
    return str(error.response.get("Error", {}).get("Code", ""))


def is_not_found(error: ClientError) -> bool:
    """Check whether a ClientError means the object does not exist."""
    return error_code(error) in NOT_FOUND_CODES


def map_boto_error(
    error: ClientError,
    operation: str,
    key: str | None = None,
) -> StorageError:
    """Map boto3 ClientError to domain-specific StorageError.

    Args:
        error: The boto3 ClientError exception to map.
        operation: The storage operation being performed (e.g., "upload", "copy").
        key: Optional S3 key/object name being operated on.

    Returns:
        StorageError: Appropriate domain-specific storage exception.

    Error Code Mappings:
        - NoSuchKey, NoSuchBucket, 404 -> StorageFileNotFoundError (404)
        - AccessDenied, ExpiredToken, InvalidAccessKeyId -> StoragePermissionError (403)
        - RequestTimeout, RequestTimeTooSkewed, SlowDown -> StorageTimeoutError (504)
        - QuotaExceeded, TooManyBuckets -> StorageQuotaExceededError (507)
        - InvalidRequest, InvalidArgument, MalformedXML -> StorageValidationError (400)
        - Others -> StorageError (500)
    """
    code = error_code(error) or "Unknown"
    error_message = error.response.get("Error", {}).get("Message", str(error))

    metadata: dict[str, Any] = {
        "operation": operation,
        "aws_error_code": code,
        "aws_error_message": error_message,
        "request_id": error.response.get("ResponseMetadata", {}).get("RequestId"),
    }

    if key:
        metadata["key"] = key

    if "BucketName" in error.response.get("Error", {}):
        metadata["bucket"] = error.response["Error"]["BucketName"]  # type: ignore[typeddict-item]

    message = f"{operation.capitalize()} failed: {error_message}"

    if code in NOT_FOUND_CODES or code == "NoSuchBucket":
        return StorageFileNotFoundError(message=message, metadata=metadata)

    if code in {
        "AccessDenied",
        "ExpiredToken",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "InvalidToken",
        "TokenRefreshRequired",
        "403",
    }:
        return StoragePermissionError(message=message, metadata=metadata)

    if code in {
        "RequestTimeout",
        "RequestTimeTooSkewed",
        "SlowDown",
    }:
        return StorageTimeoutError(
            message=f"{operation.capitalize()} timed out: {error_message}",
            metadata=metadata,
        )

    if code in {
        "QuotaExceeded",
        "TooManyBuckets",
        "AccountProblem",
    }:
        return StorageQuotaExceededError(message=message, metadata=metadata)

    if code in {
        "InvalidRequest",
        "InvalidArgument",
        "MalformedXML",
        "InvalidBucketName",
        "InvalidObjectState",
        "KeyTooLongError",
        "MetadataTooLarge",
    }:
        return StorageValidationError(message=message, metadata=metadata)

    return StorageError(
        message=message,
        code="STORAGE_ERROR",
        status_code=500,
        metadata=metadata,
    )
