"""S3-compatible object storage.

Public surface:
- ObjectStorage: the capability callers program against
- S3ObjectStorage: the adapter for AWS S3, Scaleway and MinIO
- create_object_storage / open_object_storage: construction helpers
- the StorageError hierarchy
"""

from .backends import SUPPORTED_DRIVERS, StorageDriver, create_object_storage
from .backends.s3 import S3ObjectStorage
from .client import S3ClientManager, open_object_storage
from .endpoints import public_endpoint, public_endpoint_for, resolve_url
from .exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageKeyNotExistsError,
    StorageKeyVanishedError,
    StorageNotConfiguredError,
    StoragePartialMoveError,
    StoragePermissionError,
    StorageQuotaExceededError,
    StorageTimeoutError,
    StorageTransportError,
    StorageValidationError,
)
from .keys import immediate_children
from .protocol import ObjectStorage, S3ClientProtocol

__all__ = [
    "SUPPORTED_DRIVERS",
    "ObjectStorage",
    "S3ClientManager",
    "S3ClientProtocol",
    "S3ObjectStorage",
    "StorageDriver",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageKeyNotExistsError",
    "StorageKeyVanishedError",
    "StorageNotConfiguredError",
    "StoragePartialMoveError",
    "StoragePermissionError",
    "StorageQuotaExceededError",
    "StorageTimeoutError",
    "StorageTransportError",
    "StorageValidationError",
    "create_object_storage",
    "immediate_children",
    "open_object_storage",
    "public_endpoint",
    "public_endpoint_for",
    "resolve_url",
]
