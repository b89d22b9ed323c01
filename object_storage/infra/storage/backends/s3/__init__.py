"""S3-compatible storage backend.

Supports AWS S3, Scaleway, MinIO, LocalStack, and other S3-compatible services.
"""

from .backend import S3ObjectStorage

__all__ = ["S3ObjectStorage"]
