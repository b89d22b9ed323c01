"""S3-compatible object storage adapter."""

__version__ = "0.1.0"
