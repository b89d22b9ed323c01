"""Storage metrics for Prometheus monitoring.

Tracks every remote call the adapter makes:
- Operation counters and timing (upload, create_directory, list, copy,
  move, get_object, delete, exists)
- Object size distribution for uploads and downloads
- In-flight operations
- Errors by exception type

Metrics are registered with the default prometheus_client REGISTRY; the
embedding process decides how to expose them.

Usage:
    from object_storage.infra.storage.metrics import record_operation_success

    record_operation_success("upload", duration_seconds=1.5, size_bytes=1048576)
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# Covers latency from 10ms to 30s for network operations
STORAGE_LATENCY_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)

# 1KB to 100MB
STORAGE_SIZE_BUCKETS = (1024, 10240, 102400, 1048576, 10485760, 52428800, 104857600)

storage_operations_total = Counter(
    "object_storage_operations_total",
    "Total object storage operations",
    ["operation", "status"],
)

storage_operation_duration_seconds = Histogram(
    "object_storage_operation_duration_seconds",
    "Object storage operation duration in seconds",
    ["operation"],
    buckets=STORAGE_LATENCY_BUCKETS,
)

storage_object_size_bytes = Histogram(
    "object_storage_object_size_bytes",
    "Size of objects uploaded/downloaded in bytes",
    ["operation"],
    buckets=STORAGE_SIZE_BUCKETS,
)

storage_operations_in_progress = Gauge(
    "object_storage_operations_in_progress",
    "Number of object storage operations currently awaiting the remote store",
)

storage_errors_total = Counter(
    "object_storage_errors_total",
    "Object storage operation errors by type",
    ["operation", "error_type"],
)


def record_operation_success(
    operation: str,
    duration_seconds: float,
    size_bytes: int | None = None,
) -> None:
    """Record a successful storage operation.

    Args:
        operation: The operation name (e.g., 'upload', 'copy')
        duration_seconds: Operation duration in seconds
        size_bytes: Optional object size for upload/download operations
    """
    storage_operations_total.labels(operation=operation, status="success").inc()
    storage_operation_duration_seconds.labels(operation=operation).observe(duration_seconds)
    if size_bytes is not None:
        storage_object_size_bytes.labels(operation=operation).observe(size_bytes)


def record_operation_error(
    operation: str,
    error_type: str,
    duration_seconds: float,
) -> None:
    """Record a failed storage operation.

    Args:
        operation: The operation name (e.g., 'upload', 'copy')
        error_type: The error class name (e.g., 'StorageTimeoutError')
        duration_seconds: Operation duration in seconds before failure
    """
    storage_operations_total.labels(operation=operation, status="error").inc()
    storage_operation_duration_seconds.labels(operation=operation).observe(duration_seconds)
    storage_errors_total.labels(operation=operation, error_type=error_type).inc()
