"""Storage operation instrumentation with OpenTelemetry and Prometheus metrics.

Every adapter operation runs inside ``track_storage_operation``, which opens a
``storage.<operation>`` span (so JSON logs emitted inside it carry the trace
and span ids) and records the Prometheus metrics from ``metrics``.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from . import metrics

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

_tracer = trace.get_tracer("object_storage.storage")


@asynccontextmanager
async def track_storage_operation(
    operation: str,
    key: str | None = None,
    bucket: str | None = None,
    size_bytes: int | None = None,
    **attributes: Any,
) -> AsyncIterator[dict[str, Any]]:
    """Track a storage operation with an OpenTelemetry span and Prometheus metrics.

    The yielded dict can be updated by the caller; its entries are recorded
    on the span as ``storage.result.*`` attributes when the block exits
    successfully. A ``result_size`` entry also feeds the size histogram.

    Args:
        operation: Operation name (upload, list, copy, ...)
        key: Object key
        bucket: Bucket name
        size_bytes: Payload size for uploads
        **attributes: Extra span attributes (e.g., dest_key)

    Yields:
        A context dictionary that can be updated with additional attributes

    Example:
        async with track_storage_operation("get_object", key=key, bucket=bucket) as ctx:
            data = await ...
            ctx["result_size"] = len(data)
    """
    start_time = time.perf_counter()
    context: dict[str, Any] = {}

    span_attributes: dict[str, Any] = {"storage.operation": operation}
    if key is not None:
        span_attributes["storage.key"] = key
    if bucket:
        span_attributes["storage.bucket"] = bucket
    if size_bytes is not None:
        span_attributes["storage.size_bytes"] = size_bytes
    for name, value in attributes.items():
        span_attributes[f"storage.{name}"] = str(value)

    metrics.storage_operations_in_progress.inc()

    with _tracer.start_as_current_span(
        f"storage.{operation}",
        attributes=span_attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield context

            for name, value in context.items():
                span.set_attribute(f"storage.result.{name}", str(value))

            metrics.record_operation_success(
                operation=operation,
                duration_seconds=time.perf_counter() - start_time,
                size_bytes=context.get("result_size", size_bytes),
            )
            span.set_status(Status(StatusCode.OK))

        except Exception as e:
            metrics.record_operation_error(
                operation=operation,
                error_type=type(e).__name__,
                duration_seconds=time.perf_counter() - start_time,
            )
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise

        finally:
            metrics.storage_operations_in_progress.dec()
