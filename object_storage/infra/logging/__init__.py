"""Logging infrastructure.

Provides structured logging built on the standard library with:
- JSONL format for log aggregation
- Automatic context injection via contextvars
- QueueHandler + QueueListener for non-blocking I/O

Basic usage:
    from object_storage.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # Automatically includes request_id
"""

from object_storage.infra.logging.config import configure_logging, setup_logging, shutdown
from object_storage.infra.logging.context import (
    ContextBoundLogger,
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    get_logger,
    remove_from_log_context,
    set_log_context,
)
from object_storage.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextBoundLogger",
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "get_logger",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
