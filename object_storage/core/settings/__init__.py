"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from object_storage.core.settings import get_storage_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional, local/dev)
    3. Environment variables (production)
    4. .env file (development only)
    5. secrets_dir (Kubernetes/Docker secrets)
"""

from __future__ import annotations

from .loader import clear_all_caches, get_logging_settings, get_storage_settings
from .logs import LoggingSettings
from .storage import DEFAULT_REGION, StorageDriver, StorageSettings

__all__ = [
    "DEFAULT_REGION",
    "LoggingSettings",
    "StorageDriver",
    "StorageSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_storage_settings",
]
