"""Storage backends package.

Maps a configured driver to the adapter that serves it.
"""

from object_storage.core.settings.storage import StorageDriver

from .factory import SUPPORTED_DRIVERS, create_object_storage

__all__ = [
    "SUPPORTED_DRIVERS",
    "StorageDriver",
    "create_object_storage",
]
