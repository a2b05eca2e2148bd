"""Storage backends serving the blog/post operations."""

from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.backends.database import DatabaseStorageBackend
from inkwell.storage.backends.local import LocalStorageBackend

__all__ = ["DatabaseStorageBackend", "LocalStorageBackend", "StorageBackend"]
