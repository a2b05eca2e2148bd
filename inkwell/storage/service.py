"""Storage backend selection.

Examples:
    >>> from inkwell.storage.service import create_backend
    >>> backend = create_backend(get_settings())
    >>> await backend.startup()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.backends.local import LocalStorageBackend
from inkwell.storage.root import StorageRoot

if TYPE_CHECKING:
    from inkwell.config import Settings

logger = logging.getLogger(__name__)


def create_backend(settings: Settings) -> StorageBackend:
    """Build the storage backend named by ``settings.STORAGE_BACKEND``.

    Args:
        settings: Application settings.

    Returns:
        An unstarted backend; call ``startup()`` before serving requests.
    """
    from inkwell.config import StorageBackendType

    if settings.STORAGE_BACKEND == StorageBackendType.DATABASE:
        from inkwell.database import build_engine
        from inkwell.storage.backends.database import DatabaseStorageBackend

        logger.info("Using database storage backend")
        return DatabaseStorageBackend(build_engine(settings.DATABASE_URL, echo=settings.DEBUG))

    root = StorageRoot.from_config(settings.storage_config())
    logger.info(f"Using filesystem storage backend at {root.base}")
    return LocalStorageBackend(root)
