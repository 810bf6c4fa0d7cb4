"""Select the blob store backend from settings."""

from __future__ import annotations

from loguru import logger

from dropwin.application.ports.blob_store import BlobStore
from dropwin.domain.errors import PersistenceError
from dropwin.infrastructure.settings import Settings
from dropwin.infrastructure.stores.memory_blob_store import MemoryBlobStore


def create_blob_store(settings: Settings) -> BlobStore:
    """Build the configured backend, falling back to memory if SQLite is unusable."""
    if settings.storage_backend == "memory":
        return MemoryBlobStore()

    from dropwin.infrastructure.sqlite.client import SQLiteBlobStore

    try:
        return SQLiteBlobStore(settings.sqlite_db_path)
    except PersistenceError as e:
        logger.error(f"SQLite storage unavailable, mailboxes will not survive restart: {e}")
        return MemoryBlobStore()
