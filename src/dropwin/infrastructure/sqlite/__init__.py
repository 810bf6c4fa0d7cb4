"""SQLite infrastructure for local mailbox persistence."""

from dropwin.infrastructure.sqlite.client import SQLiteBlobStore

__all__ = [
    "SQLiteBlobStore",
]
