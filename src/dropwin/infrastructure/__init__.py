"""Infrastructure layer - provider clients, storage, scheduling and configuration."""

from dropwin.infrastructure.email.providers.onesecmail import OneSecMailProvider
from dropwin.infrastructure.log_config import configure_logging
from dropwin.infrastructure.scheduling import AsyncioScheduler
from dropwin.infrastructure.settings import Settings, get_settings
from dropwin.infrastructure.stores import MemoryBlobStore, create_blob_store

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Provider
    "OneSecMailProvider",
    # Storage
    "MemoryBlobStore",
    "create_blob_store",
    # Scheduling
    "AsyncioScheduler",
]
