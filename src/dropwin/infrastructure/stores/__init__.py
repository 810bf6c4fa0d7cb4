from dropwin.infrastructure.stores.factory import create_blob_store
from dropwin.infrastructure.stores.memory_blob_store import MemoryBlobStore

__all__ = ["MemoryBlobStore", "create_blob_store"]
