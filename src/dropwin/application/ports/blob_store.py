from __future__ import annotations
from typing import Optional, Protocol

class BlobStore(Protocol):
    # Raises PersistenceError when the backing medium fails
    def get(self, key: str) -> Optional[str]: ...
    def put(self, key: str, value: str) -> None: ...
