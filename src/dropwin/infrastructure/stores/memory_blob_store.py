"""Process-local blob store, for ephemeral sessions and tests."""

from __future__ import annotations

from typing import Optional


class MemoryBlobStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def put(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes += 1
