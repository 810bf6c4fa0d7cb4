from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Mailbox:
    """A disposable address tracked locally, with its last-known message count."""

    address: str
    created_at: datetime = field(default_factory=_utcnow)
    message_count: int = 0

    @property
    def username(self) -> str:
        return self.address.partition("@")[0]

    @property
    def domain(self) -> str:
        return self.address.partition("@")[2]

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "createdAt": self.created_at.isoformat(),
            "messageCount": self.message_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Mailbox":
        address = data["address"]
        if not isinstance(address, str):
            raise TypeError(f"address must be a string, got {type(address).__name__}")
        created_at = datetime.fromisoformat(data["createdAt"])
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        count = int(data.get("messageCount", 0))
        return cls(
            address=address,
            created_at=created_at,
            message_count=max(count, 0),
        )
