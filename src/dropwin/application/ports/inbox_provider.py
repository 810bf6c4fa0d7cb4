from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Protocol

from dropwin.domain import MailboxAddress, Message

@dataclass(frozen=True)
class MessageListing:
    messages: list[Message] = field(default_factory=list)
    # Set when the upstream call failed and messages is the empty fallback
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

class InboxProvider(Protocol):
    async def list_messages(self, address: MailboxAddress) -> MessageListing: ...
    async def read_message(self, address: MailboxAddress, message_id: int) -> Message: ...
