from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

NO_SUBJECT = "(No subject)"


@dataclass(frozen=True)
class Message:
    id: int
    sender: str
    subject: str
    date: datetime
    text_body: str
    html_body: Optional[str] = None
    attachments: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)  # provider metadata, passed through
