from __future__ import annotations
from datetime import datetime, timezone
from html import escape
from typing import Any, Mapping

from dropwin.domain import NO_SUBJECT, Message

# Provider timestamps look like "2018-06-08 14:33:55" and carry no zone
_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S")

def _parse_date(value: Any) -> datetime:
    if isinstance(value, str) and value.strip():
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
        try:
            dt = datetime.fromisoformat(text)
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    # Default to now if absent/unparseable
    return datetime.now(timezone.utc)

def _text_body(raw: Mapping[str, Any]) -> str:
    return raw.get("textBody") or raw.get("body") or ""

def _message_id(raw: Mapping[str, Any]) -> int:
    value = raw.get("id")
    if isinstance(value, bool) or value is None:
        raise ValueError(f"message id missing or invalid: {value!r}")
    return int(value)

def raw_to_message(raw: Mapping[str, Any], include_details: bool = False) -> Message:
    """Map a provider JSON item to a Message. Raises ValueError/TypeError if malformed."""
    if not isinstance(raw, Mapping):
        raise TypeError(f"expected an object, got {type(raw).__name__}")

    html_body = None
    attachments: tuple = ()
    if include_details:
        html_body = raw.get("htmlBody") or None
        attachments = tuple(a for a in (raw.get("attachments") or []) if isinstance(a, Mapping))

    return Message(
        id=_message_id(raw),
        sender=str(raw.get("from") or ""),
        subject=str(raw.get("subject") or NO_SUBJECT),
        date=_parse_date(raw.get("date")),
        text_body=str(_text_body(raw)),
        html_body=html_body,
        attachments=attachments,
    )

def render_html_body(message: Message) -> str:
    """HTML for display: the provider's HTML, else the text body in a <pre>."""
    if message.html_body:
        return message.html_body
    return (
        '<pre style="white-space: pre-wrap; font-family: Arial, sans-serif;">'
        f"{escape(message.text_body)}</pre>"
    )
