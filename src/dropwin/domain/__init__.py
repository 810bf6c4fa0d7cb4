"""Domain models and entities."""

from dropwin.domain.addresses import (
    DEFAULT_DOMAIN,
    DOMAINS,
    MailboxAddress,
    fallback_address,
    generate_address,
    parse_address,
)
from dropwin.domain.entities.mailbox import Mailbox
from dropwin.domain.entities.message import NO_SUBJECT, Message

__all__ = [
    "DEFAULT_DOMAIN",
    "DOMAINS",
    "MailboxAddress",
    "fallback_address",
    "generate_address",
    "parse_address",
    "Mailbox",
    "Message",
    "NO_SUBJECT",
]
