"""Disposable mailbox address generation and parsing."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from dropwin.domain.errors import GenerationError, MalformedInputError

PREFIXES = ("drop", "temp", "quick", "fast", "safe", "anon", "win", "mail", "box", "secure")
SUFFIXES = ("mail", "post", "box", "drop", "win", "safe", "fast", "temp", "user", "test")

# Domains the provider accepts mail for
DOMAINS = (
    "1secmail.com",
    "1secmail.org",
    "1secmail.net",
    "kzccv.com",
    "qiott.com",
    "wuuvo.com",
    "icznn.com",
)
DEFAULT_DOMAIN = DOMAINS[0]

NUMBER_MIN = 1000
NUMBER_MAX = 9999


@dataclass(frozen=True)
class MailboxAddress:
    username: str
    domain: str

    @property
    def email(self) -> str:
        return f"{self.username}@{self.domain}"

    def __str__(self) -> str:
        return self.email


def generate_username(rng: random.Random | None = None) -> str:
    """Compose a name like ``quickmail4582``."""
    rng = rng or random
    prefix = rng.choice(PREFIXES)
    suffix = rng.choice(SUFFIXES)
    number = rng.randint(NUMBER_MIN, NUMBER_MAX)
    return f"{prefix}{suffix}{number}".lower()


def generate_address(
    domains: Sequence[str] = DOMAINS,
    rng: random.Random | None = None,
) -> MailboxAddress:
    """Generate a random mailbox address on one of ``domains``."""
    if not domains:
        raise GenerationError("No mail domains configured")
    rng = rng or random
    username = generate_username(rng)
    domain = rng.choice(list(domains))
    return MailboxAddress(username=username, domain=domain.lower())


def fallback_address(rng: random.Random | None = None) -> MailboxAddress:
    """Address on the default domain, used when generation fails."""
    return MailboxAddress(username=generate_username(rng), domain=DEFAULT_DOMAIN)


def parse_address(text: str | None) -> MailboxAddress:
    """Split ``local@domain`` into its parts."""
    if not text or not text.strip():
        raise MalformedInputError("Email address is required")
    username, sep, domain = text.strip().partition("@")
    if not sep or not username or not domain or "@" in domain:
        raise MalformedInputError(f"Invalid email address: {text!r}")
    return MailboxAddress(username=username, domain=domain)
