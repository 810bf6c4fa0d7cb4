"""Ordered, persisted collection of locally tracked mailboxes."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Callable, Iterator, Optional

from loguru import logger

from dropwin.application.ports.blob_store import BlobStore
from dropwin.domain import Mailbox, MailboxAddress, generate_address, parse_address
from dropwin.domain.errors import AddressCollisionError, MalformedInputError, PersistenceError

STORAGE_KEY = "dropwin_emails"
MAX_CREATE_ATTEMPTS = 5


class MailboxStore:
    """Mailboxes in newest-first order, written through to a blob store.

    The whole collection is serialized and overwritten on every mutation.
    Absent or unreadable state loads as an empty store; write failures are
    logged and the in-memory state stays authoritative for the session.
    """

    def __init__(
        self,
        blobs: BlobStore,
        generator: Callable[[], MailboxAddress] = generate_address,
        key: str = STORAGE_KEY,
        max_attempts: int = MAX_CREATE_ATTEMPTS,
    ):
        self.blobs = blobs
        self.generator = generator
        self.key = key
        self.max_attempts = max_attempts
        self._mailboxes: list[Mailbox] = self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> list[Mailbox]:
        try:
            raw = self.blobs.get(self.key)
        except PersistenceError as e:
            logger.error(f"Failed to read mailboxes from storage: {e}")
            return []

        if not raw:
            return []

        try:
            items = json.loads(raw)
        except ValueError as e:
            logger.error(f"Stored mailboxes are corrupt, starting empty: {e}")
            return []
        if not isinstance(items, list):
            logger.error(f"Stored mailboxes are corrupt, starting empty: expected a list, got {type(items).__name__}")
            return []

        mailboxes = []
        seen: set[str] = set()
        for item in items:
            try:
                mailbox = Mailbox.from_dict(item)
                parse_address(mailbox.address)
            except (ValueError, KeyError, TypeError, MalformedInputError) as e:
                logger.warning(f"Skipping unreadable stored mailbox {item!r}: {e}")
                continue
            # Keep the first occurrence if the stored blob repeats an address
            if mailbox.address not in seen:
                seen.add(mailbox.address)
                mailboxes.append(mailbox)

        logger.info(f"Loaded {len(mailboxes)} mailbox(es) from storage")
        return mailboxes

    def dumps(self) -> str:
        return json.dumps([m.to_dict() for m in self._mailboxes])

    def _save(self) -> None:
        try:
            self.blobs.put(self.key, self.dumps())
        except PersistenceError as e:
            logger.error(f"Failed to save mailboxes: {e}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all(self) -> tuple[Mailbox, ...]:
        """Snapshot of all mailboxes, newest first."""
        return tuple(replace(m) for m in self._mailboxes)

    def get(self, address: str) -> Optional[Mailbox]:
        mailbox = self._find(address)
        return replace(mailbox) if mailbox else None

    def newest(self) -> Optional[Mailbox]:
        return replace(self._mailboxes[0]) if self._mailboxes else None

    def _find(self, address: str) -> Optional[Mailbox]:
        for mailbox in self._mailboxes:
            if mailbox.address == address:
                return mailbox
        return None

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self._find(address) is not None

    def __len__(self) -> int:
        return len(self._mailboxes)

    def __iter__(self) -> Iterator[Mailbox]:
        return iter(self.all())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self) -> Mailbox:
        """Generate a fresh address and track it at the front of the list."""
        for attempt in range(1, self.max_attempts + 1):
            address = self.generator().email
            if address not in self:
                break
            logger.warning(f"Generated address {address} already tracked (attempt {attempt})")
        else:
            raise AddressCollisionError(
                f"No unused address after {self.max_attempts} attempts"
            )

        mailbox = Mailbox(address=address)
        self._mailboxes.insert(0, mailbox)
        self._save()
        logger.info(f"Created mailbox {address}")
        return replace(mailbox)

    def remove(self, address: str) -> bool:
        """Stop tracking ``address``. Removing an unknown address is a no-op."""
        remaining = [m for m in self._mailboxes if m.address != address]
        if len(remaining) == len(self._mailboxes):
            return False
        self._mailboxes = remaining
        self._save()
        logger.info(f"Removed mailbox {address}")
        return True

    def update_count(self, address: str, count: int) -> bool:
        """Set the cached message count. Returns False if the mailbox is gone."""
        if count < 0:
            raise ValueError(f"message count must be non-negative, got {count}")

        mailbox = self._find(address)
        if mailbox is None:
            logger.debug(f"Ignoring count update for removed mailbox {address}")
            return False

        mailbox.message_count = count
        self._save()
        return True
