"""Domain errors for mailbox lifecycle and provider access."""

from __future__ import annotations


class DropwinError(Exception):
    """Base class for all DropWin errors."""


class GenerationError(DropwinError):
    """Address synthesis failed."""


class MalformedInputError(DropwinError):
    """A mailbox address or message id supplied by a caller is invalid."""


class ListFetchError(DropwinError):
    """Listing a mailbox failed upstream. Never escapes the provider adapter."""


class ReadFetchError(DropwinError):
    """Reading a single message failed upstream."""


class MessageNotFoundError(ReadFetchError):
    """The provider has no message with the requested id."""


class PersistenceError(DropwinError):
    """The blob store could not be read or written."""


class MailboxNotFoundError(DropwinError):
    """No mailbox with the given address is tracked."""

    def __init__(self, address: str):
        super().__init__(f"Unknown mailbox: {address}")
        self.address = address


class AddressCollisionError(DropwinError):
    """Could not generate an address that is not already tracked."""


class SyncStateError(DropwinError):
    """Operation is not valid in the sync engine's current state."""
