"""Application layer - mailbox store and sync engine."""

from dropwin.application.mailbox_store import STORAGE_KEY, MailboxStore
from dropwin.application.ports.inbox_provider import InboxProvider, MessageListing
from dropwin.application.sync_engine import PollSession, SyncEngine, SyncState, sort_newest_first

__all__ = [
    "STORAGE_KEY",
    "MailboxStore",
    "InboxProvider",
    "MessageListing",
    "PollSession",
    "SyncEngine",
    "SyncState",
    "sort_newest_first",
]
