"""Polling lifecycle for the selected mailbox."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from dropwin.application.mailbox_store import MailboxStore
from dropwin.application.ports.inbox_provider import InboxProvider
from dropwin.application.ports.scheduler import Scheduler, TimerHandle
from dropwin.domain import Mailbox, MailboxAddress, Message, parse_address
from dropwin.domain.errors import MailboxNotFoundError, MalformedInputError, SyncStateError

POLL_INTERVAL_SECONDS = 3.0

MessagesListener = Callable[[str, list[Message]], None]


class SyncState(str, Enum):
    """States of the sync engine."""

    IDLE = "idle"
    POLLING = "polling"


@dataclass
class PollSession:
    """Polling state bound to one mailbox."""

    address: str
    timer: Optional[TimerHandle] = None
    in_flight: int = 0
    polls_completed: int = 0
    ticks_skipped: int = 0


def sort_newest_first(messages: list[Message]) -> list[Message]:
    # sorted() is stable with reverse=True, so equal ids keep arrival order
    return sorted(messages, key=lambda m: m.id, reverse=True)


class SyncEngine:
    """
    Owns the single active poll session.

    Selecting a mailbox cancels any running timer, arms a new recurring
    timer and fetches immediately. Every fetch reconciles the message count
    into the store and publishes the sorted messages to the listener.

    Overlap policy: a timer tick is skipped while a fetch for the same
    session is still in flight. Manual refreshes are never skipped and do
    not reset the timer. A fetch that completes after its session was
    replaced, or after its mailbox was removed, is discarded.
    """

    def __init__(
        self,
        store: MailboxStore,
        provider: InboxProvider,
        scheduler: Scheduler,
        interval: float = POLL_INTERVAL_SECONDS,
        listener: Optional[MessagesListener] = None,
    ):
        self.store = store
        self.provider = provider
        self.scheduler = scheduler
        self.interval = interval
        self.listener = listener
        self._session: Optional[PollSession] = None
        self._messages: list[Message] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return SyncState.POLLING if self._session else SyncState.IDLE

    @property
    def selected(self) -> Optional[str]:
        return self._session.address if self._session else None

    @property
    def session(self) -> Optional[PollSession]:
        return self._session

    @property
    def messages(self) -> list[Message]:
        """Messages of the selected mailbox from the last applied fetch."""
        return list(self._messages)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def select(self, address: str) -> list[Message]:
        """Start polling ``address``, replacing any current session."""
        if address not in self.store:
            raise MailboxNotFoundError(address)
        mailbox_address = parse_address(address)

        self._cancel_session()

        session = PollSession(address=address)
        self._session = session
        session.timer = self.scheduler.call_every(self.interval, lambda: self._on_tick(session))
        logger.info(f"Polling {address} every {self.interval}s")

        await self._fetch(session, mailbox_address)
        if self._session is not session:
            return []
        return self.messages

    def deselect(self) -> None:
        """Stop polling. No further fetches happen until the next select."""
        if self._session is None:
            return
        logger.info(f"Stopped polling {self._session.address}")
        self._cancel_session()

    async def manual_refresh(self) -> list[Message]:
        """Fetch once out of band. The timer schedule is left untouched."""
        session = self._session
        if session is None:
            raise SyncStateError("No mailbox selected")
        await self._fetch(session)
        return self.messages

    async def create(self) -> Mailbox:
        """Create a mailbox and select it."""
        mailbox = self.store.create()
        await self.select(mailbox.address)
        return mailbox

    async def remove(self, address: str) -> bool:
        """Remove a mailbox, moving the selection to the newest remaining one."""
        was_selected = self.selected == address
        if was_selected:
            self.deselect()

        removed = self.store.remove(address)

        if was_selected:
            newest = self.store.newest()
            if newest is not None:
                await self.select(newest.address)
        return removed

    async def restore(self) -> Optional[str]:
        """Select the most recently created mailbox, if any."""
        newest = self.store.newest()
        if newest is None:
            logger.info("No stored mailboxes to restore")
            return None
        try:
            await self.select(newest.address)
        except MalformedInputError as e:
            logger.error(f"Cannot restore {newest.address}: {e}")
            return None
        return newest.address

    def close(self) -> None:
        self.deselect()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _cancel_session(self) -> None:
        session = self._session
        self._session = None
        self._messages = []
        if session and session.timer:
            session.timer.cancel()

    def _is_current(self, session: PollSession) -> bool:
        return self._session is session and session.address in self.store

    async def _on_tick(self, session: PollSession) -> None:
        if not self._is_current(session):
            return
        if session.in_flight:
            session.ticks_skipped += 1
            logger.debug(f"Skipping tick for {session.address}: fetch still in flight")
            return
        await self._fetch(session)

    async def _fetch(self, session: PollSession, address: Optional[MailboxAddress] = None) -> None:
        if address is None:
            address = parse_address(session.address)

        session.in_flight += 1
        try:
            listing = await self.provider.list_messages(address)
        finally:
            session.in_flight -= 1

        if not self._is_current(session):
            logger.debug(f"Discarding stale fetch for {session.address}")
            return

        messages = sort_newest_first(listing.messages)
        self.store.update_count(session.address, len(messages))
        self._messages = messages
        session.polls_completed += 1

        if self.listener is not None:
            try:
                self.listener(session.address, self.messages)
            except Exception as e:
                logger.exception(f"Messages listener failed for {session.address}: {e}")
