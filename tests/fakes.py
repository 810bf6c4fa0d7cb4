"""Test doubles for the scheduler and inbox provider."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from dropwin.application import MessageListing
from dropwin.domain import MailboxAddress, Message
from dropwin.domain.errors import MessageNotFoundError


class FakeTimer:
    def __init__(self, interval: float, callback):
        self.interval = interval
        self.callback = callback
        self.active = True
        self.fired = 0

    def cancel(self) -> None:
        self.active = False

    async def tick(self) -> None:
        """Fire once, as the event loop would when the interval elapses."""
        if not self.active:
            return
        self.fired += 1
        await self.callback()


class FakeScheduler:
    def __init__(self):
        self.timers: list[FakeTimer] = []

    def call_every(self, interval: float, callback) -> FakeTimer:
        timer = FakeTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def active_timers(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.active]


class FakeProvider:
    """In-memory inboxes. ``hold_next`` parks the next listing until released."""

    def __init__(self):
        self.inboxes: dict[str, list[Message]] = {}
        self.calls: list[str] = []
        self.fail_list = False
        self.read_error: Exception | None = None
        self._held: list[asyncio.Event] = []

    def hold_next(self) -> asyncio.Event:
        gate = asyncio.Event()
        self._held.append(gate)
        return gate

    async def list_messages(self, address: MailboxAddress) -> MessageListing:
        self.calls.append(address.email)
        snapshot = list(self.inboxes.get(address.email, []))
        if self._held:
            await self._held.pop(0).wait()
        if self.fail_list:
            return MessageListing(messages=[], error="Could not fetch messages. Try again later.")
        return MessageListing(messages=snapshot)

    async def read_message(self, address: MailboxAddress, message_id: int) -> Message:
        if self.read_error is not None:
            raise self.read_error
        for message in self.inboxes.get(address.email, []):
            if message.id == message_id:
                return message
        raise MessageNotFoundError(f"Message {message_id} not found")


def make_message(id: int, subject: str = "Hello", **kwargs) -> Message:
    defaults = dict(
        sender="alice@example.com",
        subject=subject,
        date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        text_body=f"body {id}",
    )
    defaults.update(kwargs)
    return Message(id=id, **defaults)


def sequence_generator(*emails: str):
    """Address generator that yields the given addresses in order."""
    addresses = iter(emails)

    def generate() -> MailboxAddress:
        username, _, domain = next(addresses).partition("@")
        return MailboxAddress(username=username, domain=domain)

    return generate


async def settle() -> None:
    """Let pending tasks run until they block."""
    for _ in range(5):
        await asyncio.sleep(0)

