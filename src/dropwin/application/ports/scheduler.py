from __future__ import annotations
from typing import Awaitable, Callable, Protocol

TickCallback = Callable[[], Awaitable[None]]

class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...
    def cancel(self) -> None: ...

class Scheduler(Protocol):
    def call_every(self, interval: float, callback: TickCallback) -> TimerHandle: ...
