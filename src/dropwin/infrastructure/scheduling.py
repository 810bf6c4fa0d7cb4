"""Recurring timers on the running asyncio event loop."""

from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from dropwin.application.ports.scheduler import TickCallback


class AsyncioTimer:
    """A repeating timer. Each tick is scheduled from the previous tick's start.

    The callback runs as its own task, so a slow callback does not delay the
    next tick.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: TickCallback):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()
        self._active = True
        self._arm()

    @property
    def active(self) -> bool:
        return self._active

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if not self._active:
            return
        self._arm()
        task = self._loop.create_task(self._run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self) -> None:
        # Cancelled between the tick firing and this task starting
        if not self._active:
            return
        try:
            await self._callback()
        except Exception as e:
            logger.exception(f"Timer callback failed: {e}")

    def cancel(self) -> None:
        """Stop future ticks. A callback already running is left to finish."""
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Scheduler backed by the event loop running at call time."""

    def call_every(self, interval: float, callback: TickCallback) -> AsyncioTimer:
        loop = asyncio.get_running_loop()
        return AsyncioTimer(loop, interval, callback)
