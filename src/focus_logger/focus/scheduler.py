"""Repeating-callback scheduler used to drive the session timer cadence."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class RepeatingHandle(Protocol):
    """Handle to a scheduled repeating callback."""

    def cancel(self) -> None:
        """Stop further callbacks. Safe to call more than once."""
        ...


class Scheduler(Protocol):
    """Anything that can fire a callback on a fixed interval."""

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> RepeatingHandle:
        ...


class _AsyncioRepeatingHandle:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_seconds: float,
        callback: Callable[[], None],
    ):
        self._loop = loop
        self._interval = interval_seconds
        self._callback = callback
        self._cancelled = False
        self._next: asyncio.TimerHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def arm(self) -> None:
        self._next = self._loop.call_later(self._interval, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        if self._next is not None:
            self._next.cancel()
            self._next = None

    def _fire(self) -> None:
        self._next = None
        if self._cancelled:
            return

        try:
            self._callback()
        except Exception as e:
            logger.error(f"Error in scheduled callback: {e}")

        # The callback may have cancelled this handle
        if not self._cancelled:
            self.arm()


class AsyncioScheduler:
    """Scheduler backed by the asyncio event loop.

    Callbacks run on the loop thread, so the timer state is only ever touched
    from one execution context. Each firing re-arms the next one with
    ``loop.call_later`` unless the handle was cancelled in the meantime.

    Usage:
        scheduler = AsyncioScheduler()
        handle = scheduler.call_repeating(1.0, timer.tick)
        ...
        handle.cancel()
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> RepeatingHandle:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        loop = self._loop or asyncio.get_running_loop()
        handle = _AsyncioRepeatingHandle(loop, interval_seconds, callback)
        handle.arm()
        return handle
