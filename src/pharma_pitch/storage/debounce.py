"""Cancellable deferred tasks for coalescing bursts of save requests."""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay and hand back a cancel handle."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class LoopScheduler:
    """Schedules on the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        return asyncio.get_running_loop().call_later(delay, callback)


class DebouncedTask:
    """Runs ``callback`` once, ``delay`` seconds after the most recent ``schedule()``.

    Each ``schedule()`` cancels the pending handle and replaces it, so a burst
    of requests inside the window produces a single callback.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        scheduler: Scheduler | None = None,
    ):
        self.delay = delay
        self._callback = callback
        self._scheduler = scheduler or LoopScheduler()
        self._handle: Cancellable | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        self.cancel()
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def fire_now(self) -> bool:
        """Run a pending callback immediately. Returns False if nothing was pending."""
        if self._handle is None:
            return False
        self.cancel()
        self._callback()
        return True

    def _fire(self) -> None:
        self._handle = None
        self._callback()
