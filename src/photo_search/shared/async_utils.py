"""
Async Utilities for the search pipeline.

Provides:
- Debouncer: trailing-edge debounce on a cooperative event-loop timer
- cancel_and_wait: cancel a set of tasks and let them unwind
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Debouncer
# =============================================================================

class Debouncer(Generic[T]):
    """
    Trailing-edge debouncer driven by ``loop.call_later``.

    Every ``push()`` cancels the pending timer and starts a new one; only the
    value pushed last before a quiet window of ``delay`` seconds reaches the
    callback. ``push()`` never blocks and must be called from the event loop
    thread.

    Example:
        debouncer = Debouncer(1.0, on_settled)
        debouncer.push("p")
        debouncer.push("pa")   # "p" is dropped
        await debouncer.wait() # on_settled("pa") has run
    """

    def __init__(self, delay: float, callback: Callable[[T], Any]) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._settled = asyncio.Event()
        self._settled.set()

    @property
    def pending(self) -> bool:
        """True while a value is waiting for its quiet window to elapse."""
        return self._handle is not None

    def push(self, value: T) -> None:
        """Buffer ``value``, discarding any buffered predecessor."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._settled.clear()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> None:
        """Drop the buffered value, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._settled.set()

    async def wait(self) -> None:
        """Wait until no value is buffered."""
        await self._settled.wait()

    def _fire(self, value: T) -> None:
        self._handle = None
        try:
            self._callback(value)
        finally:
            self._settled.set()


# =============================================================================
# Task helpers
# =============================================================================

async def cancel_and_wait(tasks: Iterable[asyncio.Task[Any]]) -> None:
    """Cancel ``tasks`` and wait for them to finish unwinding."""
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
