"""
Observable signal primitives.

A StateSubject holds the subscribers of one signal. Subscribing returns a
Subscription handle; disposing the handle is the only way to unsubscribe, so
whoever owns the handle owns the lifetime of the registration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle for one registered subscriber."""

    __slots__ = ("_dispose", "_disposed")

    def __init__(self, dispose: Callable[[], None]) -> None:
        self._dispose = dispose
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Remove the subscriber. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._dispose()


class StateSubject(Generic[T]):
    """
    Minimal push-based subject.

    Subscribers are called synchronously, in registration order, on the
    thread that calls ``emit``. A subscriber that raises is logged and
    skipped; delivery to the remaining subscribers continues.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[int, Callable[[T], None]]] = []
        self._next_token = 0

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._subscribers.append((token, callback))
        return Subscription(lambda: self._remove(token))

    def emit(self, value: T) -> None:
        for _, callback in list(self._subscribers):
            try:
                callback(value)
            except Exception:
                logger.exception(f"State subscriber {callback!r} failed")

    def clear(self) -> None:
        self._subscribers.clear()

    def _remove(self, token: int) -> None:
        self._subscribers = [(t, cb) for t, cb in self._subscribers if t != token]
