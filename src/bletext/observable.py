"""Observable state for UI consumers.

StateStream holds one current value (like a UI state holder): readers see
the latest value, subscribers are called on every change, and ``watch()``
yields values as an async iterator.

StatusFeed replays the most recent message to new subscribers and drops
the oldest queued message when a subscriber falls behind, so a slow
reader never blocks the producer.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _put_latest(queue: asyncio.Queue, item) -> None:
    """Enqueue without blocking, evicting the oldest item when full."""
    if queue.full():
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            pass
    queue.put_nowait(item)


def _notify(callback: Callable[[str], None], message: str) -> None:
    try:
        callback(message)
    except Exception:
        _LOGGER.exception("Status subscriber %r failed", callback)


class StateStream(Generic[T]):
    """Current value plus change notification."""

    def __init__(self, initial: T):
        self._value = initial
        self._callbacks: list[Callable[[T], None]] = []
        self._queues: set[asyncio.Queue[T]] = set()

    @property
    def value(self) -> T:
        return self._value

    def publish(self, value: T) -> None:
        """Publish a new value (owner only). Equal values are not re-published."""
        if value == self._value:
            return
        self._value = value
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception:
                _LOGGER.exception("State subscriber %r failed", callback)
        for queue in self._queues:
            _put_latest(queue, value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Call ``callback`` with every new value.

        Returns:
            A function that removes the subscription
        """
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def watch(self) -> AsyncIterator[T]:
        """Yield the current value, then each later one.

        Intermediate values are skipped if the consumer lags.
        """
        queue: asyncio.Queue[T] = asyncio.Queue(maxsize=1)
        queue.put_nowait(self._value)
        self._queues.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.discard(queue)


class StatusFeed:
    """Status message feed: replay 1, drop oldest on overflow."""

    def __init__(self, buffer_size: int = 16):
        if buffer_size < 1:
            raise ValueError(f"buffer_size out of range: {buffer_size} (must be >= 1)")
        self._buffer_size = buffer_size
        self._latest: str | None = None
        self._callbacks: list[Callable[[str], None]] = []
        self._queues: set[asyncio.Queue[str]] = set()

    @property
    def latest(self) -> str | None:
        """Most recent message, or None before the first one."""
        return self._latest

    def emit(self, message: str) -> None:
        """Publish a message. Never blocks."""
        _LOGGER.debug("Status: %s", message)
        self._latest = message
        for callback in list(self._callbacks):
            _notify(callback, message)
        for queue in self._queues:
            _put_latest(queue, message)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Call ``callback`` with the latest message (if any) and every later one."""
        self._callbacks.append(callback)
        if self._latest is not None:
            _notify(callback, self._latest)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def messages(self) -> AsyncIterator[str]:
        """Yield the replayed latest message, then every later one."""
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=self._buffer_size)
        if self._latest is not None:
            queue.put_nowait(self._latest)
        self._queues.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.discard(queue)
