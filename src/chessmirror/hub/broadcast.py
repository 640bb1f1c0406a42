"""In-process broadcast hub with late-join replay.

The hub holds the most recent value and fans every published value out to
all current subscribers. A subscriber that joins late immediately receives
the current value. Publishing from inside a subscriber callback is allowed:
the new value is queued and delivered after the running fan-out, so every
subscriber observes values in publish order.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription(Generic[T]):
    """Handle returned by :meth:`BroadcastHub.subscribe`."""

    __slots__ = ("_hub", "_callback", "_last_sequence", "_active")

    def __init__(self, hub: BroadcastHub[T], callback: Callable[[T], object]) -> None:
        self._hub = hub
        self._callback = callback
        self._last_sequence = 0
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def last_sequence(self) -> int:
        return self._last_sequence

    def unsubscribe(self) -> None:
        """Detach from the hub; calling it again is a no-op."""
        if not self._active:
            return
        self._active = False
        self._hub._detach(self)

    def _deliver(self, sequence: int, value: T) -> None:
        # A replay can overtake queued fan-outs; never go backwards.
        if not self._active or sequence <= self._last_sequence:
            return
        self._last_sequence = sequence
        try:
            self._callback(value)
        except Exception:
            _LOGGER.warning(
                "Subscriber %r failed on update #%d", self._callback, sequence, exc_info=True
            )


class BroadcastHub(Generic[T]):
    """Latest-value fan-out to any number of subscribers."""

    __slots__ = ("_current", "_sequence", "_subscribers", "_queue", "_draining")

    def __init__(self) -> None:
        self._current: T | None = None
        self._sequence = 0
        self._subscribers: list[Subscription[T]] = []
        self._queue: deque[tuple[int, T]] = deque()
        self._draining = False

    @property
    def current(self) -> T | None:
        return self._current

    @property
    def sequence(self) -> int:
        """Number of values published so far."""
        return self._sequence

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, value: T) -> None:
        self._sequence += 1
        self._current = value
        self._queue.append((self._sequence, value))
        if self._draining:
            return
        self._drain()

    def subscribe(self, callback: Callable[[T], object]) -> Subscription[T]:
        """Register *callback*; it is called with the current value at once."""
        subscription = Subscription(self, callback)
        self._subscribers.append(subscription)
        if self._current is not None:
            subscription._deliver(self._sequence, self._current)
        return subscription

    def _detach(self, subscription: Subscription[T]) -> None:
        try:
            self._subscribers.remove(subscription)
        except ValueError:
            pass

    def _drain(self) -> None:
        self._draining = True
        try:
            while self._queue:
                sequence, value = self._queue.popleft()
                for subscription in tuple(self._subscribers):
                    subscription._deliver(sequence, value)
        finally:
            self._draining = False
