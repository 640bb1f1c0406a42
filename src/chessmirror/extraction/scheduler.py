"""Debounced extraction scheduling.

Mutation batches and the periodic fallback poll both funnel into one
debounce timer. A cycle always runs to completion; triggers that arrive
while it runs are folded into a single follow-up schedule.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer

_LOGGER = logging.getLogger(__name__)


class ITimer(ABC):
    """Restartable single-shot timer."""

    @abstractmethod
    def set_callback(self, callback: Callable[[], None]) -> None: ...

    @abstractmethod
    def start(self, interval_ms: int) -> None:
        """(Re)arm the timer; a pending expiry is replaced."""

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def is_active(self) -> bool: ...


class QtSingleShotTimer(ITimer):
    """:class:`ITimer` backed by a single-shot :class:`QTimer`."""

    __slots__ = ("_timer", "_callback")

    def __init__(self, parent: QObject | None = None) -> None:
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)
        self._callback: Callable[[], None] | None = None

    def set_callback(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def start(self, interval_ms: int) -> None:
        self._timer.start(max(0, int(interval_ms)))

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        if self._callback is not None:
            self._callback()


class ExtractionScheduler:
    """Coalesces triggers into extraction cycles, never two at once."""

    DEFAULT_DEBOUNCE_MS = 50

    __slots__ = (
        "_run_cycle",
        "_timer",
        "_debounce_ms",
        "_running",
        "_rerun",
        "_cycles",
        "__weakref__",
    )

    def __init__(
        self,
        run_cycle: Callable[[], object],
        timer: ITimer,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._run_cycle = run_cycle
        self._timer = timer
        self._debounce_ms = debounce_ms
        self._running = False
        self._rerun = False
        self._cycles = 0
        timer.set_callback(self._on_timeout)

    @property
    def cycles_run(self) -> int:
        return self._cycles

    @property
    def is_running(self) -> bool:
        return self._running

    def notify_mutations(self) -> None:
        """A batch of document mutations was observed."""
        self._trigger()

    def notify_poll(self) -> None:
        """The fallback poll interval elapsed."""
        self._trigger()

    def stop(self) -> None:
        self._timer.stop()
        self._rerun = False

    def _trigger(self) -> None:
        if self._running:
            self._rerun = True
            return
        self._timer.start(self._debounce_ms)

    def _on_timeout(self) -> None:
        if self._running:
            self._rerun = True
            return
        self._running = True
        try:
            self._run_cycle()
        except Exception:
            _LOGGER.exception("Extraction cycle failed")
        finally:
            self._running = False
            self._cycles += 1
        if self._rerun:
            self._rerun = False
            self._timer.start(self._debounce_ms)
