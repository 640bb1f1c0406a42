"""Producer-side extraction pipeline: document → snapshot → filter → publish."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from PyQt6.QtCore import QObject, QTimer

from chessmirror.core.snapshot import GameSnapshot
from chessmirror.dom.interfaces import IDomNode
from chessmirror.errors import PageSourceError
from chessmirror.extraction.change_filter import ChangeFilter
from chessmirror.extraction.extractor import SnapshotExtractor
from chessmirror.extraction.scheduler import ExtractionScheduler, QtSingleShotTimer

_LOGGER = logging.getLogger(__name__)


class DocumentSource(Protocol):
    """Anything that can hand out a consistent copy of the page."""

    def fetch_document(self) -> IDomNode: ...


class MutationSource(DocumentSource, Protocol):
    def install(self) -> None: ...

    def pending_mutations(self) -> bool: ...


class ExtractionPipeline:
    """Runs one extraction cycle end to end."""

    __slots__ = ("_source", "_extractor", "_filter", "_publish")

    def __init__(
        self,
        source: DocumentSource,
        extractor: SnapshotExtractor,
        change_filter: ChangeFilter,
        publish: Callable[[GameSnapshot], object],
    ) -> None:
        self._source = source
        self._extractor = extractor
        self._filter = change_filter
        self._publish = publish

    @property
    def change_filter(self) -> ChangeFilter:
        return self._filter

    def run_cycle(self) -> GameSnapshot | None:
        """Extract, filter and publish; returns the emitted snapshot if any."""
        try:
            document = self._source.fetch_document()
        except PageSourceError as exc:
            _LOGGER.warning("Document unavailable, skipping cycle: %s", exc)
            return None

        snapshot = self._filter.filter(self._extractor.extract(document))
        if snapshot is None:
            return None
        self._publish(snapshot)
        return snapshot


class ProducerSession:
    """Drives an :class:`ExtractionPipeline` from a live page on the Qt loop.

    The page source is polled for mutation batches every
    ``mutation_check_ms``; independently a fallback poll fires every
    ``poll_interval_ms`` to catch changes that produced no mutation
    records (e.g. a re-used node whose text is set by the page script).
    """

    __slots__ = (
        "_source",
        "_pipeline",
        "_scheduler",
        "_mutation_timer",
        "_poll_timer",
        "_mutation_check_ms",
        "_poll_interval_ms",
        "_is_started",
        "__weakref__",
    )

    def __init__(
        self,
        *,
        source: MutationSource,
        pipeline: ExtractionPipeline,
        parent: QObject | None = None,
        debounce_ms: int = ExtractionScheduler.DEFAULT_DEBOUNCE_MS,
        mutation_check_ms: int = 100,
        poll_interval_ms: int = 1000,
    ) -> None:
        self._source = source
        self._pipeline = pipeline
        self._scheduler = ExtractionScheduler(
            pipeline.run_cycle, QtSingleShotTimer(parent), debounce_ms
        )
        self._mutation_check_ms = mutation_check_ms
        self._poll_interval_ms = poll_interval_ms

        self._mutation_timer = QTimer(parent)
        self._mutation_timer.timeout.connect(self._check_mutations)
        self._poll_timer = QTimer(parent)
        self._poll_timer.timeout.connect(self._scheduler.notify_poll)
        self._is_started = False

    @property
    def scheduler(self) -> ExtractionScheduler:
        return self._scheduler

    def start(self) -> None:
        if self._is_started:
            return
        try:
            self._source.install()
        except PageSourceError as exc:
            _LOGGER.warning("Could not attach mutation observer yet: %s", exc)
        self._mutation_timer.start(self._mutation_check_ms)
        self._poll_timer.start(self._poll_interval_ms)
        self._is_started = True
        # Initial snapshot without waiting for the first change.
        self._scheduler.notify_poll()
        _LOGGER.info(
            "Producer started (mutation check %d ms, poll %d ms)",
            self._mutation_check_ms,
            self._poll_interval_ms,
        )

    def stop(self) -> None:
        if not self._is_started:
            return
        self._mutation_timer.stop()
        self._poll_timer.stop()
        self._scheduler.stop()
        self._is_started = False

    def _check_mutations(self) -> None:
        try:
            changed = self._source.pending_mutations()
        except PageSourceError as exc:
            _LOGGER.debug("Mutation check failed: %s", exc)
            return
        if changed:
            self._scheduler.notify_mutations()
