"""Tests for ExtractionScheduler debounce and single-flight behaviour."""

from __future__ import annotations

from typing import Any

import pytest

from chessmirror.extraction.scheduler import ExtractionScheduler


def test_triggers_are_debounced(fake_timer: Any) -> None:
    runs: list[int] = []
    scheduler = ExtractionScheduler(lambda: runs.append(1), fake_timer, debounce_ms=50)

    scheduler.notify_mutations()
    scheduler.notify_mutations()
    scheduler.notify_poll()
    assert runs == []
    assert fake_timer.started == [50, 50, 50]

    fake_timer.fire()
    assert runs == [1]
    assert scheduler.cycles_run == 1
    assert not fake_timer.is_active()


def test_trigger_during_cycle_schedules_one_follow_up(fake_timer: Any) -> None:
    runs: list[int] = []

    def run_cycle() -> None:
        runs.append(len(runs))
        if len(runs) == 1:
            assert scheduler.is_running
            scheduler.notify_mutations()
            scheduler.notify_poll()
            # Never re-armed while the cycle is still running.
            assert not fake_timer.is_active()

    scheduler = ExtractionScheduler(run_cycle, fake_timer, debounce_ms=10)
    scheduler.notify_poll()
    fake_timer.fire()

    assert runs == [0]
    assert fake_timer.is_active()

    fake_timer.fire()
    assert runs == [0, 1]
    assert not fake_timer.is_active()


def test_failing_cycle_is_logged_and_scheduler_recovers(
    fake_timer: Any, caplog: pytest.LogCaptureFixture
) -> None:
    calls: list[int] = []

    def run_cycle() -> None:
        calls.append(1)
        raise RuntimeError("boom")

    scheduler = ExtractionScheduler(run_cycle, fake_timer)
    scheduler.notify_poll()
    with caplog.at_level("ERROR"):
        fake_timer.fire()

    assert "Extraction cycle failed" in caplog.text
    assert not scheduler.is_running

    scheduler.notify_poll()
    fake_timer.fire()
    assert len(calls) == 2


def test_stop_cancels_pending_cycle(fake_timer: Any) -> None:
    scheduler = ExtractionScheduler(lambda: None, fake_timer)
    scheduler.notify_mutations()
    scheduler.stop()
    assert not fake_timer.is_active()
    assert scheduler.cycles_run == 0
