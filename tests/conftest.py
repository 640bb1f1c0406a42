"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from chessmirror.extraction.scheduler import ITimer

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


def _is_render_test(request: pytest.FixtureRequest) -> bool:
    return "render" in Path(str(request.node.fspath)).parts


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for Qt tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture(autouse=True)
def _cleanup_qt_widgets(
    request: pytest.FixtureRequest,
) -> Iterator[None]:
    """Ensure render tests do not leak top-level widgets into the next test."""
    if not _is_render_test(request):
        yield
        return

    app = request.getfixturevalue("qapp")
    yield

    for widget in list(app.topLevelWidgets()):
        widget.close()
    app.processEvents()


class FakeTimer(ITimer):
    """Manually fired single-shot timer implementing ``ITimer``."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.active = False
        self.started: list[int] = []

    def set_callback(self, callback: Callable[[], None]) -> None:
        self.callback = callback

    def start(self, interval_ms: int) -> None:
        self.active = True
        self.started.append(interval_ms)

    def stop(self) -> None:
        self.active = False

    def is_active(self) -> bool:
        return self.active

    def fire(self) -> None:
        assert self.active, "timer fired while idle"
        self.active = False
        assert self.callback is not None
        self.callback()


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()
