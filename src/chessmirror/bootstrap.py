"""Qt application bootstrap helpers for the three chessmirror processes."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from chessmirror.config import MirrorSettings
from chessmirror.errors import AnalyzerError

if TYPE_CHECKING:
    from PyQt6.QtCore import QCoreApplication

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "[chessmirror] %(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install the process-wide log format."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
        level = resolved
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def _argv(argv: list[str] | None) -> list[str]:
    return sys.argv[:1] if argv is None else argv


def _configure_application(app: QCoreApplication) -> None:
    app.setApplicationName("chessmirror")


# ── Hub ──────────────────────────────────────────────────────────────────────


def run_hub(settings: MirrorSettings, argv: list[str] | None = None) -> int:
    """Run the WebSocket hub until interrupted."""
    from PyQt6.QtCore import QCoreApplication

    from chessmirror.hub.server import HubServer

    app = QCoreApplication(_argv(argv))
    _configure_application(app)

    server = HubServer()
    if not server.listen(settings.host, settings.port):
        return 1
    server.renderer_count_changed.connect(
        lambda count: _LOGGER.info("Renderers connected: %d", count)
    )
    return app.exec()


# ── Overlay ──────────────────────────────────────────────────────────────────


def run_overlay(settings: MirrorSettings, argv: list[str] | None = None) -> int:
    """Run the overlay window fed by the hub."""
    from PyQt6.QtWidgets import QApplication

    from chessmirror.analysis.service import AnalysisSession, UciAnalyzer
    from chessmirror.hub.client import SnapshotSubscriber
    from chessmirror.render.board_scene import OverlayBoardScene
    from chessmirror.render.overlay import OverlaySession, OverlayWindow

    app = QApplication(_argv(argv))
    _configure_application(app)
    app.setStyle("Fusion")

    scene = OverlayBoardScene()
    scene.set_animate_moves(settings.animate_moves)
    scene.set_animation_ms(settings.animation_ms)
    scene.set_show_coordinates(settings.show_coordinates)

    window = OverlayWindow(scene, low_time_seconds=settings.low_time_seconds)

    analyzer: UciAnalyzer | None = None
    analysis: AnalysisSession | None = None
    if settings.engine_path:
        analyzer = UciAnalyzer(settings.engine_path)
        try:
            analyzer.start()
        except AnalyzerError as exc:
            _LOGGER.warning("Analysis disabled: %s", exc)
            analyzer = None
        else:
            analysis = AnalysisSession(
                analyzer=analyzer,
                on_evaluation=window.show_evaluation,
                movetime_ms=settings.engine_movetime_ms,
            )

    session = OverlaySession(
        scene=scene,
        players=window.players,
        moves=window.moves,
        request_evaluation=analysis.request if analysis is not None else None,
    )

    subscriber = SnapshotSubscriber(settings.renderer_url, settings.renderer_reconnect_ms)
    subscriber.snapshot_received.connect(session.on_snapshot)
    subscriber.reconnected.connect(session.reset)
    subscriber.open()

    window.resize(1100, 760)
    window.show()
    try:
        return app.exec()
    finally:
        subscriber.close()
        if analyzer is not None:
            analyzer.shutdown()


# ── Producer ─────────────────────────────────────────────────────────────────


def run_producer(
    settings: MirrorSettings,
    page_url: str,
    argv: list[str] | None = None,
) -> int:
    """Open *page_url* in a browser and stream its game state to the hub."""
    from PyQt6.QtCore import QCoreApplication
    from selenium import webdriver

    from chessmirror.dom.selenium_source import SeleniumPageSource
    from chessmirror.extraction.change_filter import ChangeFilter
    from chessmirror.extraction.extractor import SnapshotExtractor
    from chessmirror.extraction.pipeline import ExtractionPipeline, ProducerSession
    from chessmirror.hub.client import SnapshotPublisher

    app = QCoreApplication(_argv(argv))
    _configure_application(app)

    driver = webdriver.Chrome()
    driver.get(page_url)
    _LOGGER.info("Watching %s", page_url)

    publisher = SnapshotPublisher(settings.producer_url, settings.producer_reconnect_ms)
    publisher.open()

    source = SeleniumPageSource(driver)
    pipeline = ExtractionPipeline(
        source=source,
        extractor=SnapshotExtractor(move_list_limit=settings.move_list_limit),
        change_filter=ChangeFilter(),
        publish=publisher.send,
    )
    session = ProducerSession(
        source=source,
        pipeline=pipeline,
        debounce_ms=settings.debounce_ms,
        mutation_check_ms=settings.mutation_check_ms,
        poll_interval_ms=settings.poll_interval_ms,
    )
    session.start()
    try:
        return app.exec()
    finally:
        session.stop()
        publisher.close()
        driver.quit()
