"""Overlay session and window: transport → reconcile → surfaces."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QPainter, QResizeEvent
from PyQt6.QtWidgets import (
    QGraphicsView,
    QHBoxLayout,
    QLabel,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from chessmirror.analysis.models import Evaluation
from chessmirror.core.snapshot import GameSnapshot
from chessmirror.render.board_scene import OverlayBoardScene
from chessmirror.render.move_list_panel import MoveListPanel
from chessmirror.render.players_panel import PlayersPanel
from chessmirror.render.reconcile import RenderedView, next_view, reconcile

_LOGGER = logging.getLogger(__name__)


class OverlaySession:
    """Renders every received snapshot onto the overlay surfaces.

    Holds the :class:`RenderedView` so that each snapshot is reconciled
    against what is actually on screen. A transport reconnect resets the
    view; the replayed snapshot then redraws everything.
    """

    __slots__ = (
        "_scene",
        "_players",
        "_moves",
        "_request_evaluation",
        "_view",
        "_rendered_count",
    )

    def __init__(
        self,
        *,
        scene: OverlayBoardScene,
        players: PlayersPanel | None = None,
        moves: MoveListPanel | None = None,
        request_evaluation: Callable[[GameSnapshot], object] | None = None,
    ) -> None:
        self._scene = scene
        self._players = players
        self._moves = moves
        self._request_evaluation = request_evaluation
        self._view: RenderedView | None = None
        self._rendered_count = 0

    @property
    def view(self) -> RenderedView | None:
        return self._view

    @property
    def rendered_count(self) -> int:
        return self._rendered_count

    def on_snapshot(self, snapshot: object) -> None:
        if not isinstance(snapshot, GameSnapshot):
            _LOGGER.warning("Ignoring non-snapshot payload %r", type(snapshot))
            return
        ops = reconcile(self._view, snapshot)
        self._scene.apply(ops)
        self._view = next_view(self._view, snapshot, ops)
        self._rendered_count += 1
        if self._players is not None:
            self._players.update_snapshot(snapshot)
        if self._moves is not None:
            self._moves.set_entries(snapshot.move_list)
        if self._request_evaluation is not None:
            self._request_evaluation(snapshot)

    def reset(self) -> None:
        """Forget the rendered view so the next snapshot fully redraws."""
        _LOGGER.info("Renderer view reset")
        self._view = None


class OverlayBoardView(QGraphicsView):
    """Displays the overlay scene, scaled to fit the widget."""

    def __init__(self, scene: OverlayBoardScene, parent: QWidget | None = None) -> None:
        super().__init__(scene, parent)
        self._scene = scene
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(320, 320)

    @property
    def board_scene(self) -> OverlayBoardScene:
        return self._scene

    def resizeEvent(self, event: QResizeEvent | None) -> None:
        super().resizeEvent(event)
        self.fitInView(self._scene.sceneRect(), Qt.AspectRatioMode.KeepAspectRatio)


class OverlayWindow(QWidget):
    """Board on the left; evaluation, players and move list on the right."""

    def __init__(
        self,
        scene: OverlayBoardScene,
        parent: QWidget | None = None,
        low_time_seconds: float = 30.0,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("chessmirror")
        self.board_view = OverlayBoardView(scene)
        self.players = PlayersPanel(low_time_seconds=low_time_seconds)
        self.moves = MoveListPanel()
        self._eval_label = QLabel("")
        self._eval_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._eval_label.setFont(QFont("Adwaita Sans", 14, QFont.Weight.Bold))

        side_column = QVBoxLayout()
        side_column.addWidget(self._eval_label)
        side_column.addWidget(self.players)
        side_column.addWidget(self.moves, 1)

        layout = QHBoxLayout(self)
        layout.addWidget(self.board_view, 3)
        layout.addLayout(side_column, 1)

    @property
    def evaluation_text(self) -> str:
        return self._eval_label.text()

    def show_evaluation(self, evaluation: Evaluation, snapshot: GameSnapshot) -> None:
        white_view = evaluation.for_white(snapshot.turn)
        self._eval_label.setText(f"{white_view.label()}  (d{evaluation.depth})")
