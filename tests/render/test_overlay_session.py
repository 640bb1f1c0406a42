"""Tests for OverlaySession, the move list panel and the overlay window."""

from __future__ import annotations

from typing import Any

import pytest

from chessmirror.analysis.models import Evaluation
from chessmirror.core.enums import Color
from chessmirror.core.notation import STARTING_BOARD, board_to_squares
from chessmirror.core.snapshot import ByColor, GameSnapshot, LastMove, MoveListEntry, MoveText
from chessmirror.render.board_scene import OverlayBoardScene
from chessmirror.render.move_list_panel import MoveListPanel, format_entry
from chessmirror.render.overlay import OverlaySession, OverlayWindow
from chessmirror.render.players_panel import PlayersPanel

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"


@pytest.fixture
def scene(qapp: Any) -> OverlayBoardScene:
    scene = OverlayBoardScene()
    scene.set_animate_moves(False)
    return scene


def test_format_entry() -> None:
    entry = MoveListEntry(12, MoveText("Nf3"), MoveText("e5", selected=True))
    assert format_entry(entry) == "12. Nf3 [e5]"
    assert format_entry(MoveListEntry(3, None, MoveText("Qh4"))) == "3. … Qh4"
    assert format_entry(MoveListEntry(4, MoveText("d4"))) == "4. d4"


def test_session_renders_and_updates_panels(scene: OverlayBoardScene) -> None:
    players, moves = PlayersPanel(), MoveListPanel()
    requested: list[GameSnapshot] = []
    session = OverlaySession(
        scene=scene, players=players, moves=moves, request_evaluation=requested.append
    )

    start = GameSnapshot(board=STARTING_BOARD)
    after = GameSnapshot(
        board=AFTER_E4,
        last_move=LastMove("e2", "e4"),
        turn=Color.BLACK,
        clocks=ByColor(300.0, 290.0),
        move_list=(MoveListEntry(1, MoveText("e4", selected=True)),),
    )
    session.on_snapshot(start)
    session.on_snapshot(after)

    assert scene.pieces() == board_to_squares(AFTER_E4)
    assert session.rendered_count == 2
    assert session.view is not None and session.view.snapshot == after
    assert requested == [start, after]
    assert moves.row_count() == 1
    assert moves.row_text(0) == "1. [e4]"
    assert players.top.clock.is_active


def test_session_ignores_foreign_payloads(scene: OverlayBoardScene) -> None:
    session = OverlaySession(scene=scene)
    session.on_snapshot({"board": STARTING_BOARD})
    assert session.rendered_count == 0
    assert scene.pieces() == {}


def test_reset_forces_full_redraw(scene: OverlayBoardScene) -> None:
    session = OverlaySession(scene=scene)
    session.on_snapshot(GameSnapshot(board=STARTING_BOARD))

    session.reset()
    assert session.view is None

    session.on_snapshot(GameSnapshot(board=AFTER_E4))
    assert scene.pieces() == board_to_squares(AFTER_E4)


def test_window_shows_evaluation_from_white_view(scene: OverlayBoardScene) -> None:
    window = OverlayWindow(scene)
    snapshot = GameSnapshot(board=AFTER_E4, turn=Color.BLACK)
    window.show_evaluation(Evaluation(score_cp=-35, depth=12), snapshot)
    assert window.evaluation_text == "+0.35  (d12)"
