"""Tests for OverlayBoardScene applying visual operations."""

from __future__ import annotations

from typing import Any

import pytest

from chessmirror.core.enums import ArrowColor, Color, GameResult, HighlightKind
from chessmirror.core.notation import STARTING_BOARD, board_to_squares
from chessmirror.core.snapshot import Arrow, GameSnapshot, LastMove
from chessmirror.render.board_scene import OverlayBoardScene
from chessmirror.render.ops import (
    ClearCaptureFlag,
    HideResult,
    MovePiece,
    PlacePiece,
    SetAnnotationArrows,
    SetCaptureFlag,
    SetHighlight,
    SetOrientation,
    ShowResult,
)
from chessmirror.render.reconcile import RenderedView, reconcile

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"


@pytest.fixture
def scene(qapp: Any) -> OverlayBoardScene:
    scene = OverlayBoardScene()
    scene.apply(reconcile(None, GameSnapshot(board=STARTING_BOARD)))
    return scene


def test_full_render_places_all_pieces(scene: OverlayBoardScene) -> None:
    assert len(scene.pieces()) == 32
    assert scene.piece_at("e1") == "K"
    assert scene.piece_at("e4") is None
    assert not scene.is_animating()


def test_move_slides_piece(scene: OverlayBoardScene) -> None:
    scene.apply([MovePiece("e2", "e2", "e4")])

    assert scene.piece_at("e4") == "P"
    assert scene.piece_at("e2") is None
    assert scene.is_animating()

    # The next batch snaps the running slide to its end position.
    scene.apply([])
    assert not scene.is_animating()
    assert scene._piece_items["e4"].pos() == scene._square_origin("e4")


def test_move_without_animation(scene: OverlayBoardScene) -> None:
    scene.set_animate_moves(False)
    scene.apply([MovePiece("g1", "g1", "f3")])
    assert not scene.is_animating()
    assert scene._piece_items["f3"].pos() == scene._square_origin("f3")


def test_simultaneous_moves_do_not_clobber(scene: OverlayBoardScene) -> None:
    scene.set_animate_moves(False)
    scene.apply([MovePiece("e1", "e1", "d1"), MovePiece("d1", "d1", "e1")])
    assert scene.piece_at("d1") == "K"
    assert scene.piece_at("e1") == "Q"
    assert len(scene.pieces()) == 32


def test_promotion_swaps_code(scene: OverlayBoardScene) -> None:
    scene.set_animate_moves(False)
    scene.apply([MovePiece("a2", "a2", "a3", promoted_to="Q")])
    assert scene.piece_at("a3") == "Q"


def test_place_replaces_existing_item(scene: OverlayBoardScene) -> None:
    scene.apply([PlacePiece("e1", "e1", "q")])
    assert scene.piece_at("e1") == "q"
    assert len(scene.pieces()) == 32


def test_highlights_flag_arrows_and_result(scene: OverlayBoardScene) -> None:
    arrows = (Arrow("g1", "f3", ArrowColor.GREEN), Arrow("e2", "e4"))
    scene.apply(
        [
            SetHighlight("e4", HighlightKind.LAST_MOVE),
            SetHighlight("d5", HighlightKind.MARK, "rgb(235, 97, 80)"),
            SetHighlight("e5", HighlightKind.HINT),
            SetCaptureFlag("e4"),
            SetAnnotationArrows(arrows),
            ShowResult(GameResult.WIN),
        ]
    )

    assert scene.highlights() == {
        ("e4", HighlightKind.LAST_MOVE),
        ("d5", HighlightKind.MARK),
        ("e5", HighlightKind.HINT),
    }
    assert scene.capture_flag == "e4"
    assert scene.arrows == arrows
    assert len(scene._arrow_items) == 3  # knight L (2) + straight (1)
    assert scene.result is GameResult.WIN

    scene.apply([ClearCaptureFlag("e4"), SetAnnotationArrows(()), HideResult()])
    assert scene.capture_flag is None
    assert scene._arrow_items == []
    assert scene.result is None


def test_orientation_change_relayouts_pieces(scene: OverlayBoardScene) -> None:
    scene.apply([SetOrientation(Color.BLACK)])
    assert scene.orientation is Color.BLACK
    assert scene._piece_items["e1"].pos() == scene._square_origin("e1")
    assert scene._square_origin("e1").y() == 0


def test_set_show_coordinates_toggles_labels(scene: OverlayBoardScene) -> None:
    assert scene._coord_items
    scene.set_show_coordinates(False)
    assert all(not item.isVisible() for item in scene._coord_items)
    scene.set_show_coordinates(True)
    assert all(item.isVisible() for item in scene._coord_items)


def test_reconciled_sequence_matches_snapshot(scene: OverlayBoardScene) -> None:
    start = GameSnapshot(board=STARTING_BOARD)
    after = GameSnapshot(board=AFTER_E4, last_move=LastMove("e2", "e4"))
    scene.apply(reconcile(RenderedView(start), after))
    assert scene.pieces() == board_to_squares(AFTER_E4)
    assert ("e2", HighlightKind.LAST_MOVE) in scene.highlights()
