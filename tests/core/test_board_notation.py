"""Tests for extended grid notation and square helpers."""

from __future__ import annotations

import random

import pytest

from chessmirror.core.enums import Color
from chessmirror.core.notation import (
    EMPTY_BOARD,
    STARTING_BOARD,
    board_to_squares,
    decode_board,
    encode_board,
    position_string,
    sanitize_board,
    squares_to_board,
    validate_board,
)
from chessmirror.core.snapshot import GameSnapshot
from chessmirror.core.types import (
    is_knight_hop,
    make_square,
    parse_square,
    square_from_classes,
    square_from_token,
)


class TestSquares:
    def test_make_and_parse_are_inverse(self) -> None:
        assert make_square(4, 3) == "e4"
        assert parse_square("e4") == (4, 3)

    @pytest.mark.parametrize("name", ["i1", "a9", "a", "e44", ""])
    def test_parse_rejects_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            parse_square(name)

    def test_square_token(self) -> None:
        assert square_from_token("square-11") == "a1"
        assert square_from_token("square-58") == "e8"
        assert square_from_token("square-09") is None
        assert square_from_token("piece") is None

    def test_square_from_classes_picks_first_token(self) -> None:
        assert square_from_classes(("piece", "wp", "square-52")) == "e2"
        assert square_from_classes(("piece", "wp")) is None

    def test_knight_hop(self) -> None:
        assert is_knight_hop("g1", "f3")
        assert is_knight_hop("b8", "d7")
        assert not is_knight_hop("e2", "e4")


class TestBoardCodec:
    def test_starting_board_squares(self) -> None:
        squares = board_to_squares(STARTING_BOARD)
        assert len(squares) == 32
        assert squares["e1"] == "K"
        assert squares["d8"] == "q"
        assert squares["a2"] == "P"
        assert "e4" not in squares

    def test_empty_board_has_no_pieces(self) -> None:
        assert board_to_squares(EMPTY_BOARD) == {}

    def test_grid_round_trip(self) -> None:
        grid = decode_board(STARTING_BOARD)
        grid[6][4] = None  # e2
        grid[4][4] = "P"  # e4
        text = encode_board(grid)
        assert text == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"
        assert decode_board(text) == grid

    @pytest.mark.parametrize(
        "row",
        [
            [None] * 8,
            list("RNBQKBNR"),
            ["p", None] * 4,
            [None, "p"] * 4,
            [None, None, None, "k", None, None, None, None],
            ["K"] + [None] * 7,
            [None] * 7 + ["k"],
            [None, "Q", "q", None, None, "b", "B", None],
        ],
        ids=[
            "empty",
            "full",
            "alternating",
            "alternating-offset",
            "middle",
            "leading-piece",
            "trailing-piece",
            "runs-both-ends",
        ],
    )
    def test_edge_rows_round_trip(self, row: list[str | None]) -> None:
        grid = [list(row) for _ in range(8)]
        text = encode_board(grid)
        assert all(len(rank) <= 8 for rank in text.split("/"))
        assert decode_board(text) == grid

    def test_generated_grids_round_trip(self) -> None:
        rng = random.Random(20240607)
        letters = sorted("KQRBNPkqrbnp")
        for _ in range(500):
            density = rng.random()
            grid = [
                [rng.choice(letters) if rng.random() < density else None for _ in range(8)]
                for _ in range(8)
            ]
            text = encode_board(grid)
            assert validate_board(text)
            assert decode_board(text) == grid

    def test_squares_to_board_inverse(self) -> None:
        board = "r3k2r/8/8/8/8/8/8/R3K2R"
        assert squares_to_board(board_to_squares(board)) == board

    def test_encode_rejects_wrong_shape(self) -> None:
        with pytest.raises(ValueError):
            encode_board([[None] * 8] * 7)

    @pytest.mark.parametrize(
        "board",
        [
            "8/8/8/8/8/8/8",
            "9/8/8/8/8/8/8/8",
            "7/8/8/8/8/8/8/8",
            "pppppppppp/8/8/8/8/8/8/8",
            "x7/8/8/8/8/8/8/8",
        ],
    )
    def test_validate_rejects_malformed(self, board: str) -> None:
        assert not validate_board(board)

    def test_sanitize_replaces_bad_rank(self) -> None:
        assert sanitize_board("rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR") == (
            "rnbqkbnr/8/8/8/8/8/PPPPPPPP/RNBQKBNR"
        )

    def test_sanitize_wrong_rank_count_gives_start(self) -> None:
        assert sanitize_board("8/8/8") == STARTING_BOARD

    def test_sanitize_keeps_valid_board(self) -> None:
        assert sanitize_board(STARTING_BOARD) == STARTING_BOARD


def test_position_string_uses_turn() -> None:
    snapshot = GameSnapshot(board=STARTING_BOARD, turn=Color.BLACK)
    assert position_string(snapshot) == f"{STARTING_BOARD} b - - 0 1"
