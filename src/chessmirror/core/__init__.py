"""Core value layer: snapshot model, board notation, square helpers.

Quick start::

    from chessmirror.core import GameSnapshot, STARTING_BOARD, board_to_squares

    snapshot = GameSnapshot(board=STARTING_BOARD)
    assert board_to_squares(snapshot.board)["e1"] == "K"
"""

from chessmirror.core.enums import ArrowColor, Color, GameResult, HighlightKind
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
from chessmirror.core.snapshot import (
    Arrow,
    ByColor,
    CapturedPieces,
    GameSnapshot,
    LastMove,
    MarkedSquare,
    MoveListEntry,
    MoveText,
    PlayerInfo,
)
from chessmirror.core.types import Square, make_square, parse_square

__all__ = [
    # Enums
    "ArrowColor",
    "Color",
    "GameResult",
    "HighlightKind",
    # Types / helpers
    "Square",
    "make_square",
    "parse_square",
    # Snapshot model
    "Arrow",
    "ByColor",
    "CapturedPieces",
    "GameSnapshot",
    "LastMove",
    "MarkedSquare",
    "MoveListEntry",
    "MoveText",
    "PlayerInfo",
    # Notation
    "EMPTY_BOARD",
    "STARTING_BOARD",
    "board_to_squares",
    "decode_board",
    "encode_board",
    "position_string",
    "sanitize_board",
    "squares_to_board",
    "validate_board",
]
