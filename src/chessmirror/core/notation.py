"""Extended grid notation: the rank/run-length board encoding.

A board string is eight rank strings joined by ``/``, ranks ordered 8 → 1.
Each rank mixes piece letters (uppercase = white, lowercase = black) with
digit run-lengths for consecutive empty squares; every rank expands to
exactly eight files.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, TypeAlias

from chessmirror.core.enums import Color
from chessmirror.core.types import Square, make_square, parse_square

if TYPE_CHECKING:
    from chessmirror.core.snapshot import GameSnapshot

_LOGGER = logging.getLogger(__name__)

STARTING_BOARD = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_BOARD = "8/8/8/8/8/8/8/8"

PIECE_LETTERS = frozenset("KQRBNPkqrbnp")

# Row 0 = rank 8, column 0 = file a.
Grid: TypeAlias = list[list[str | None]]


def empty_grid() -> Grid:
    return [[None] * 8 for _ in range(8)]


def piece_color(letter: str) -> Color:
    """Color of a piece letter (uppercase = white)."""
    return Color.WHITE if letter.isupper() else Color.BLACK


def piece_kind(letter: str) -> str:
    """Color-free lowercase piece type letter (``p``, ``n``, ...)."""
    return letter.lower()


def encode_rank(row: Sequence[str | None]) -> str:
    """Encode one row of optional piece letters with run-length empties."""
    text = ""
    empty = 0
    for piece in row:
        if piece is None:
            empty += 1
            continue
        if empty:
            text += str(empty)
            empty = 0
        text += piece
    if empty:
        text += str(empty)
    return text


def encode_board(grid: Sequence[Sequence[str | None]]) -> str:
    """Serialize an 8×8 grid (row 0 = rank 8) to extended grid notation."""
    if len(grid) != 8 or any(len(row) != 8 for row in grid):
        raise ValueError("Board grid must be 8×8")
    return "/".join(encode_rank(row) for row in grid)


def decode_rank(text: str) -> list[str | None]:
    """Expand a rank string; raises ``ValueError`` unless it spans 8 files."""
    row: list[str | None] = []
    for ch in text:
        if ch.isdigit():
            step = int(ch)
            if not (1 <= step <= 8):
                raise ValueError(f"Invalid run-length digit {ch!r} in {text!r}")
            row.extend([None] * step)
        elif ch in PIECE_LETTERS:
            row.append(ch)
        else:
            raise ValueError(f"Invalid piece letter {ch!r} in {text!r}")
        if len(row) > 8:
            raise ValueError(f"Rank wider than 8 files: {text!r}")
    if len(row) != 8:
        raise ValueError(f"Rank narrower than 8 files: {text!r}")
    return row


def decode_board(text: str) -> Grid:
    """Parse extended grid notation into an 8×8 grid (row 0 = rank 8)."""
    ranks = text.split(" ")[0].split("/")
    if len(ranks) != 8:
        raise ValueError(f"Board must contain 8 ranks: {text!r}")
    return [decode_rank(rank) for rank in ranks]


def validate_board(text: str) -> bool:
    """Check the 8-rank / 8-file invariant."""
    try:
        decode_board(text)
    except ValueError:
        return False
    return True


def sanitize_board(text: str) -> str:
    """Return *text* with every malformed rank replaced by an empty rank.

    A wrong rank count cannot be repaired rank-by-rank; the starting
    position is substituted instead.
    """
    ranks = text.split("/")
    if len(ranks) != 8:
        _LOGGER.warning("Board has %d ranks, substituting start: %r", len(ranks), text)
        return STARTING_BOARD
    fixed: list[str] = []
    for rank in ranks:
        try:
            decode_rank(rank)
        except ValueError:
            _LOGGER.warning("Malformed rank %r replaced with empty rank", rank)
            fixed.append("8")
        else:
            fixed.append(rank)
    return "/".join(fixed)


def board_to_squares(text: str) -> dict[Square, str]:
    """Map every occupied square to its piece letter."""
    occupied: dict[Square, str] = {}
    for row_idx, row in enumerate(decode_board(text)):
        rank = 7 - row_idx
        for file, piece in enumerate(row):
            if piece is not None:
                occupied[make_square(file, rank)] = piece
    return occupied


def squares_to_board(pieces: Mapping[Square, str]) -> str:
    """Inverse of :func:`board_to_squares`."""
    grid = empty_grid()
    for square, piece in pieces.items():
        file, rank = parse_square(square)
        grid[7 - rank][file] = piece
    return encode_board(grid)


def position_string(snapshot: GameSnapshot) -> str:
    """Full position text handed to the analyzer.

    Castling and en-passant rights are not observable from the rendered
    board, so minimal metadata is appended.
    """
    return f"{snapshot.board} {snapshot.turn.fen_char} - - 0 1"
