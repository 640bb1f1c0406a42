"""Square naming helpers.

Squares are two-character algebraic names (``a1`` .. ``h8``). Internally a
square can also be addressed by zero-based ``(file, rank)`` where
``file`` 0 = a and ``rank`` 0 = rank 1.
"""

from __future__ import annotations

import re
from typing import TypeAlias

Square: TypeAlias = str  # "a1" .. "h8"

FILES = "abcdefgh"
RANKS = "12345678"

_SQUARE_TOKEN_RE = re.compile(r"^square-([1-8])([1-8])$")


def make_square(file: int, rank: int) -> Square:
    """Square name from zero-based *file* and *rank*."""
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"Square coordinates out of range: {(file, rank)!r}")
    return FILES[file] + RANKS[rank]


def parse_square(name: str) -> tuple[int, int]:
    """Parse square name, e.g. ``'e4'`` → ``(4, 3)``."""
    if not is_square(name):
        raise ValueError(f"Invalid square name: {name!r}")
    return FILES.index(name[0]), RANKS.index(name[1])


def is_square(name: object) -> bool:
    """Check whether *name* is a valid algebraic square."""
    return (
        isinstance(name, str)
        and len(name) == 2
        and name[0] in FILES
        and name[1] in RANKS
    )


def file_of(name: Square) -> int:
    """File index 0–7 (a–h)."""
    return parse_square(name)[0]


def rank_of(name: Square) -> int:
    """Rank index 0–7 (1–8)."""
    return parse_square(name)[1]


def square_from_token(token: str) -> Square | None:
    """Decode a ``square-XY`` class token (X = file 1–8, Y = rank 1–8)."""
    match = _SQUARE_TOKEN_RE.match(token)
    if match is None:
        return None
    return make_square(int(match.group(1)) - 1, int(match.group(2)) - 1)


def square_from_classes(classes: tuple[str, ...] | list[str]) -> Square | None:
    """Return the first square encoded in a class list, if any."""
    for token in classes:
        square = square_from_token(token)
        if square is not None:
            return square
    return None


def is_knight_hop(from_sq: Square, to_sq: Square) -> bool:
    """True when the two squares are one knight jump apart."""
    f1, r1 = parse_square(from_sq)
    f2, r2 = parse_square(to_sq)
    return {abs(f1 - f2), abs(r1 - r2)} == {1, 2}


ALL_SQUARES: tuple[Square, ...] = tuple(
    make_square(f, r) for r in range(8) for f in range(8)
)
