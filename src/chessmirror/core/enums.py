"""Core enumerations for mirrored game state."""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    """Side color, serialized as ``white`` / ``black``."""

    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def fen_char(self) -> str:
        return "w" if self is Color.WHITE else "b"


class GameResult(StrEnum):
    """Outcome shown by the source UI, relative to the local viewer."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class ArrowColor(StrEnum):
    """Fixed palette used to classify annotation arrows."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    ORANGE = "orange"


class HighlightKind(StrEnum):
    """Square highlight layers a renderer keeps apart."""

    LAST_MOVE = "last-move"
    SELECTED = "selected"
    MARK = "mark"
    HINT = "hint"
