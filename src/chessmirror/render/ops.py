"""Visual operations emitted by the reconciliation engine.

Operations are plain values; a rendering surface applies a list of them in
order. Pieces are addressed by ``piece_id``, the square the piece occupies
in the currently rendered view. All :class:`MovePiece` operations of one
batch are simultaneous: their sources are read before any target is
written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from chessmirror.core.enums import Color, GameResult, HighlightKind
from chessmirror.core.snapshot import Arrow
from chessmirror.core.types import Square


@dataclass(frozen=True, slots=True)
class SetOrientation:
    orientation: Color


@dataclass(frozen=True, slots=True)
class MovePiece:
    """Slide an existing piece; ``promoted_to`` swaps its glyph on arrival."""

    piece_id: str
    from_square: Square
    to_square: Square
    promoted_to: str | None = None


@dataclass(frozen=True, slots=True)
class PlacePiece:
    piece_id: str
    square: Square
    code: str


@dataclass(frozen=True, slots=True)
class RemovePiece:
    piece_id: str


@dataclass(frozen=True, slots=True)
class SetHighlight:
    square: Square
    kind: HighlightKind
    color: str | None = None


@dataclass(frozen=True, slots=True)
class ClearHighlight:
    square: Square
    kind: HighlightKind


@dataclass(frozen=True, slots=True)
class SetCaptureFlag:
    """Marker shown on the square where a knight just captured."""

    square: Square


@dataclass(frozen=True, slots=True)
class ClearCaptureFlag:
    square: Square


@dataclass(frozen=True, slots=True)
class SetAnnotationArrows:
    arrows: tuple[Arrow, ...]


@dataclass(frozen=True, slots=True)
class ShowResult:
    result: GameResult


@dataclass(frozen=True, slots=True)
class HideResult:
    pass


VisualOp: TypeAlias = (
    SetOrientation
    | MovePiece
    | PlacePiece
    | RemovePiece
    | SetHighlight
    | ClearHighlight
    | SetCaptureFlag
    | ClearCaptureFlag
    | SetAnnotationArrows
    | ShowResult
    | HideResult
)
