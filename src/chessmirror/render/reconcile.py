"""Reconciliation engine: (rendered view, new snapshot) → visual operations.

Pure functions only; no Qt and no I/O. The renderer keeps a
:class:`RenderedView`, asks :func:`reconcile` what to change for the next
snapshot, applies the operations and advances the view.

Operations always come out in this order: orientation, removals, moves,
placements, highlight clears, highlight sets, capture-flag clear,
capture-flag set, arrows, result.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from chessmirror.core.enums import HighlightKind
from chessmirror.core.notation import board_to_squares, piece_color, piece_kind
from chessmirror.core.snapshot import GameSnapshot
from chessmirror.core.types import ALL_SQUARES, Square, parse_square
from chessmirror.render.ops import (
    ClearCaptureFlag,
    ClearHighlight,
    HideResult,
    MovePiece,
    PlacePiece,
    RemovePiece,
    SetAnnotationArrows,
    SetCaptureFlag,
    SetHighlight,
    SetOrientation,
    ShowResult,
    VisualOp,
)

_SQUARE_ORDER = {square: index for index, square in enumerate(ALL_SQUARES)}
_PROMOTION_KINDS = frozenset("qrbn")

_HighlightKey = tuple[Square, HighlightKind, str]


@dataclass(frozen=True, slots=True)
class RenderedView:
    """What the surface currently shows."""

    snapshot: GameSnapshot
    capture_flag: Square | None = None

    def advance(self, snapshot: GameSnapshot, ops: Iterable[VisualOp]) -> RenderedView:
        return next_view(self, snapshot, ops)


def next_view(
    previous: RenderedView | None, snapshot: GameSnapshot, ops: Iterable[VisualOp]
) -> RenderedView:
    """View after *ops* (produced for *snapshot*) have been applied."""
    flag = previous.capture_flag if previous is not None else None
    for op in ops:
        if isinstance(op, ClearCaptureFlag):
            flag = None
        elif isinstance(op, SetCaptureFlag):
            flag = op.square
    return RenderedView(snapshot, flag)


def needs_full_replace(previous: RenderedView | None, snapshot: GameSnapshot) -> bool:
    return (
        previous is None
        or previous.snapshot.orientation != snapshot.orientation
        or snapshot.is_new_game
    )


def reconcile(previous: RenderedView | None, snapshot: GameSnapshot) -> list[VisualOp]:
    """Operations that turn *previous* into a rendering of *snapshot*."""
    if previous is None or needs_full_replace(previous, snapshot):
        return _full_replace(previous, snapshot)
    return _incremental(previous, snapshot)


# ── Full replace ─────────────────────────────────────────────────────────────


def _full_replace(previous: RenderedView | None, snapshot: GameSnapshot) -> list[VisualOp]:
    ops: list[VisualOp] = [SetOrientation(snapshot.orientation)]
    old_pieces = board_to_squares(previous.snapshot.board) if previous is not None else {}
    old_highlights = _highlights(previous.snapshot) if previous is not None else set()

    ops.extend(RemovePiece(square) for square in _ordered(old_pieces))
    new_pieces = board_to_squares(snapshot.board)
    ops.extend(
        PlacePiece(square, square, new_pieces[square]) for square in _ordered(new_pieces)
    )
    ops.extend(
        ClearHighlight(square, kind)
        for square, kind in sorted({(s, k) for s, k, _ in old_highlights}, key=_key_order)
    )
    ops.extend(_set_ops(_highlights(snapshot)))
    if previous is not None and previous.capture_flag is not None:
        ops.append(ClearCaptureFlag(previous.capture_flag))
    ops.append(SetAnnotationArrows(snapshot.arrows))
    ops.append(ShowResult(snapshot.game_result) if snapshot.game_result else HideResult())
    return ops


# ── Incremental ──────────────────────────────────────────────────────────────


def _incremental(previous: RenderedView, snapshot: GameSnapshot) -> list[VisualOp]:
    before = board_to_squares(previous.snapshot.board)
    after = board_to_squares(snapshot.board)
    vacated = {sq: code for sq, code in before.items() if after.get(sq) != code}
    filled = {sq: code for sq, code in after.items() if before.get(sq) != code}

    removals: list[VisualOp] = []
    moves: list[VisualOp] = []
    placements: list[VisualOp] = []
    flag_ops: list[VisualOp] = []

    last_move = snapshot.last_move
    new_move = last_move is not None and last_move != previous.snapshot.last_move
    # Any move clears the flag, even one whose highlight was not observed.
    if previous.capture_flag is not None and (new_move or vacated or filled):
        flag_ops.append(ClearCaptureFlag(previous.capture_flag))

    if new_move and last_move is not None:
        origin, target = last_move.from_sq, last_move.to_sq
        mover = vacated.get(origin)
        arrived = filled.get(target)
        if mover is not None and arrived is not None and _same_piece(mover, arrived):
            captured = before.get(target)
            if captured is not None:
                removals.append(RemovePiece(target))
                vacated.pop(target, None)
            moves.append(
                MovePiece(origin, origin, target, arrived if arrived != mover else None)
            )
            del vacated[origin]
            del filled[target]
            if captured is not None and piece_kind(arrived) == "n":
                flag_ops.append(SetCaptureFlag(target))

    # Secondary movers (castling rook): pair by identical code, nearest first.
    for origin in _ordered(vacated):
        code = vacated[origin]
        candidates = [sq for sq in _ordered(filled) if filled[sq] == code]
        if not candidates:
            continue
        target = min(candidates, key=lambda sq: (_distance(origin, sq), _SQUARE_ORDER[sq]))
        moves.append(MovePiece(origin, origin, target))
        del vacated[origin]
        del filled[target]

    removals.extend(RemovePiece(square) for square in _ordered(vacated))
    placements.extend(PlacePiece(square, square, filled[square]) for square in _ordered(filled))

    old_highlights = _highlights(previous.snapshot)
    new_highlights = _highlights(snapshot)
    stale = {(s, k) for s, k, _ in old_highlights - new_highlights}
    clears = [ClearHighlight(s, k) for s, k in sorted(stale, key=_key_order)]
    sets = _set_ops(new_highlights - old_highlights)

    ops: list[VisualOp] = [*removals, *moves, *placements, *clears, *sets, *flag_ops]
    if snapshot.arrows != previous.snapshot.arrows:
        ops.append(SetAnnotationArrows(snapshot.arrows))
    if snapshot.game_result != previous.snapshot.game_result:
        ops.append(ShowResult(snapshot.game_result) if snapshot.game_result else HideResult())
    return ops


def _same_piece(mover: str, arrived: str) -> bool:
    if mover == arrived:
        return True
    # Promotion: a pawn turns into a piece of its own color.
    return (
        piece_kind(mover) == "p"
        and piece_kind(arrived) in _PROMOTION_KINDS
        and piece_color(mover) == piece_color(arrived)
    )


# ── Highlights ───────────────────────────────────────────────────────────────


def _highlights(snapshot: GameSnapshot) -> set[_HighlightKey]:
    keys: set[_HighlightKey] = set()
    if snapshot.last_move is not None:
        keys.add((snapshot.last_move.from_sq, HighlightKind.LAST_MOVE, ""))
        keys.add((snapshot.last_move.to_sq, HighlightKind.LAST_MOVE, ""))
    if snapshot.selected_square is not None:
        keys.add((snapshot.selected_square, HighlightKind.SELECTED, ""))
    for mark in snapshot.marked_squares:
        keys.add((mark.square, HighlightKind.MARK, mark.color))
    for hint in snapshot.hints:
        keys.add((hint, HighlightKind.HINT, ""))
    return keys


def _set_ops(keys: set[_HighlightKey]) -> list[VisualOp]:
    return [
        SetHighlight(square, kind, color or None)
        for square, kind, color in sorted(keys, key=lambda k: (*_key_order(k[:2]), k[2]))
    ]


def _key_order(key: tuple[Square, HighlightKind]) -> tuple[int, str]:
    return _SQUARE_ORDER[key[0]], str(key[1])


def _ordered(squares: Iterable[Square]) -> Sequence[Square]:
    return sorted(squares, key=_SQUARE_ORDER.__getitem__)


def _distance(a: Square, b: Square) -> int:
    fa, ra = parse_square(a)
    fb, rb = parse_square(b)
    return abs(fa - fb) + abs(ra - rb)
