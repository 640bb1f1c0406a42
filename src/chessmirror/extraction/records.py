"""Mutable scratch record filled by the sub-extractors of one cycle."""

from __future__ import annotations

from dataclasses import dataclass, field

from chessmirror.core.enums import Color, GameResult
from chessmirror.core.notation import EMPTY_BOARD
from chessmirror.core.snapshot import (
    Arrow,
    ByColor,
    CapturedPieces,
    GameSnapshot,
    LastMove,
    MarkedSquare,
    MoveListEntry,
    PlayerInfo,
)
from chessmirror.core.types import Square


@dataclass(slots=True)
class ExtractionRecord:
    """Every field is optional; ``None`` means "not observed this cycle"."""

    board: str | None = None
    players: dict[Color, PlayerInfo] = field(default_factory=dict)
    clocks: dict[Color, float | None] = field(default_factory=dict)
    turn: Color | None = None
    orientation: Color | None = None
    last_move: LastMove | None = None
    arrows: list[Arrow] | None = None
    marked_squares: list[MarkedSquare] | None = None
    hints: list[Square] | None = None
    selected_square: Square | None = None
    game_result: GameResult | None = None
    captured_pieces: dict[Color, CapturedPieces] = field(default_factory=dict)
    move_list: list[MoveListEntry] | None = None

    def to_snapshot(self) -> GameSnapshot:
        """Freeze the record, filling unobserved fields with empty values."""
        return GameSnapshot(
            board=self.board or EMPTY_BOARD,
            players=ByColor(
                self.players.get(Color.WHITE, PlayerInfo()),
                self.players.get(Color.BLACK, PlayerInfo()),
            ),
            clocks=ByColor(
                self.clocks.get(Color.WHITE),
                self.clocks.get(Color.BLACK),
            ),
            turn=self.turn or Color.WHITE,
            orientation=self.orientation or Color.WHITE,
            last_move=self.last_move,
            arrows=tuple(self.arrows or ()),
            marked_squares=tuple(self.marked_squares or ()),
            hints=tuple(self.hints or ()),
            selected_square=self.selected_square,
            game_result=self.game_result,
            captured_pieces=ByColor(
                self.captured_pieces.get(Color.WHITE, CapturedPieces()),
                self.captured_pieces.get(Color.BLACK, CapturedPieces()),
            ),
            move_list=tuple(self.move_list or ()),
        )
