"""Immutable description of observable game state.

One snapshot is produced per extraction cycle and never mutated afterwards.
The JSON form uses the camelCase keys that every transport carries.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from chessmirror.core.enums import ArrowColor, Color, GameResult
from chessmirror.core.notation import EMPTY_BOARD, validate_board
from chessmirror.core.types import Square, is_square
from chessmirror.errors import SnapshotFormatError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ByColor(Generic[T]):
    """Immutable pair of values keyed by side color."""

    white: T
    black: T

    def get(self, color: Color) -> T:
        return self.white if color is Color.WHITE else self.black

    def with_value(self, color: Color, value: T) -> ByColor[T]:
        if color is Color.WHITE:
            return ByColor(value, self.black)
        return ByColor(self.white, value)


@dataclass(frozen=True, slots=True)
class PlayerInfo:
    name: str | None = None
    rating: int | None = None
    title: str | None = None
    avatar: str | None = None
    country_code: str | None = None


@dataclass(frozen=True, slots=True)
class LastMove:
    from_sq: Square
    to_sq: Square


@dataclass(frozen=True, slots=True)
class Arrow:
    from_sq: Square
    to_sq: Square
    color: ArrowColor = ArrowColor.ORANGE


@dataclass(frozen=True, slots=True)
class MarkedSquare:
    square: Square
    color: str


@dataclass(frozen=True, slots=True)
class CapturedPieces:
    """Pieces captured by one side, as codes like ``bp`` / ``wn``."""

    pieces: tuple[str, ...] = ()
    score: str | None = None


@dataclass(frozen=True, slots=True)
class MoveText:
    text: str
    selected: bool = False


@dataclass(frozen=True, slots=True)
class MoveListEntry:
    number: int
    white: MoveText | None = None
    black: MoveText | None = None


def _no_players() -> ByColor[PlayerInfo]:
    return ByColor(PlayerInfo(), PlayerInfo())


def _no_clocks() -> ByColor[float | None]:
    return ByColor(None, None)


def _no_captures() -> ByColor[CapturedPieces]:
    return ByColor(CapturedPieces(), CapturedPieces())


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Canonical game state observed at one point in time."""

    board: str = EMPTY_BOARD
    players: ByColor[PlayerInfo] = field(default_factory=_no_players)
    clocks: ByColor[float | None] = field(default_factory=_no_clocks)
    turn: Color = Color.WHITE
    orientation: Color = Color.WHITE
    last_move: LastMove | None = None
    arrows: tuple[Arrow, ...] = ()
    marked_squares: tuple[MarkedSquare, ...] = ()
    hints: tuple[Square, ...] = ()
    selected_square: Square | None = None
    game_result: GameResult | None = None
    captured_pieces: ByColor[CapturedPieces] = field(default_factory=_no_captures)
    move_list: tuple[MoveListEntry, ...] = ()
    is_new_game: bool = False

    def evolve(self, **changes: Any) -> GameSnapshot:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    # ── Serialization ────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "board": self.board,
            "players": {
                str(color): _player_to_dict(self.players.get(color))
                for color in Color
            },
            "clocks": {str(color): self.clocks.get(color) for color in Color},
            "turn": str(self.turn),
            "orientation": str(self.orientation),
            "lastMove": (
                {"from": self.last_move.from_sq, "to": self.last_move.to_sq}
                if self.last_move is not None
                else None
            ),
            "arrows": [
                {"from": a.from_sq, "to": a.to_sq, "color": str(a.color)}
                for a in self.arrows
            ],
            "markedSquares": [
                {"square": m.square, "color": m.color} for m in self.marked_squares
            ],
            "hints": list(self.hints),
            "selectedSquare": self.selected_square,
            "gameResult": str(self.game_result) if self.game_result else None,
            "capturedPieces": {
                str(color): {
                    "pieces": list(self.captured_pieces.get(color).pieces),
                    "score": self.captured_pieces.get(color).score,
                }
                for color in Color
            },
            "moveList": [_entry_to_dict(entry) for entry in self.move_list],
            "isNewGame": self.is_new_game,
        }

    def to_json(self) -> str:
        """Canonical serialization: equal snapshots give identical text."""
        return json.dumps(
            self.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GameSnapshot:
        """Decode the wire form; raises :class:`SnapshotFormatError`."""
        if not isinstance(data, Mapping):
            raise SnapshotFormatError("Snapshot payload must be an object")
        try:
            return _snapshot_from_dict(data)
        except SnapshotFormatError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise SnapshotFormatError(f"Malformed snapshot: {exc}") from exc

    @classmethod
    def from_json(cls, text: str | bytes) -> GameSnapshot:
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise SnapshotFormatError(f"Snapshot is not valid JSON: {exc}") from exc
        return cls.from_dict(data)


# ── Encoding helpers ─────────────────────────────────────────────────────────


def _player_to_dict(player: PlayerInfo) -> dict[str, Any]:
    return {
        "name": player.name,
        "rating": player.rating,
        "title": player.title,
        "avatar": player.avatar,
        "countryCode": player.country_code,
    }


def _move_text_to_dict(move: MoveText | None) -> dict[str, Any] | None:
    if move is None:
        return None
    return {"text": move.text, "selected": move.selected}


def _entry_to_dict(entry: MoveListEntry) -> dict[str, Any]:
    return {
        "number": entry.number,
        "white": _move_text_to_dict(entry.white),
        "black": _move_text_to_dict(entry.black),
    }


# ── Decoding helpers ─────────────────────────────────────────────────────────


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SnapshotFormatError(f"Expected string, got {value!r}")
    return value


def _opt_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SnapshotFormatError(f"Expected integer, got {value!r}")
    return int(value)


def _opt_seconds(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SnapshotFormatError(f"Expected seconds, got {value!r}")
    return float(value)


def _square(value: Any) -> Square:
    if not is_square(value):
        raise SnapshotFormatError(f"Invalid square: {value!r}")
    return value


def _opt_square(value: Any) -> Square | None:
    return None if value is None else _square(value)


def _by_color(
    data: Any, decode: Callable[[Any], T], default: Callable[[], T]
) -> ByColor[T]:
    if data is None:
        return ByColor(default(), default())
    if not isinstance(data, Mapping):
        raise SnapshotFormatError(f"Expected color mapping, got {data!r}")
    return ByColor(
        decode(data.get("white")) if data.get("white") is not None else default(),
        decode(data.get("black")) if data.get("black") is not None else default(),
    )


def _player_from_dict(data: Mapping[str, Any]) -> PlayerInfo:
    return PlayerInfo(
        name=_opt_str(data.get("name")),
        rating=_opt_int(data.get("rating")),
        title=_opt_str(data.get("title")),
        avatar=_opt_str(data.get("avatar")),
        country_code=_opt_str(data.get("countryCode")),
    )


def _captured_from_dict(data: Mapping[str, Any]) -> CapturedPieces:
    pieces = data.get("pieces") or []
    return CapturedPieces(
        pieces=tuple(str(code) for code in pieces),
        score=_opt_str(data.get("score")),
    )


def _move_text_from_dict(data: Any) -> MoveText | None:
    if data is None:
        return None
    return MoveText(text=str(data.get("text") or ""), selected=bool(data.get("selected")))


def _snapshot_from_dict(data: Mapping[str, Any]) -> GameSnapshot:
    board = data.get("board")
    if not isinstance(board, str) or not validate_board(board):
        raise SnapshotFormatError(f"Invalid board: {board!r}")

    last_move_data = data.get("lastMove")
    last_move = None
    if last_move_data is not None:
        last_move = LastMove(
            _square(last_move_data["from"]), _square(last_move_data["to"])
        )

    result = data.get("gameResult")
    return GameSnapshot(
        board=board,
        players=_by_color(data.get("players"), _player_from_dict, PlayerInfo),
        clocks=_by_color(data.get("clocks"), _opt_seconds, lambda: None),
        turn=Color(data.get("turn") or Color.WHITE),
        orientation=Color(data.get("orientation") or Color.WHITE),
        last_move=last_move,
        arrows=tuple(
            Arrow(_square(a["from"]), _square(a["to"]), ArrowColor(a["color"]))
            for a in data.get("arrows") or ()
        ),
        marked_squares=tuple(
            MarkedSquare(_square(m["square"]), str(m["color"]))
            for m in data.get("markedSquares") or ()
        ),
        hints=tuple(_square(sq) for sq in data.get("hints") or ()),
        selected_square=_opt_square(data.get("selectedSquare")),
        game_result=GameResult(result) if result is not None else None,
        captured_pieces=_by_color(
            data.get("capturedPieces"), _captured_from_dict, CapturedPieces
        ),
        move_list=tuple(
            MoveListEntry(
                number=int(entry["number"]),
                white=_move_text_from_dict(entry.get("white")),
                black=_move_text_from_dict(entry.get("black")),
            )
            for entry in data.get("moveList") or ()
        ),
        is_new_game=bool(data.get("isNewGame", False)),
    )
