"""Snapshot extractor: one document tree in, one :class:`GameSnapshot` out.

Each field family has its own sub-extractor. A sub-extractor that raises is
logged and contributes the field's empty value; elements that cannot be
parsed are skipped. :meth:`SnapshotExtractor.extract` therefore never
raises, whatever the page looks like.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TypeVar

from chessmirror.core.enums import Color, GameResult
from chessmirror.core.notation import encode_board, empty_grid, piece_color
from chessmirror.core.snapshot import (
    Arrow,
    CapturedPieces,
    GameSnapshot,
    LastMove,
    MarkedSquare,
    MoveListEntry,
    MoveText,
    PlayerInfo,
)
from chessmirror.core.types import Square, is_square, parse_square, square_from_classes
from chessmirror.dom.interfaces import IDomNode
from chessmirror.extraction import parsing
from chessmirror.extraction.orientation import (
    PANEL,
    PanelSide,
    node_color,
    resolve_orientation,
    side_color,
)
from chessmirror.extraction.records import ExtractionRecord

_LOGGER = logging.getLogger(__name__)

_R = TypeVar("_R")

DEFAULT_MOVE_LIST_LIMIT = 10

# ── Selectors ────────────────────────────────────────────────────────────────

PIECE = ".piece"
PLAYER_CARD = ".player-component"
PLAYER_NAME = ".user-username-component, .username, [data-username]"
PLAYER_RATING = ".user-rating-component, .rating"
PLAYER_TITLE = ".user-title-component, .title"
PLAYER_AVATAR = ".avatar-component img, .player-avatar img, img.avatar"
PLAYER_FLAG = ".country-flags-component"
FALLBACK_NAME = {
    PanelSide.BOTTOM: ".board-player-default-bottom .user-username-component",
    PanelSide.TOP: ".board-player-default-top .user-username-component",
}
CLOCK = ".clock-component, .clock-time-monospace"
ACTIVE_CLOCK = ".clock-player-turn, .clock-running"
HIGHLIGHT = ".highlight"
HINT = '.hint, .capture-hint, .move-dest, [class*="legal"]'
SELECTED = '.piece.selected, .square-selected, .selected[class*="square-"]'
ARROW = "svg.arrows polygon[data-arrow], svg .arrow[data-arrow]"
RESULT = (
    ".game-over-modal-content, .game-over-header-component, "
    ".game-result, .game-review-result"
)
CAPTURED = ".captured-pieces, .captured-pieces-component"
CAPTURED_SCORE = ".captured-pieces-score, .material-score"
MOVE_ROW = ".main-line-row, .move-list-row"
MOVE_NUMBER = ".move-number"
WHITE_PLY = ".white-move, .node.white, .white"
BLACK_PLY = ".black-move, .node.black, .black"
FIGURINE = "[data-figurine]"


class _Highlight:
    __slots__ = ("square", "opacity", "rgb", "is_hint")

    def __init__(
        self,
        square: Square,
        opacity: float | None,
        rgb: tuple[int, int, int] | None,
        is_hint: bool,
    ) -> None:
        self.square = square
        self.opacity = opacity
        self.rgb = rgb
        self.is_hint = is_hint

    @property
    def dimmed(self) -> bool:
        return self.opacity == parsing.DIMMED_OPACITY

    @property
    def is_mark(self) -> bool:
        return self.opacity == parsing.MARK_OPACITY and self.rgb is not None


class SnapshotExtractor:
    """Reads the observable game state out of a document tree."""

    __slots__ = ("_move_list_limit",)

    def __init__(self, move_list_limit: int = DEFAULT_MOVE_LIST_LIMIT) -> None:
        self._move_list_limit = max(0, move_list_limit)

    @property
    def move_list_limit(self) -> int:
        return self._move_list_limit

    def extract(self, document: IDomNode) -> GameSnapshot:
        record = ExtractionRecord()
        orientation = self._guard("orientation", Color.WHITE, resolve_orientation, document)
        record.orientation = orientation

        occupied = self._guard("pieces", {}, self._pieces, document)
        grid = empty_grid()
        for square, letter in occupied.items():
            file, rank = parse_square(square)
            grid[7 - rank][file] = letter
        record.board = encode_board(grid)

        record.players = self._guard("players", {}, self._players, document, orientation)
        record.clocks = self._guard("clocks", {}, self._clocks, document, orientation)

        highlights = self._guard("highlights", [], self._highlights, document)
        record.last_move = self._guard(
            "last move", None, self._last_move, highlights, occupied
        )
        record.turn = self._guard(
            "turn", Color.WHITE, self._turn, document, orientation, record.last_move, occupied
        )
        record.hints = self._guard("hints", [], self._hints, document)
        record.marked_squares = self._guard("marks", [], self._marks, highlights)
        record.selected_square = self._guard(
            "selected square",
            None,
            self._selected_square,
            document,
            highlights,
            occupied,
            record.hints,
        )
        record.arrows = self._guard("arrows", [], self._arrows, document)
        bottom = record.players.get(orientation)
        record.game_result = self._guard(
            "game result",
            None,
            self._game_result,
            document,
            orientation,
            bottom.name if bottom is not None else None,
        )
        record.captured_pieces = self._guard(
            "captured pieces", {}, self._captured, document, orientation
        )
        record.move_list = self._guard("move list", [], self._move_list, document)
        return record.to_snapshot()

    @staticmethod
    def _guard(
        name: str, empty: _R, func: Callable[..., _R], *args: object
    ) -> _R:
        try:
            return func(*args)
        except Exception:
            _LOGGER.warning("Extraction of %s failed; using empty value", name, exc_info=True)
            return empty

    # ── Board ────────────────────────────────────────────────────────────

    @staticmethod
    def _pieces(document: IDomNode) -> dict[Square, str]:
        occupied: dict[Square, str] = {}
        for node in document.select(PIECE):
            classes = node.classes
            letter = next(
                (parsing.PIECE_TOKENS[t] for t in classes if t in parsing.PIECE_TOKENS),
                None,
            )
            square = square_from_classes(classes)
            if letter is None or square is None:
                _LOGGER.debug("Skipping unreadable piece element %r", node)
                continue
            # Document order: a later element on the same square wins.
            occupied[square] = letter
        return occupied

    # ── Players and clocks ───────────────────────────────────────────────

    @staticmethod
    def _players(document: IDomNode, orientation: Color) -> dict[Color, PlayerInfo]:
        players: dict[Color, PlayerInfo] = {}
        for card in document.select(PLAYER_CARD):
            color = node_color(card, orientation)
            if color is None:
                continue
            players[color] = _read_player_card(card)

        for side, selector in FALLBACK_NAME.items():
            color = side_color(side, orientation)
            if players.get(color, PlayerInfo()).name:
                continue
            node = document.select_one(selector)
            name = node.text_content().strip() if node is not None else ""
            if name:
                players[color] = replace(players.get(color, PlayerInfo()), name=name)
        return players

    @staticmethod
    def _clocks(document: IDomNode, orientation: Color) -> dict[Color, float | None]:
        clocks: dict[Color, float | None] = {}
        for node in document.select(CLOCK):
            color = node_color(node, orientation)
            if color is None:
                continue
            seconds = parsing.parse_clock(node.text_content())
            if seconds is not None:
                clocks[color] = seconds
            else:
                clocks.setdefault(color, None)
        return clocks

    @staticmethod
    def _turn(
        document: IDomNode,
        orientation: Color,
        last_move: LastMove | None,
        occupied: dict[Square, str],
    ) -> Color:
        for node in document.select(ACTIVE_CLOCK):
            color = node_color(node, orientation)
            if color is not None:
                return color
        if last_move is not None and last_move.to_sq in occupied:
            return piece_color(occupied[last_move.to_sq]).opposite
        return Color.WHITE

    # ── Squares ──────────────────────────────────────────────────────────

    @staticmethod
    def _highlights(document: IDomNode) -> list[_Highlight]:
        found: list[_Highlight] = []
        for node in document.select(HIGHLIGHT):
            square = square_from_classes(node.classes)
            if square is None:
                continue
            style = node.style
            found.append(
                _Highlight(
                    square,
                    parsing.parse_opacity(style),
                    parsing.parse_rgb(style),
                    node.matches(HINT),
                )
            )
        return found

    @staticmethod
    def _last_move(
        highlights: list[_Highlight], occupied: dict[Square, str]
    ) -> LastMove | None:
        squares: list[Square] = []
        for item in highlights:
            if item.dimmed and not item.is_hint and item.square not in squares:
                squares.append(item.square)
        if len(squares) < 2:
            return None
        first, second = squares[0], squares[1]
        # The vacated square is the origin.
        if first in occupied and second not in occupied:
            first, second = second, first
        return LastMove(first, second)

    @staticmethod
    def _hints(document: IDomNode) -> list[Square]:
        squares: list[Square] = []
        for node in document.select(HINT):
            square = square_from_classes(node.classes)
            if square is not None and square not in squares:
                squares.append(square)
        return squares

    @staticmethod
    def _marks(highlights: list[_Highlight]) -> list[MarkedSquare]:
        marks: list[MarkedSquare] = []
        seen: set[Square] = set()
        for item in highlights:
            if item.is_hint or item.rgb is None or not item.is_mark:
                continue
            if item.square in seen:
                continue
            seen.add(item.square)
            marks.append(MarkedSquare(item.square, parsing.format_rgb(item.rgb)))
        return marks

    @staticmethod
    def _selected_square(
        document: IDomNode,
        highlights: list[_Highlight],
        occupied: dict[Square, str],
        hints: list[Square] | None,
    ) -> Square | None:
        for node in document.select(SELECTED):
            square = square_from_classes(node.classes)
            if square is not None:
                return square

        # Heuristic: a plain highlight under a piece that is not a hint target.
        hint_squares = set(hints or ())
        for item in highlights:
            if item.is_hint or item.dimmed or item.is_mark:
                continue
            if item.square in occupied and item.square not in hint_squares:
                return item.square
        return None

    @staticmethod
    def _arrows(document: IDomNode) -> list[Arrow]:
        arrows: list[Arrow] = []
        for node in document.select(ARROW):
            data = (node.get_attribute("data-arrow") or "").strip().lower()
            from_sq, to_sq = data[:2], data[2:4]
            if not (is_square(from_sq) and is_square(to_sq)):
                _LOGGER.debug("Skipping malformed arrow %r", data)
                continue
            paint = f"{node.style} {node.get_attribute('fill') or ''}"
            arrows.append(Arrow(from_sq, to_sq, parsing.classify_arrow_color(paint)))
        return arrows

    # ── Result, material, moves ──────────────────────────────────────────

    @staticmethod
    def _game_result(
        document: IDomNode, orientation: Color, viewer_name: str | None
    ) -> GameResult | None:
        for node in document.select(RESULT):
            result = parsing.classify_result(node.text_content(), orientation, viewer_name)
            if result is not None:
                return result
        return None

    @staticmethod
    def _captured(document: IDomNode, orientation: Color) -> dict[Color, CapturedPieces]:
        captured: dict[Color, CapturedPieces] = {}
        for container in document.select(CAPTURED):
            color = node_color(container, orientation)
            if color is None:
                continue
            pieces: list[str] = []
            for node in (container, *container.iter_descendants()):
                for token in node.classes:
                    pieces.extend(parsing.parse_captured_token(token, color))

            score_node = container.select_one(CAPTURED_SCORE)
            if score_node is None:
                panel = container.closest(PANEL)
                score_node = panel.select_one(CAPTURED_SCORE) if panel is not None else None
            score = score_node.text_content().strip() if score_node is not None else ""

            previous = captured.get(color)
            if previous is not None and len(previous.pieces) > len(pieces):
                # A nested container already reported the fuller list.
                continue
            captured[color] = CapturedPieces(tuple(pieces), score or None)
        return captured

    def _move_list(self, document: IDomNode) -> list[MoveListEntry]:
        entries: list[MoveListEntry] = []
        for index, row in enumerate(document.select(MOVE_ROW)):
            number = _move_number(row, index + 1)
            white = _read_ply(row.select_one(WHITE_PLY))
            black = _read_ply(row.select_one(BLACK_PLY))
            if white is None and black is None:
                continue
            entries.append(MoveListEntry(number, white, black))
        if self._move_list_limit == 0:
            return []
        return entries[-self._move_list_limit :]


# ── Element readers ──────────────────────────────────────────────────────────


def _text_of(node: IDomNode | None) -> str:
    return node.text_content().strip() if node is not None else ""


def _read_player_card(card: IDomNode) -> PlayerInfo:
    name_node = card.select_one(PLAYER_NAME)
    name = _text_of(name_node)
    if not name and name_node is not None:
        name = (name_node.get_attribute("data-username") or "").strip()

    avatar_node = card.select_one(PLAYER_AVATAR)
    flag_node = card.select_one(PLAYER_FLAG)
    return PlayerInfo(
        name=name or None,
        rating=parsing.parse_rating(_text_of(card.select_one(PLAYER_RATING))),
        title=_text_of(card.select_one(PLAYER_TITLE)) or None,
        avatar=(avatar_node.get_attribute("src") or None) if avatar_node is not None else None,
        country_code=(
            parsing.parse_country_token(flag_node.classes) if flag_node is not None else None
        ),
    )


def _move_number(row: IDomNode, fallback: int) -> int:
    raw = row.get_attribute("data-whole-move-number")
    if not raw:
        raw = _text_of(row.select_one(MOVE_NUMBER)).rstrip(".")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return fallback


def _read_ply(node: IDomNode | None) -> MoveText | None:
    if node is None:
        return None
    figurine_node = node.select_one(FIGURINE) or (
        node if node.get_attribute("data-figurine") else None
    )
    figurine = figurine_node.get_attribute("data-figurine") if figurine_node else None
    text = (figurine or "") + node.text_content().strip()
    if not text:
        return None
    selected = node.has_class("selected") or node.select_one(".selected") is not None
    return MoveText(text, selected)
