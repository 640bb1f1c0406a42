"""OverlayBoardScene — QGraphicsScene that applies visual operations."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from PyQt6.QtCore import (
    QAbstractAnimation,
    QEasingCurve,
    QObject,
    QParallelAnimationGroup,
    QPointF,
    QPropertyAnimation,
    QRectF,
    Qt,
)
from PyQt6.QtGui import QBrush, QColor, QFont, QPen, QPolygonF
from PyQt6.QtWidgets import (
    QGraphicsEllipseItem,
    QGraphicsItem,
    QGraphicsPolygonItem,
    QGraphicsRectItem,
    QGraphicsScene,
    QGraphicsSimpleTextItem,
)

from chessmirror.core.enums import Color, GameResult, HighlightKind
from chessmirror.core.snapshot import Arrow
from chessmirror.core.types import ALL_SQUARES, Square, file_of, rank_of
from chessmirror.render.arrows import arrow_polygons
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
from chessmirror.render.piece_item import PieceItem
from chessmirror.render.theme import OverlayTheme, parse_css_color

_LOGGER = logging.getLogger(__name__)

_RESULT_TEXT = {
    GameResult.WIN: "You won",
    GameResult.LOSS: "You lost",
    GameResult.DRAW: "Draw",
}

_HIGHLIGHT_Z = {
    HighlightKind.LAST_MOVE: 0.5,
    HighlightKind.SELECTED: 0.55,
    HighlightKind.MARK: 0.6,
    HighlightKind.HINT: 0.7,
}


class OverlayBoardScene(QGraphicsScene):
    """Renders the mirrored board from a stream of visual operations."""

    TILE = 120  # px per square

    _ANIM_DURATION_MS = 150

    def __init__(self, parent: QObject | None = None, theme: OverlayTheme | None = None) -> None:
        super().__init__(parent)
        self._theme = theme or OverlayTheme.default()
        self._orientation = Color.WHITE
        self._animate_moves = True
        self._animation_ms = self._ANIM_DURATION_MS
        self._show_coordinates = True

        self._square_items: dict[Square, QGraphicsRectItem] = {}
        self._coord_items: list[QGraphicsSimpleTextItem] = []
        self._piece_items: dict[str, PieceItem] = {}
        self._highlight_items: dict[tuple[Square, HighlightKind], QGraphicsItem] = {}
        self._arrow_items: list[QGraphicsPolygonItem] = []
        self._arrows: tuple[Arrow, ...] = ()
        self._flag_square: Square | None = None
        self._flag_item: QGraphicsEllipseItem | None = None
        self._result: GameResult | None = None
        self._result_items: list[QGraphicsItem] = []

        self._active_anim: QParallelAnimationGroup | None = None
        self._anim_targets: list[tuple[PieceItem, QPointF]] = []

        self._draw_board()

    # ── Settings ─────────────────────────────────────────────────────────

    def set_animate_moves(self, enabled: bool) -> None:
        self._animate_moves = enabled

    def set_animation_ms(self, duration_ms: int) -> None:
        self._animation_ms = max(0, duration_ms)

    def set_show_coordinates(self, visible: bool) -> None:
        self._show_coordinates = visible
        for item in self._coord_items:
            item.setVisible(visible)

    # ── Inspection ───────────────────────────────────────────────────────

    @property
    def orientation(self) -> Color:
        return self._orientation

    def piece_at(self, square: Square) -> str | None:
        item = self._piece_items.get(square)
        return item.code if item is not None else None

    def pieces(self) -> dict[Square, str]:
        return {square: item.code for square, item in self._piece_items.items()}

    def highlights(self) -> set[tuple[Square, HighlightKind]]:
        return set(self._highlight_items)

    @property
    def arrows(self) -> tuple[Arrow, ...]:
        return self._arrows

    @property
    def capture_flag(self) -> Square | None:
        return self._flag_square

    @property
    def result(self) -> GameResult | None:
        return self._result

    def is_animating(self) -> bool:
        return self._active_anim is not None

    # ── Operations ───────────────────────────────────────────────────────

    def apply(self, ops: Iterable[VisualOp]) -> None:
        """Apply one reconciliation batch in order."""
        self._finish_animation()
        ops = list(ops)
        # Moves of one batch are simultaneous: lift every mover first.
        movers = {
            op.piece_id: self._piece_items.pop(op.piece_id, None)
            for op in ops
            if isinstance(op, MovePiece)
        }
        slides: list[tuple[PieceItem, QPointF]] = []

        for op in ops:
            if isinstance(op, SetOrientation):
                self._set_orientation(op.orientation)
            elif isinstance(op, RemovePiece):
                self._remove_piece(op.piece_id)
            elif isinstance(op, MovePiece):
                slide = self._move_piece(op, movers.get(op.piece_id))
                if slide is not None:
                    slides.append(slide)
            elif isinstance(op, PlacePiece):
                self._place_piece(op.square, op.code)
            elif isinstance(op, SetHighlight):
                self._set_highlight(op.square, op.kind, op.color)
            elif isinstance(op, ClearHighlight):
                self._clear_highlight(op.square, op.kind)
            elif isinstance(op, SetCaptureFlag):
                self._set_capture_flag(op.square)
            elif isinstance(op, ClearCaptureFlag):
                self._clear_capture_flag()
            elif isinstance(op, SetAnnotationArrows):
                self._set_arrows(op.arrows)
            elif isinstance(op, ShowResult):
                self._show_result(op.result)
            elif isinstance(op, HideResult):
                self._hide_result()

        self._start_slides(slides)

    def _set_orientation(self, orientation: Color) -> None:
        if orientation == self._orientation:
            return
        self._orientation = orientation
        self._draw_board()
        self._relayout()

    def _remove_piece(self, piece_id: str) -> None:
        item = self._piece_items.pop(piece_id, None)
        if item is None:
            _LOGGER.debug("RemovePiece for unknown piece %s", piece_id)
            return
        self.removeItem(item)

    def _move_piece(
        self, op: MovePiece, item: PieceItem | None
    ) -> tuple[PieceItem, QPointF] | None:
        if item is None:
            _LOGGER.debug("MovePiece for unknown piece %s", op.piece_id)
            return None
        occupant = self._piece_items.pop(op.to_square, None)
        if occupant is not None:
            self.removeItem(occupant)
        item.square = op.to_square
        if op.promoted_to is not None:
            item.set_code(op.promoted_to)
        self._piece_items[op.to_square] = item
        target = self._square_origin(op.to_square)
        if not self._animate_moves or self._animation_ms == 0:
            item.setPos(target)
            return None
        return item, target

    def _place_piece(self, square: Square, code: str) -> None:
        existing = self._piece_items.pop(square, None)
        if existing is not None:
            self.removeItem(existing)
        item = PieceItem(code, square, self.TILE, self._theme)
        item.setPos(self._square_origin(square))
        self.addItem(item)
        self._piece_items[square] = item

    def _set_highlight(self, square: Square, kind: HighlightKind, color: str | None) -> None:
        self._clear_highlight(square, kind)
        rect = self._square_rect(square)
        if kind is HighlightKind.HINT:
            size = self.TILE * 0.3
            center = rect.center()
            item: QGraphicsItem = QGraphicsEllipseItem(
                center.x() - size / 2, center.y() - size / 2, size, size
            )
            item.setBrush(QBrush(self._theme.hint_dot))
            item.setPen(QPen(Qt.PenStyle.NoPen))
        else:
            if kind is HighlightKind.MARK:
                brush = parse_css_color(color) or self._theme.mark_default
            elif kind is HighlightKind.SELECTED:
                brush = self._theme.selected
            else:
                brush = self._theme.last_move
            item = QGraphicsRectItem(rect)
            item.setBrush(QBrush(brush))
            item.setPen(QPen(Qt.PenStyle.NoPen))
        item.setZValue(_HIGHLIGHT_Z[kind])
        self.addItem(item)
        self._highlight_items[(square, kind)] = item

    def _clear_highlight(self, square: Square, kind: HighlightKind) -> None:
        item = self._highlight_items.pop((square, kind), None)
        if item is not None:
            self.removeItem(item)

    def _set_capture_flag(self, square: Square) -> None:
        self._clear_capture_flag()
        rect = self._square_rect(square)
        size = self.TILE * 0.28
        ring = QGraphicsEllipseItem(rect.right() - size - 4, rect.top() + 4, size, size)
        ring.setBrush(QBrush(self._theme.capture_flag))
        ring.setPen(QPen(QColor(255, 255, 255), 3))
        ring.setZValue(3)
        self.addItem(ring)
        self._flag_item = ring
        self._flag_square = square

    def _clear_capture_flag(self) -> None:
        if self._flag_item is not None:
            self.removeItem(self._flag_item)
        self._flag_item = None
        self._flag_square = None

    def _set_arrows(self, arrows: tuple[Arrow, ...]) -> None:
        for item in self._arrow_items:
            self.removeItem(item)
        self._arrow_items.clear()
        self._arrows = arrows
        for arrow in arrows:
            color = self._theme.arrow_color(arrow.color)
            for points in arrow_polygons(arrow.from_sq, arrow.to_sq, self.TILE, self._orientation):
                polygon = QGraphicsPolygonItem(QPolygonF([QPointF(x, y) for x, y in points]))
                polygon.setBrush(QBrush(color))
                polygon.setPen(QPen(Qt.PenStyle.NoPen))
                polygon.setOpacity(self._theme.arrow_opacity)
                polygon.setZValue(5)
                self.addItem(polygon)
                self._arrow_items.append(polygon)

    def _show_result(self, result: GameResult) -> None:
        self._hide_result()
        t = self.TILE
        banner = QGraphicsRectItem(0, 3.25 * t, 8 * t, 1.5 * t)
        banner.setBrush(QBrush(self._theme.result_color(result)))
        banner.setPen(QPen(Qt.PenStyle.NoPen))
        banner.setZValue(10)
        label = QGraphicsSimpleTextItem(_RESULT_TEXT[result])
        label.setFont(QFont("Adwaita Sans", t // 3, QFont.Weight.Bold))
        label.setBrush(QBrush(QColor(255, 255, 255)))
        bounds = label.boundingRect()
        label.setPos(4 * t - bounds.width() / 2, 4 * t - bounds.height() / 2)
        label.setZValue(11)
        for item in (banner, label):
            self.addItem(item)
            self._result_items.append(item)
        self._result = result

    def _hide_result(self) -> None:
        for item in self._result_items:
            self.removeItem(item)
        self._result_items.clear()
        self._result = None

    # ── Animation ────────────────────────────────────────────────────────

    def _start_slides(self, slides: list[tuple[PieceItem, QPointF]]) -> None:
        if not slides:
            return
        group = QParallelAnimationGroup(self)
        for item, target in slides:
            item.setZValue(2)
            anim = QPropertyAnimation(item, b"pos")
            anim.setDuration(self._animation_ms)
            anim.setStartValue(item.pos())
            anim.setEndValue(target)
            anim.setEasingCurve(QEasingCurve.Type.OutCubic)
            group.addAnimation(anim)
        group.finished.connect(self._on_animation_finished)
        self._active_anim = group
        self._anim_targets = slides
        group.start(QAbstractAnimation.DeletionPolicy.DeleteWhenStopped)

    def _finish_animation(self) -> None:
        """Snap any running slide to its destination."""
        if self._active_anim is None:
            return
        self._active_anim.stop()
        self._on_animation_finished()

    def _on_animation_finished(self) -> None:
        for item, target in self._anim_targets:
            item.setPos(target)
            item.setZValue(1)
        self._anim_targets = []
        self._active_anim = None

    # ── Board drawing ────────────────────────────────────────────────────

    def _draw_board(self) -> None:
        """Draw or redraw the 64 squares and coordinates."""
        for sq_item in self._square_items.values():
            self.removeItem(sq_item)
        self._square_items.clear()
        for coord_item in self._coord_items:
            self.removeItem(coord_item)
        self._coord_items.clear()

        t = self.TILE
        font = QFont("Adwaita Sans", max(9, t // 8))
        for sq in ALL_SQUARES:
            f, r = file_of(sq), rank_of(sq)
            vf, vr = self._visual_coords(f, r)
            is_light = (f + r) % 2 == 1
            rect = QGraphicsRectItem(vf * t, vr * t, t, t)
            rect.setBrush(
                QBrush(self._theme.light_square if is_light else self._theme.dark_square)
            )
            rect.setPen(QPen(Qt.PenStyle.NoPen))
            rect.setZValue(0)
            self.addItem(rect)
            self._square_items[sq] = rect

            text_color = self._theme.dark_square if is_light else self._theme.light_square
            if vf == 0:
                self._add_coord(str(r + 1), font, text_color, vf * t + 3, vr * t + 2)
            if vr == 7:
                self._add_coord("abcdefgh"[f], font, text_color, vf * t + t - 16, vr * t + t - 20)

        self.setSceneRect(0, 0, 8 * t, 8 * t)

    def _add_coord(self, text: str, font: QFont, color: QColor, x: float, y: float) -> None:
        item = QGraphicsSimpleTextItem(text)
        item.setFont(font)
        item.setBrush(QBrush(color))
        item.setPos(x, y)
        item.setZValue(0.3)
        item.setVisible(self._show_coordinates)
        self.addItem(item)
        self._coord_items.append(item)

    def _relayout(self) -> None:
        """Reposition every square-anchored item after an orientation change."""
        for square, item in self._piece_items.items():
            item.setPos(self._square_origin(square))
        for (square, kind), item in list(self._highlight_items.items()):
            color = None
            if kind is HighlightKind.MARK and isinstance(item, QGraphicsRectItem):
                color = item.brush().color().name()
            self._set_highlight(square, kind, color)
        if self._flag_square is not None:
            self._set_capture_flag(self._flag_square)
        self._set_arrows(self._arrows)

    # ── Coordinate helpers ───────────────────────────────────────────────

    def _visual_coords(self, file: int, rank: int) -> tuple[int, int]:
        """Convert board file/rank to visual column/row."""
        if self._orientation is Color.BLACK:
            return 7 - file, rank
        return file, 7 - rank

    def _square_rect(self, square: Square) -> QRectF:
        t = self.TILE
        vf, vr = self._visual_coords(file_of(square), rank_of(square))
        return QRectF(vf * t, vr * t, t, t)

    def _square_origin(self, square: Square) -> QPointF:
        return self._square_rect(square).topLeft()
