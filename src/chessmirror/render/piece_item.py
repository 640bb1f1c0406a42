"""PieceItem — chess piece glyph on the overlay scene."""

from __future__ import annotations

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QFont, QFontMetricsF, QPainter, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsObject, QStyleOptionGraphicsItem, QWidget

from chessmirror.core.enums import Color
from chessmirror.core.notation import piece_color, piece_kind
from chessmirror.core.types import Square
from chessmirror.render.theme import OverlayTheme

# Filled symbols for both colours; the fill brush tells them apart.
GLYPHS: dict[str, str] = {
    "k": "♚",
    "q": "♛",
    "r": "♜",
    "b": "♝",
    "n": "♞",
    "p": "♟",
}


class PieceItem(QGraphicsObject):
    """A single piece drawn as an outlined unicode glyph.

    A :class:`QGraphicsObject` so its ``pos`` can be animated.
    """

    _GLYPH_RATIO = 0.78

    def __init__(self, code: str, square: Square, tile_size: int, theme: OverlayTheme) -> None:
        super().__init__()
        self.code = code
        self.square = square
        self._tile_size = tile_size
        self._theme = theme
        self.setCacheMode(QGraphicsItem.CacheMode.DeviceCoordinateCache)
        self.setZValue(1)

    @property
    def color(self) -> Color:
        return piece_color(self.code)

    @property
    def glyph(self) -> str:
        return GLYPHS[piece_kind(self.code)]

    def set_code(self, code: str) -> None:
        """Swap the drawn piece (promotion)."""
        if code == self.code:
            return
        self.code = code
        self.update()

    def set_tile_size(self, size: int) -> None:
        self.prepareGeometryChange()
        self._tile_size = size

    def boundingRect(self) -> QRectF:
        return QRectF(0.0, 0.0, float(self._tile_size), float(self._tile_size))

    def paint(
        self,
        painter: QPainter | None,
        option: QStyleOptionGraphicsItem | None,
        widget: QWidget | None = None,
    ) -> None:
        if painter is None:
            return
        font = QFont()
        font.setPixelSize(max(1, int(self._tile_size * self._GLYPH_RATIO)))
        metrics = QFontMetricsF(font)
        text_width = metrics.horizontalAdvance(self.glyph)
        baseline = (self._tile_size + metrics.ascent() - metrics.descent()) / 2
        path = QPainterPath()
        path.addText(QPointF((self._tile_size - text_width) / 2, baseline), font, self.glyph)

        fill = self._theme.white_piece if self.color is Color.WHITE else self._theme.black_piece
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(QPen(self._theme.piece_outline, 1.5))
        painter.setBrush(QBrush(fill, Qt.BrushStyle.SolidPattern))
        painter.drawPath(path)
