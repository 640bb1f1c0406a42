"""Visual theme constants for the overlay surfaces."""

from __future__ import annotations

from dataclasses import dataclass, field

from PyQt6.QtGui import QColor

from chessmirror.core.enums import ArrowColor, GameResult


def _arrow_palette() -> dict[ArrowColor, QColor]:
    return {
        ArrowColor.RED: QColor(218, 64, 79),
        ArrowColor.GREEN: QColor(101, 168, 58),
        ArrowColor.BLUE: QColor(82, 176, 220),
        ArrowColor.YELLOW: QColor(241, 194, 50),
        ArrowColor.ORANGE: QColor(255, 170, 0),
    }


def _result_palette() -> dict[GameResult, QColor]:
    return {
        GameResult.WIN: QColor(101, 168, 58, 220),
        GameResult.LOSS: QColor(218, 64, 79, 220),
        GameResult.DRAW: QColor(120, 120, 120, 220),
    }


@dataclass(frozen=True)
class OverlayTheme:
    """Colour scheme for the mirrored board."""

    light_square: QColor
    dark_square: QColor
    last_move: QColor
    selected: QColor
    mark_default: QColor  # used when a mark carries no parsable colour
    hint_dot: QColor
    capture_flag: QColor
    white_piece: QColor
    black_piece: QColor
    piece_outline: QColor
    arrow_opacity: float = 0.6
    arrows: dict[ArrowColor, QColor] = field(default_factory=_arrow_palette)
    results: dict[GameResult, QColor] = field(default_factory=_result_palette)

    @classmethod
    def default(cls) -> OverlayTheme:
        return cls(
            light_square=QColor(235, 236, 208),
            dark_square=QColor(115, 149, 82),
            last_move=QColor(255, 255, 51, 110),
            selected=QColor(20, 85, 30, 130),
            mark_default=QColor(235, 97, 80, 200),
            hint_dot=QColor(0, 0, 0, 60),
            capture_flag=QColor(218, 64, 79),
            white_piece=QColor(255, 255, 255),
            black_piece=QColor(30, 30, 30),
            piece_outline=QColor(0, 0, 0, 160),
        )

    def arrow_color(self, color: ArrowColor) -> QColor:
        return self.arrows.get(color, self.arrows[ArrowColor.ORANGE])

    def result_color(self, result: GameResult) -> QColor:
        return self.results[result]


def parse_css_color(text: str | None) -> QColor | None:
    """``rgb(r, g, b)`` / ``rgba(...)`` / named colour → :class:`QColor`."""
    if not text:
        return None
    value = text.strip()
    if value.lower().startswith("rgb"):
        inner = value[value.find("(") + 1 : value.rfind(")")]
        parts = [p.strip() for p in inner.split(",")]
        try:
            channels = [int(float(p)) for p in parts[:3]]
        except ValueError:
            return None
        if len(channels) != 3:
            return None
        color = QColor(*channels)
        if len(parts) == 4:
            try:
                color.setAlphaF(max(0.0, min(1.0, float(parts[3]))))
            except ValueError:
                pass
        return color
    color = QColor(value)
    return color if color.isValid() else None
