"""PlayersPanel — names, ratings, clocks and material for both sides."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QSizePolicy, QVBoxLayout, QWidget

from chessmirror.core.enums import Color
from chessmirror.core.snapshot import CapturedPieces, GameSnapshot, PlayerInfo
from chessmirror.render.countries import flag_emoji

LOW_TIME_SECONDS = 30.0

_CAPTURED_GLYPHS: dict[str, str] = {
    "wp": "♙",
    "wn": "♘",
    "wb": "♗",
    "wr": "♖",
    "wq": "♕",
    "wk": "♔",
    "bp": "♟",
    "bn": "♞",
    "bb": "♝",
    "br": "♜",
    "bq": "♛",
    "bk": "♚",
}


def format_time(seconds: float | None) -> str:
    """``M:SS`` below an hour, ``H:MM:SS`` above; ``--:--`` when unknown."""
    if seconds is None:
        return "--:--"
    total = max(0, int(seconds))
    mins, secs = divmod(total, 60)
    if mins >= 60:
        hours, mins = divmod(mins, 60)
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def captured_text(captured: CapturedPieces) -> str:
    glyphs = "".join(_CAPTURED_GLYPHS.get(code, "") for code in captured.pieces)
    if captured.score:
        return f"{glyphs} {captured.score}".strip()
    return glyphs


class _ClockLabel(QLabel):
    """One side's clock readout."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._active = False
        self._is_low_time = False
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setFont(QFont("Adwaita Sans", 22, QFont.Weight.Bold))
        self.setMinimumWidth(110)
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Fixed)
        self.update_time(None, active=False)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_low_time(self) -> bool:
        return self._is_low_time

    def update_time(self, seconds: float | None, *, active: bool, low_time: float = LOW_TIME_SECONDS) -> None:
        self.setText(format_time(seconds))
        self._active = active and seconds is not None
        self._is_low_time = seconds is not None and seconds < low_time
        self._apply_style()

    def _apply_style(self) -> None:
        if self._is_low_time:
            background = "#8b2020" if self._active else "#5a2a2a"
            self.setStyleSheet(
                f"background-color: {background}; color: white; "
                "padding: 6px 12px; border-radius: 4px;"
            )
            return
        if self._active:
            self.setStyleSheet(
                "background-color: #f0f0f0; color: #1a1a1a; "
                "padding: 6px 12px; border-radius: 4px;"
            )
            return
        self.setStyleSheet(
            "background-color: #2b2b2b; color: #aaa; "
            "padding: 6px 12px; border-radius: 4px;"
        )


class PlayerRow(QWidget):
    """Flag, title, name and rating over captured material, next to a clock."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._flag = QLabel()
        self._title = QLabel()
        self._title.setStyleSheet(
            "background-color: #7c2929; color: white; padding: 0 4px; border-radius: 3px;"
        )
        self._name = QLabel()
        self._name.setFont(QFont("Adwaita Sans", 14, QFont.Weight.Bold))
        self._rating = QLabel()
        self._captured = QLabel()
        self._captured.setFont(QFont("Adwaita Sans", 12))
        self._clock = _ClockLabel()

        name_line = QHBoxLayout()
        name_line.setSpacing(6)
        for widget in (self._flag, self._title, self._name, self._rating):
            name_line.addWidget(widget)
        name_line.addStretch(1)

        info = QVBoxLayout()
        info.addLayout(name_line)
        info.addWidget(self._captured)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.addLayout(info, 1)
        layout.addWidget(self._clock)

    @property
    def name_text(self) -> str:
        return self._name.text()

    @property
    def rating_text(self) -> str:
        return self._rating.text()

    @property
    def clock(self) -> _ClockLabel:
        return self._clock

    @property
    def captured_text(self) -> str:
        return self._captured.text()

    @property
    def flag_text(self) -> str:
        return self._flag.text()

    def update_player(
        self,
        player: PlayerInfo,
        clock_seconds: float | None,
        captured: CapturedPieces,
        *,
        active: bool,
        low_time: float = LOW_TIME_SECONDS,
    ) -> None:
        flag = flag_emoji(player.country_code)
        self._flag.setText(flag)
        self._flag.setVisible(bool(flag))
        self._title.setText(player.title or "")
        self._title.setVisible(bool(player.title))
        self._name.setText(player.name or "Unknown")
        self._rating.setText(f"({player.rating})" if player.rating else "")
        self._clock.update_time(clock_seconds, active=active, low_time=low_time)
        self._captured.setText(captured_text(captured))


class PlayersPanel(QWidget):
    """Top (opponent) and bottom (local viewer) player rows."""

    def __init__(self, parent: QWidget | None = None, low_time_seconds: float = LOW_TIME_SECONDS) -> None:
        super().__init__(parent)
        self._low_time = low_time_seconds
        self.top = PlayerRow()
        self.bottom = PlayerRow()
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.top)
        layout.addStretch(1)
        layout.addWidget(self.bottom)

    def update_snapshot(self, snapshot: GameSnapshot) -> None:
        bottom_color = snapshot.orientation
        for row, color in ((self.bottom, bottom_color), (self.top, bottom_color.opposite)):
            row.update_player(
                snapshot.players.get(color),
                snapshot.clocks.get(color),
                snapshot.captured_pieces.get(color),
                active=snapshot.turn == color,
                low_time=self._low_time,
            )

    def row_for(self, color: Color, orientation: Color) -> PlayerRow:
        return self.bottom if color == orientation else self.top
