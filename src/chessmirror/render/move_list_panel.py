"""MoveListPanel — the most recent moves as shown by the source page."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from chessmirror.core.snapshot import MoveListEntry, MoveText


def _ply_text(move: MoveText | None) -> str:
    if move is None:
        return ""
    return f"[{move.text}]" if move.selected else move.text


def format_entry(entry: MoveListEntry) -> str:
    """One row: ``12. Nf3 [e5]`` with the selected ply bracketed."""
    white = _ply_text(entry.white) or "…"
    black = _ply_text(entry.black)
    return f"{entry.number}. {white} {black}".rstrip()


class MoveListPanel(QWidget):
    """Displays the recent move list."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._entries: tuple[MoveListEntry, ...] = ()
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        self._header = QLabel("Moves")
        self._header.setFont(QFont("Adwaita Sans", 12, QFont.Weight.Bold))
        self._header.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._header)

        self._list = QListWidget()
        self._list.setAlternatingRowColors(True)
        self._list.setSelectionMode(QListWidget.SelectionMode.NoSelection)
        self._list.setFont(QFont("AdwaitaMono Nerd Font", 12))
        layout.addWidget(self._list)

    def row_count(self) -> int:
        return self._list.count()

    def row_text(self, row: int) -> str:
        item = self._list.item(row)
        return item.text() if item is not None else ""

    def set_entries(self, entries: tuple[MoveListEntry, ...]) -> None:
        if entries == self._entries:
            return
        self._entries = entries
        self._list.clear()
        for entry in entries:
            item = QListWidgetItem(format_entry(entry))
            selected = any(m is not None and m.selected for m in (entry.white, entry.black))
            if selected:
                font = item.font()
                font.setBold(True)
                item.setFont(font)
            self._list.addItem(item)
        if self._list.count():
            self._list.scrollToBottom()
