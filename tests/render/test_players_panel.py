"""Tests for the players panel, clock formatting and country flags."""

from __future__ import annotations

from typing import Any

import pytest

from chessmirror.core.enums import Color
from chessmirror.core.snapshot import ByColor, CapturedPieces, GameSnapshot, PlayerInfo
from chessmirror.render.countries import flag_emoji, iso_country_code
from chessmirror.render.players_panel import PlayersPanel, captured_text, format_time


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (None, "--:--"),
        (0, "0:00"),
        (9.7, "0:09"),
        (300, "5:00"),
        (3723, "1:02:03"),
        (-4, "0:00"),
    ],
)
def test_format_time(seconds: float | None, expected: str) -> None:
    assert format_time(seconds) == expected


def test_country_codes() -> None:
    assert iso_country_code("2") == "us"
    assert iso_country_code("GB") == "gb"
    assert iso_country_code("99999") is None
    assert iso_country_code(None) is None
    assert flag_emoji("2") == "\U0001f1fa\U0001f1f8"
    assert flag_emoji("nowhere") == ""


def test_captured_text() -> None:
    assert captured_text(CapturedPieces(("bp", "bn"), "+4")) == "♟♞ +4"
    assert captured_text(CapturedPieces()) == ""


def _snapshot(orientation: Color = Color.WHITE) -> GameSnapshot:
    return GameSnapshot(
        players=ByColor(
            PlayerInfo(name="alice", rating=1500, country_code="2"),
            PlayerInfo(name="bob", title="GM"),
        ),
        clocks=ByColor(300.0, 12.0),
        turn=Color.BLACK,
        orientation=orientation,
        captured_pieces=ByColor(CapturedPieces(("bp",)), CapturedPieces()),
    )


def test_rows_follow_orientation(qapp: Any) -> None:
    panel = PlayersPanel()
    panel.update_snapshot(_snapshot())

    assert panel.bottom.name_text == "alice"
    assert panel.bottom.rating_text == "(1500)"
    assert panel.bottom.flag_text == "\U0001f1fa\U0001f1f8"
    assert panel.bottom.captured_text == "♟"
    assert panel.top.name_text == "bob"
    assert panel.top.rating_text == ""

    panel.update_snapshot(_snapshot(Color.BLACK))
    assert panel.bottom.name_text == "bob"
    assert panel.row_for(Color.WHITE, Color.BLACK) is panel.top


def test_clock_state(qapp: Any) -> None:
    panel = PlayersPanel(low_time_seconds=30)
    panel.update_snapshot(_snapshot())

    assert panel.bottom.clock.text() == "5:00"
    assert not panel.bottom.clock.is_active
    assert panel.top.clock.text() == "0:12"
    assert panel.top.clock.is_active
    assert panel.top.clock.is_low_time


def test_unknown_player_name(qapp: Any) -> None:
    panel = PlayersPanel()
    panel.update_snapshot(GameSnapshot())
    assert panel.top.name_text == "Unknown"
    assert panel.top.clock.text() == "--:--"
