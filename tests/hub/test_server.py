"""Tests for HubServer routing using stub sockets."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from PyQt6.QtNetwork import QAbstractSocket

from chessmirror.core.notation import STARTING_BOARD
from chessmirror.core.snapshot import GameSnapshot
from chessmirror.hub.server import PRODUCER_PATH, HubServer


class _Signal:
    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        self._slots.append(slot)

    def emit(self, *args: Any) -> None:
        for slot in list(self._slots):
            slot(*args)


class _StubSocket:
    def __init__(self) -> None:
        self.textMessageReceived = _Signal()
        self.disconnected = _Signal()
        self.sent: list[str] = []
        self.connected = True
        self.deleted = False

    def state(self) -> QAbstractSocket.SocketState:
        if self.connected:
            return QAbstractSocket.SocketState.ConnectedState
        return QAbstractSocket.SocketState.UnconnectedState

    def sendTextMessage(self, text: str) -> int:
        self.sent.append(text)
        return len(text)

    def deleteLater(self) -> None:
        self.deleted = True


@pytest.fixture
def server(qapp: Any) -> HubServer:
    return HubServer()


def _snapshot_json(**changes: Any) -> str:
    return GameSnapshot(board=STARTING_BOARD).evolve(**changes).to_json()


def test_producer_frames_reach_renderers(server: HubServer) -> None:
    producer, renderer = _StubSocket(), _StubSocket()
    server.attach(producer, PRODUCER_PATH)
    server.attach(renderer, "/overlay")

    producer.textMessageReceived.emit(_snapshot_json())

    assert len(renderer.sent) == 1
    assert GameSnapshot.from_json(renderer.sent[0]).board == STARTING_BOARD
    assert server.hub.current is not None


def test_renderer_gets_replay_on_connect(server: HubServer) -> None:
    server.handle_producer_message(_snapshot_json())
    renderer = _StubSocket()

    counts: list[int] = []
    server.renderer_count_changed.connect(counts.append)
    server.attach(renderer, "/")

    assert len(renderer.sent) == 1
    assert counts == [1]
    assert server.renderer_count == 1


def test_invalid_frames_are_dropped(
    server: HubServer, caplog: pytest.LogCaptureFixture
) -> None:
    renderer = _StubSocket()
    server.attach(renderer, "/overlay")

    with caplog.at_level("WARNING"):
        assert server.handle_producer_message('{"board": "bogus"}') is None
        assert server.handle_producer_message("not json") is None

    assert renderer.sent == []
    assert server.hub.sequence == 0
    assert "Invalid game data" in caplog.text


def test_disconnected_renderer_is_unsubscribed(server: HubServer) -> None:
    renderer = _StubSocket()
    server.attach(renderer, "/overlay")

    renderer.disconnected.emit()
    server.handle_producer_message(_snapshot_json())

    assert renderer.sent == []
    assert renderer.deleted
    assert server.renderer_count == 0
    assert server.hub.subscriber_count == 0


def test_renderer_not_connected_is_skipped(server: HubServer) -> None:
    stale, live = _StubSocket(), _StubSocket()
    stale.connected = False
    server.attach(stale, "/overlay")
    server.attach(live, "/overlay")

    server.handle_producer_message(_snapshot_json())

    assert stale.sent == []
    assert len(live.sent) == 1


def test_producer_disconnect(server: HubServer) -> None:
    producer = _StubSocket()
    server.attach(producer, PRODUCER_PATH)
    assert server.producer_count == 1

    producer.disconnected.emit()

    assert server.producer_count == 0
    assert producer.deleted


def test_published_signal(server: HubServer) -> None:
    seen: list[object] = []
    server.snapshot_published.connect(seen.append)
    snapshot = server.handle_producer_message(_snapshot_json())
    assert seen == [snapshot]


def test_listen_on_ephemeral_port(server: HubServer) -> None:
    assert server.listen("127.0.0.1", 0)
    assert server.server_port() > 0
    server.close()
