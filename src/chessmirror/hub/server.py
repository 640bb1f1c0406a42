"""WebSocket hub server.

Connections are routed by request path: ``/extension`` is the producer,
whose text frames carry snapshot JSON; every other path is a renderer that
receives the current snapshot on connect and every later one after that.
"""

from __future__ import annotations

import logging
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtNetwork import QAbstractSocket, QHostAddress
from PyQt6.QtWebSockets import QWebSocket, QWebSocketServer

from chessmirror.core.snapshot import GameSnapshot
from chessmirror.errors import SnapshotFormatError
from chessmirror.hub.broadcast import BroadcastHub, Subscription

_LOGGER = logging.getLogger(__name__)

PRODUCER_PATH = "/extension"
DEFAULT_PORT = 3000


class HubServer(QObject):
    """Relays producer snapshots to every connected renderer."""

    snapshot_published = pyqtSignal(object)
    renderer_count_changed = pyqtSignal(int)

    def __init__(
        self,
        hub: BroadcastHub[GameSnapshot] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._hub: BroadcastHub[GameSnapshot] = hub if hub is not None else BroadcastHub()
        self._server = QWebSocketServer(
            "chessmirror", QWebSocketServer.SslMode.NonSecureMode, self
        )
        self._server.newConnection.connect(self._on_new_connection)
        self._renderers: dict[Any, Subscription[GameSnapshot]] = {}
        self._producers: list[Any] = []

    @property
    def hub(self) -> BroadcastHub[GameSnapshot]:
        return self._hub

    @property
    def renderer_count(self) -> int:
        return len(self._renderers)

    @property
    def producer_count(self) -> int:
        return len(self._producers)

    def listen(self, host: str = "127.0.0.1", port: int = DEFAULT_PORT) -> bool:
        if not self._server.listen(QHostAddress(host), port):
            _LOGGER.error(
                "Hub could not listen on %s:%d: %s", host, port, self._server.errorString()
            )
            return False
        _LOGGER.info("Hub listening on ws://%s:%d", host, self._server.serverPort())
        _LOGGER.info("Producer endpoint: ws://%s:%d%s", host, self._server.serverPort(), PRODUCER_PATH)
        return True

    def server_port(self) -> int:
        return self._server.serverPort()

    def close(self) -> None:
        for subscription in self._renderers.values():
            subscription.unsubscribe()
        self._renderers.clear()
        self._producers.clear()
        self._server.close()

    # ── Connections ──────────────────────────────────────────────────────

    def _on_new_connection(self) -> None:
        while self._server.hasPendingConnections():
            socket = self._server.nextPendingConnection()
            if socket is None:
                break
            self.attach(socket, socket.requestUrl().path())

    def attach(self, socket: QWebSocket, path: str) -> None:
        """Route *socket* to the producer or renderer role by *path*."""
        if path == PRODUCER_PATH:
            self._attach_producer(socket)
        else:
            self._attach_renderer(socket)

    def _attach_producer(self, socket: QWebSocket) -> None:
        _LOGGER.info("Producer connected")
        self._producers.append(socket)
        socket.textMessageReceived.connect(self.handle_producer_message)
        socket.disconnected.connect(lambda s=socket: self._on_producer_disconnected(s))

    def _attach_renderer(self, socket: QWebSocket) -> None:
        _LOGGER.info("Renderer connected")
        socket.disconnected.connect(lambda s=socket: self._on_renderer_disconnected(s))
        # Subscribing replays the current snapshot immediately.
        self._renderers[socket] = self._hub.subscribe(
            lambda snapshot, s=socket: self._send(s, snapshot)
        )
        self.renderer_count_changed.emit(len(self._renderers))

    def _on_producer_disconnected(self, socket: QWebSocket) -> None:
        _LOGGER.info("Producer disconnected")
        if socket in self._producers:
            self._producers.remove(socket)
        socket.deleteLater()

    def _on_renderer_disconnected(self, socket: QWebSocket) -> None:
        subscription = self._renderers.pop(socket, None)
        if subscription is not None:
            subscription.unsubscribe()
        _LOGGER.info("Renderer disconnected")
        self.renderer_count_changed.emit(len(self._renderers))
        socket.deleteLater()

    # ── Messages ─────────────────────────────────────────────────────────

    def handle_producer_message(self, text: str) -> GameSnapshot | None:
        try:
            snapshot = GameSnapshot.from_json(text)
        except SnapshotFormatError as exc:
            _LOGGER.warning("Invalid game data: %s", exc)
            return None
        _LOGGER.info(
            "Game state updated: %s vs %s",
            snapshot.players.white.name,
            snapshot.players.black.name,
        )
        self._hub.publish(snapshot)
        self.snapshot_published.emit(snapshot)
        return snapshot

    @staticmethod
    def _send(socket: QWebSocket, snapshot: GameSnapshot) -> None:
        if socket.state() != QAbstractSocket.SocketState.ConnectedState:
            _LOGGER.debug("Skipping renderer that is not connected")
            return
        socket.sendTextMessage(snapshot.to_json())
