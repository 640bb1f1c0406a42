"""Reconnecting WebSocket clients for both ends of the hub."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer, QUrl, pyqtSignal
from PyQt6.QtNetwork import QAbstractSocket
from PyQt6.QtWebSockets import QWebSocket

from chessmirror.core.snapshot import GameSnapshot
from chessmirror.errors import SnapshotFormatError

_LOGGER = logging.getLogger(__name__)

PRODUCER_RECONNECT_MS = 3000
RENDERER_RECONNECT_MS = 2000


class _ReconnectingSocket(QObject):
    """Owns a :class:`QWebSocket` and re-opens it after it drops."""

    def __init__(self, url: str, reconnect_ms: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._url = QUrl(url)
        self._reconnect_ms = reconnect_ms
        self._closing = False
        self._socket = QWebSocket()
        self._socket.setParent(self)
        self._socket.connected.connect(self._on_connected)
        self._socket.disconnected.connect(self._on_disconnected)
        self._socket.errorOccurred.connect(self._on_error)

        self._reconnect_timer = QTimer(self)
        self._reconnect_timer.setSingleShot(True)
        self._reconnect_timer.timeout.connect(self.open)

    @property
    def url(self) -> str:
        return self._url.toString()

    def is_connected(self) -> bool:
        return self._socket.state() == QAbstractSocket.SocketState.ConnectedState

    def open(self) -> None:
        if self._socket.state() in (
            QAbstractSocket.SocketState.ConnectedState,
            QAbstractSocket.SocketState.ConnectingState,
        ):
            return
        self._closing = False
        _LOGGER.info("Connecting to %s", self.url)
        self._socket.open(self._url)

    def close(self) -> None:
        self._closing = True
        self._reconnect_timer.stop()
        self._socket.close()

    def _schedule_reconnect(self) -> None:
        if self._closing or self._reconnect_timer.isActive():
            return
        self._reconnect_timer.start(self._reconnect_ms)

    def _on_connected(self) -> None:
        self._reconnect_timer.stop()
        _LOGGER.info("Connected to %s", self.url)

    def _on_disconnected(self) -> None:
        _LOGGER.info("Disconnected from %s", self.url)
        self._schedule_reconnect()

    def _on_error(self, _error: object) -> None:
        _LOGGER.warning("WebSocket error on %s: %s", self.url, self._socket.errorString())
        self._schedule_reconnect()


class SnapshotPublisher(_ReconnectingSocket):
    """Producer-side client sending snapshots to ``/extension``.

    The most recent snapshot is kept and resent whenever the connection is
    (re)established, so a hub that was down still learns the current state
    even though the change filter will not emit it again.
    """

    def __init__(
        self,
        url: str = "ws://localhost:3000/extension",
        reconnect_ms: int = PRODUCER_RECONNECT_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(url, reconnect_ms, parent)
        self._latest: GameSnapshot | None = None

    @property
    def latest(self) -> GameSnapshot | None:
        return self._latest

    def send(self, snapshot: GameSnapshot) -> bool:
        """Send *snapshot*; while disconnected it is held for the next connection."""
        self._latest = snapshot
        if not self.is_connected():
            _LOGGER.debug("Hub not connected, holding snapshot until reconnect")
            self.open()
            return False
        self._socket.sendTextMessage(snapshot.to_json())
        return True

    def _on_connected(self) -> None:
        super()._on_connected()
        if self._latest is not None:
            self._socket.sendTextMessage(self._latest.to_json())


class SnapshotSubscriber(_ReconnectingSocket):
    """Renderer-side client receiving snapshots from the hub."""

    snapshot_received = pyqtSignal(object)
    reconnected = pyqtSignal()

    def __init__(
        self,
        url: str = "ws://localhost:3000/overlay",
        reconnect_ms: int = RENDERER_RECONNECT_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(url, reconnect_ms, parent)
        self._was_connected = False
        self._socket.textMessageReceived.connect(self.handle_message)

    def handle_message(self, text: str) -> GameSnapshot | None:
        try:
            snapshot = GameSnapshot.from_json(text)
        except SnapshotFormatError as exc:
            _LOGGER.warning("Ignoring malformed snapshot from hub: %s", exc)
            return None
        self.snapshot_received.emit(snapshot)
        return snapshot

    def _on_connected(self) -> None:
        super()._on_connected()
        if self._was_connected:
            self.reconnected.emit()
        self._was_connected = True
