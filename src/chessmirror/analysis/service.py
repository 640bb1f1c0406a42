"""UCI engine bridge and latest-wins analysis session."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from PyQt6.QtCore import QObject, QProcess, pyqtSignal

from chessmirror.analysis.models import Evaluation
from chessmirror.core.notation import position_string
from chessmirror.core.snapshot import GameSnapshot
from chessmirror.errors import AnalyzerError
from chessmirror.extraction.scheduler import ITimer, QtSingleShotTimer

_LOGGER = logging.getLogger(__name__)


def parse_info_line(line: str) -> Evaluation | None:
    """Parse a UCI ``info`` line carrying a score; other lines give ``None``.

    ``info depth 12 score cp 35 ... pv e2e4 e7e5`` →
    ``Evaluation(score_cp=35, depth=12, pv=("e2e4", "e7e5"))``. Bound
    scores (``lowerbound`` / ``upperbound``) are skipped.
    """
    tokens = line.split()
    if not tokens or tokens[0] != "info":
        return None
    depth = 0
    score_cp: int | None = None
    mate_in: int | None = None
    pv: tuple[str, ...] = ()
    i = 1
    try:
        while i < len(tokens):
            token = tokens[i]
            if token == "depth":
                depth = int(tokens[i + 1])
                i += 2
            elif token == "score":
                kind, value = tokens[i + 1], int(tokens[i + 2])
                i += 3
                if i < len(tokens) and tokens[i] in ("lowerbound", "upperbound"):
                    return None
                if kind == "cp":
                    score_cp = value
                elif kind == "mate":
                    mate_in = value
            elif token == "pv":
                pv = tuple(tokens[i + 1 :])
                break
            elif token == "string":
                break
            else:
                i += 1
    except (IndexError, ValueError):
        return None
    if score_cp is None and mate_in is None:
        return None
    return Evaluation(
        score_cp=score_cp,
        mate_in=mate_in,
        depth=depth,
        best_move=pv[0] if pv else None,
        pv=pv,
    )


def parse_bestmove(line: str) -> str | None:
    tokens = line.split()
    if len(tokens) < 2 or tokens[0] != "bestmove":
        return None
    return None if tokens[1] == "(none)" else tokens[1]


class UciAnalyzer(QObject):
    """Drives an external UCI engine process.

    Only one search runs at a time. A new request while a search is in
    flight sends ``stop``; the superseded search's ``bestmove`` is swallowed
    and the newest pending request starts after it.

    Signals:
        evaluation_ready(int, object): request id and final :class:`Evaluation`.
        analysis_failed(int, str): request id and error text.
    """

    evaluation_ready = pyqtSignal(int, object)
    analysis_failed = pyqtSignal(int, str)

    def __init__(self, engine_path: str, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._engine_path = engine_path
        self._process = QProcess(self)
        self._process.readyReadStandardOutput.connect(self._on_ready_read)
        self._process.finished.connect(self._on_finished)
        self._buffer = ""
        self._is_ready = False
        self._searching_id: int | None = None
        self._latest: Evaluation | None = None
        self._pending: tuple[int, str, int] | None = None

    @property
    def is_running(self) -> bool:
        return self._process.state() != QProcess.ProcessState.NotRunning

    def start(self, timeout_ms: int = 3000) -> None:
        """Launch the engine and complete the UCI handshake."""
        program = shutil.which(self._engine_path) or self._engine_path
        self._process.start(program, [])
        if not self._process.waitForStarted(timeout_ms):
            raise AnalyzerError(
                f"Could not start engine {self._engine_path!r}: {self._process.errorString()}"
            )
        self._send("uci")
        self._send("isready")
        _LOGGER.info("Analyzer started: %s", program)

    def shutdown(self) -> None:
        if not self.is_running:
            return
        self._send("stop")
        self._send("quit")
        if not self._process.waitForFinished(1000):
            self._process.kill()

    def analyze(self, request_id: int, position: str, movetime_ms: int) -> None:
        if not self.is_running:
            self.analysis_failed.emit(request_id, "Analyzer is not running")
            return
        self._pending = (request_id, position, movetime_ms)
        if self._searching_id is not None:
            self._send("stop")
            return
        self._start_pending()

    def _start_pending(self) -> None:
        if self._pending is None or not self._is_ready:
            return
        request_id, position, movetime_ms = self._pending
        self._pending = None
        self._searching_id = request_id
        self._latest = None
        self._send(f"position fen {position}")
        self._send(f"go movetime {movetime_ms}")

    def _send(self, command: str) -> None:
        _LOGGER.debug("uci << %s", command)
        self._process.write((command + "\n").encode())

    def _on_ready_read(self) -> None:
        self._buffer += bytes(self._process.readAllStandardOutput()).decode(errors="replace")
        *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            self.handle_line(line.strip())

    def handle_line(self, line: str) -> None:
        if not line:
            return
        if line == "readyok":
            self._is_ready = True
            self._start_pending()
            return
        if line.startswith("info"):
            evaluation = parse_info_line(line)
            if evaluation is not None and self._searching_id is not None:
                self._latest = evaluation
            return
        if line.startswith("bestmove"):
            finished_id = self._searching_id
            latest = self._latest
            self._searching_id = None
            self._latest = None
            if finished_id is not None and self._pending is None and latest is not None:
                self.evaluation_ready.emit(finished_id, latest.with_best_move(parse_bestmove(line)))
            self._start_pending()

    def _on_finished(self, exit_code: int, _status: object) -> None:
        _LOGGER.warning("Analyzer exited with code %s", exit_code)
        if self._searching_id is not None:
            self.analysis_failed.emit(self._searching_id, "Engine process exited")
        self._searching_id = None
        self._is_ready = False


class AnalysisSession:
    """Fire-and-forget, latest-wins evaluation requests.

    Each request supersedes the previous one. Dispatch is delayed slightly
    so bursts of snapshots collapse into one search, and results carrying a
    stale request id are dropped.
    """

    _REQUEST_DELAY_MS = 50

    __slots__ = (
        "_analyzer",
        "_on_evaluation",
        "_movetime_ms",
        "_dispatch_timer",
        "_request_id",
        "_pending",
    )

    def __init__(
        self,
        *,
        analyzer: UciAnalyzer,
        on_evaluation: Callable[[Evaluation, GameSnapshot], None],
        movetime_ms: int = 500,
        timer: ITimer | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._on_evaluation = on_evaluation
        self._movetime_ms = movetime_ms
        self._dispatch_timer = timer or QtSingleShotTimer()
        self._dispatch_timer.set_callback(self._dispatch)
        self._request_id = 0
        self._pending: GameSnapshot | None = None
        analyzer.evaluation_ready.connect(self.handle_result)
        analyzer.analysis_failed.connect(self._on_failed)

    @property
    def latest_request_id(self) -> int:
        return self._request_id

    def request(self, snapshot: GameSnapshot) -> int:
        """Queue evaluation of *snapshot*; returns its request id."""
        self._request_id += 1
        self._pending = snapshot
        self._dispatch_timer.start(self._REQUEST_DELAY_MS)
        return self._request_id

    def cancel(self) -> None:
        self._dispatch_timer.stop()
        self._pending = None
        self._request_id += 1

    def _dispatch(self) -> None:
        if self._pending is None:
            return
        self._analyzer.analyze(
            self._request_id, position_string(self._pending), self._movetime_ms
        )

    def handle_result(self, request_id: int, evaluation: object) -> None:
        if request_id != self._request_id or self._pending is None:
            return
        if not isinstance(evaluation, Evaluation):
            return
        snapshot = self._pending
        self._pending = None
        self._on_evaluation(evaluation, snapshot)

    def _on_failed(self, request_id: int, message: str) -> None:
        if request_id != self._request_id:
            return
        _LOGGER.warning("Analysis failed: %s", message)
        self._pending = None
