"""Tests for UCI parsing, the engine bridge and latest-wins analysis."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from chessmirror.analysis.models import Evaluation
from chessmirror.analysis.service import (
    AnalysisSession,
    UciAnalyzer,
    parse_bestmove,
    parse_info_line,
)
from chessmirror.core.enums import Color
from chessmirror.core.notation import STARTING_BOARD, position_string
from chessmirror.core.snapshot import GameSnapshot

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"


class TestParsing:
    def test_centipawn_info(self) -> None:
        evaluation = parse_info_line(
            "info depth 12 seldepth 18 multipv 1 score cp 35 nodes 1000 pv e2e4 e7e5"
        )
        assert evaluation == Evaluation(
            score_cp=35, depth=12, best_move="e2e4", pv=("e2e4", "e7e5")
        )

    def test_mate_info(self) -> None:
        evaluation = parse_info_line("info depth 20 score mate -2 pv f2f3")
        assert evaluation is not None
        assert evaluation.is_mate
        assert evaluation.mate_in == -2

    @pytest.mark.parametrize(
        "line",
        [
            "info depth 5 currmove e2e4 currmovenumber 1",
            "info depth 9 score cp 10 lowerbound pv e2e4",
            "info string NNUE evaluation enabled",
            "info depth x score cp 10",
            "bestmove e2e4",
            "",
        ],
    )
    def test_lines_without_usable_score(self, line: str) -> None:
        assert parse_info_line(line) is None

    def test_parse_bestmove(self) -> None:
        assert parse_bestmove("bestmove e2e4 ponder e7e5") == "e2e4"
        assert parse_bestmove("bestmove (none)") is None
        assert parse_bestmove("readyok") is None


class TestEvaluation:
    def test_labels(self) -> None:
        assert Evaluation(score_cp=35).label() == "+0.35"
        assert Evaluation(score_cp=-120).label() == "-1.20"
        assert Evaluation(mate_in=3).label() == "M3"
        assert Evaluation(mate_in=-2).label() == "-M2"

    def test_for_white_flips_black_to_move(self) -> None:
        evaluation = Evaluation(score_cp=50, depth=10)
        assert evaluation.for_white(Color.WHITE) is evaluation
        assert evaluation.for_white(Color.BLACK).score_cp == -50
        assert Evaluation(mate_in=2).for_white(Color.BLACK).mate_in == -2


# ── Engine bridge ────────────────────────────────────────────────────────────


@pytest.fixture
def analyzer(qapp: Any, monkeypatch: pytest.MonkeyPatch) -> UciAnalyzer:
    monkeypatch.setattr(UciAnalyzer, "is_running", property(lambda _self: True))
    analyzer = UciAnalyzer("stub-engine")
    analyzer.sent = []  # type: ignore[attr-defined]
    analyzer._send = analyzer.sent.append  # type: ignore[attr-defined,method-assign]
    analyzer.handle_line("readyok")
    return analyzer


def test_analyze_sends_position_and_go(analyzer: UciAnalyzer) -> None:
    analyzer.analyze(1, "8/8/8/8/8/8/8/8 w - - 0 1", 200)
    assert analyzer.sent == [  # type: ignore[attr-defined]
        "position fen 8/8/8/8/8/8/8/8 w - - 0 1",
        "go movetime 200",
    ]


def test_final_info_is_reported_with_bestmove(analyzer: UciAnalyzer) -> None:
    results: list[tuple[int, object]] = []
    analyzer.evaluation_ready.connect(lambda rid, ev: results.append((rid, ev)))

    analyzer.analyze(1, "pos", 100)
    analyzer.handle_line("info depth 1 score cp 10 pv d2d4")
    analyzer.handle_line("info depth 2 score cp 25 pv e2e4 e7e5")
    analyzer.handle_line("bestmove e2e4 ponder e7e5")

    assert results == [
        (1, Evaluation(score_cp=25, depth=2, best_move="e2e4", pv=("e2e4", "e7e5")))
    ]


def test_superseded_search_is_stopped_and_swallowed(analyzer: UciAnalyzer) -> None:
    results: list[int] = []
    analyzer.evaluation_ready.connect(lambda rid, _ev: results.append(rid))

    analyzer.analyze(1, "first", 100)
    analyzer.handle_line("info depth 3 score cp 5 pv a2a3")
    analyzer.analyze(2, "second", 100)
    assert analyzer.sent[-1] == "stop"  # type: ignore[attr-defined]

    analyzer.handle_line("bestmove a2a3")
    assert results == []
    assert analyzer.sent[-2:] == ["position fen second", "go movetime 100"]  # type: ignore[attr-defined]

    analyzer.handle_line("info depth 4 score mate 1 pv d1h5")
    analyzer.handle_line("bestmove d1h5")
    assert results == [2]


def test_engine_exit_fails_running_search(analyzer: UciAnalyzer) -> None:
    failures: list[tuple[int, str]] = []
    analyzer.analysis_failed.connect(lambda rid, msg: failures.append((rid, msg)))

    analyzer.analyze(7, "pos", 100)
    analyzer._on_finished(1, None)

    assert failures == [(7, "Engine process exited")]


def test_start_failure_raises(qapp: Any) -> None:
    from chessmirror.errors import AnalyzerError

    analyzer = UciAnalyzer("/nonexistent/engine-binary")
    with pytest.raises(AnalyzerError):
        analyzer.start(timeout_ms=500)


# ── Latest-wins session ──────────────────────────────────────────────────────


class _Signal:
    def __init__(self) -> None:
        self.slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        self.slots.append(slot)


class _FakeAnalyzer:
    def __init__(self) -> None:
        self.evaluation_ready = _Signal()
        self.analysis_failed = _Signal()
        self.requests: list[tuple[int, str, int]] = []

    def analyze(self, request_id: int, position: str, movetime_ms: int) -> None:
        self.requests.append((request_id, position, movetime_ms))


@pytest.fixture
def fake_analyzer() -> _FakeAnalyzer:
    return _FakeAnalyzer()


def _session(
    analyzer: _FakeAnalyzer, timer: Any, received: list[tuple[Evaluation, GameSnapshot]]
) -> AnalysisSession:
    return AnalysisSession(
        analyzer=analyzer,  # type: ignore[arg-type]
        on_evaluation=lambda ev, snap: received.append((ev, snap)),
        movetime_ms=300,
        timer=timer,
    )


def test_burst_of_requests_dispatches_latest_only(
    fake_analyzer: _FakeAnalyzer, fake_timer: Any
) -> None:
    received: list[tuple[Evaluation, GameSnapshot]] = []
    session = _session(fake_analyzer, fake_timer, received)

    first = GameSnapshot(board=STARTING_BOARD)
    second = GameSnapshot(board=AFTER_E4, turn=Color.BLACK)
    assert session.request(first) == 1
    assert session.request(second) == 2
    fake_timer.fire()

    assert fake_analyzer.requests == [(2, position_string(second), 300)]


def test_stale_results_are_ignored(fake_analyzer: _FakeAnalyzer, fake_timer: Any) -> None:
    received: list[tuple[Evaluation, GameSnapshot]] = []
    session = _session(fake_analyzer, fake_timer, received)
    snapshot = GameSnapshot(board=AFTER_E4)

    session.request(GameSnapshot(board=STARTING_BOARD))
    session.request(snapshot)
    fake_timer.fire()

    session.handle_result(1, Evaluation(score_cp=1))
    assert received == []

    evaluation = Evaluation(score_cp=30, depth=9)
    session.handle_result(2, evaluation)
    assert received == [(evaluation, snapshot)]

    session.handle_result(2, evaluation)
    assert len(received) == 1


def test_cancel_drops_pending_request(fake_analyzer: _FakeAnalyzer, fake_timer: Any) -> None:
    received: list[tuple[Evaluation, GameSnapshot]] = []
    session = _session(fake_analyzer, fake_timer, received)

    request_id = session.request(GameSnapshot(board=STARTING_BOARD))
    session.cancel()
    session.handle_result(request_id, Evaluation(score_cp=0))

    assert not fake_timer.is_active()
    assert fake_analyzer.requests == []
    assert received == []


def test_session_connects_to_analyzer_signals(fake_analyzer: _FakeAnalyzer, fake_timer: Any) -> None:
    session = _session(fake_analyzer, fake_timer, [])
    assert session.handle_result in fake_analyzer.evaluation_ready.slots
    assert len(fake_analyzer.analysis_failed.slots) == 1
