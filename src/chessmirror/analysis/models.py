"""Data models produced by the auxiliary analyzer."""

from __future__ import annotations

from dataclasses import dataclass

from chessmirror.core.enums import Color


@dataclass(slots=True, frozen=True)
class Evaluation:
    """Engine verdict for one position, from the side to move's view.

    Exactly one of ``score_cp`` / ``mate_in`` is set.
    """

    score_cp: int | None = None
    mate_in: int | None = None
    depth: int = 0
    best_move: str | None = None
    pv: tuple[str, ...] = ()

    @property
    def is_mate(self) -> bool:
        return self.mate_in is not None

    def for_white(self, side_to_move: Color) -> Evaluation:
        """Same evaluation expressed from White's point of view."""
        if side_to_move is Color.WHITE:
            return self
        return Evaluation(
            score_cp=-self.score_cp if self.score_cp is not None else None,
            mate_in=-self.mate_in if self.mate_in is not None else None,
            depth=self.depth,
            best_move=self.best_move,
            pv=self.pv,
        )

    def label(self) -> str:
        """Short display text: ``+0.35``, ``-1.20``, ``M3``, ``-M2``."""
        if self.mate_in is not None:
            return f"M{self.mate_in}" if self.mate_in > 0 else f"-M{abs(self.mate_in)}"
        cp = self.score_cp or 0
        return f"{cp / 100:+.2f}"

    def with_best_move(self, best_move: str | None) -> Evaluation:
        return Evaluation(self.score_cp, self.mate_in, self.depth, best_move, self.pv)
