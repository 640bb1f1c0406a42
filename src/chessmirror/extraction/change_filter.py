"""Change filter: decides whether a raw snapshot is worth publishing.

The filter keeps a small amount of state between cycles:

* the canonical serialization of the last emitted snapshot (dedup);
* the *sticky* last move, which survives cycles where the highlight is not
  observable (e.g. while the user hovers or drags a piece);
* the previous raw board, used to detect that a new game has started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from chessmirror.core.notation import STARTING_BOARD, sanitize_board, validate_board
from chessmirror.core.snapshot import GameSnapshot, LastMove

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FilterState:
    last_emitted: str | None = None
    sticky_last_move: LastMove | None = None
    last_raw_board: str | None = None


class ChangeFilter:
    """Suppresses duplicates and applies sticky/new-game rules."""

    __slots__ = ("_state",)

    def __init__(self, previous: FilterState | None = None) -> None:
        self._state = previous or FilterState()

    @property
    def state(self) -> FilterState:
        return self._state

    def reset(self) -> None:
        self._state = FilterState()

    def filter(self, raw: GameSnapshot) -> GameSnapshot | None:
        """Return the snapshot to publish, or ``None`` when nothing changed."""
        state = self._state
        board = raw.board
        if not validate_board(board):
            board = sanitize_board(board)

        is_new_game = board == STARTING_BOARD and state.last_raw_board != STARTING_BOARD
        if is_new_game:
            # The start position has no last move; stale highlights from the
            # previous game are ignored too.
            sticky = None
            _LOGGER.info("New game detected")
        elif raw.last_move is not None:
            sticky = raw.last_move
        else:
            sticky = state.sticky_last_move

        candidate = raw.evolve(board=board, last_move=sticky, is_new_game=is_new_game)
        serialized = candidate.to_json()
        changed = serialized != state.last_emitted
        self._state = replace(
            state,
            last_emitted=serialized if changed else state.last_emitted,
            sticky_last_move=sticky,
            last_raw_board=board,
        )
        if not changed:
            return None
        _LOGGER.debug("Snapshot changed (%d bytes)", len(serialized))
        return candidate
