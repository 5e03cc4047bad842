"""Computer opponent — uniform random choice over legal moves.

No evaluation: every legal move (including the continuation of a pending
multi-jump) is equally likely. The RNG is injected so games replay
exactly under a fixed seed.
"""

from __future__ import annotations

import random
from typing import Any

from checkers_engine.core.game import legal_moves_for_player
from checkers_engine.core.moves import Move
from checkers_engine.core.state import GameState


class RandomPolicy:
    """Pick uniformly from ``legal_moves_for_player``.

    *rng* is anything with a ``choice(seq)`` method; defaults to an
    unseeded ``random.Random``.
    """

    def __init__(self, rng: Any | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def choose(self, state: GameState) -> Move | None:
        if state.result.is_over:
            return None
        moves = legal_moves_for_player(state, state.current_player)
        if not moves:
            return None
        return self._rng.choice(moves)
