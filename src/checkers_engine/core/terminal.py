"""Game-over detection, run once a turn has fully ended."""

from __future__ import annotations

from .board import count_pieces
from .moves import all_moves_for
from .state import GameState, Outcome

DRAW_MOVE_LIMIT = 40  # consecutive moves without capture → draw


def detect_outcome(state: GameState) -> Outcome:
    """Decide whether the game ended after the previous player's turn.

    ``state.current_player`` is the side about to move. If they have no
    pieces or no legal moves, the player who just moved wins. Win
    conditions are checked before the draw counter.
    """
    to_move = state.current_player
    mover = to_move.opponent

    if count_pieces(state.board)[to_move] == 0:
        return Outcome.win_for(mover)

    if not all_moves_for(state.board, to_move):
        return Outcome.win_for(mover)

    if state.moves_since_capture >= DRAW_MOVE_LIMIT:
        return Outcome.DRAW

    return Outcome.IN_PROGRESS
