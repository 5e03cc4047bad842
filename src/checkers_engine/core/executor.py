"""Move execution — relocation, capture, promotion, and the draw counter.

Pure board + counter transition: knows nothing about turns or chains.
"""

from __future__ import annotations

from dataclasses import replace

from .board import Cell, copy_board, in_bounds
from .moves import Jump, Move
from .state import GameState


def _check_geometry(move: Move) -> None:
    for pos in (move.fr, move.to):
        if not in_bounds(pos):
            raise ValueError(f"Position {pos} is off the board")
    dr = move.to[0] - move.fr[0]
    dc = move.to[1] - move.fr[1]
    step = 2 if isinstance(move, Jump) else 1
    if abs(dr) != step or abs(dc) != step:
        raise ValueError(f"{move} is not a {step}-square diagonal move")
    if isinstance(move, Jump):
        midpoint = (move.fr[0] + dr // 2, move.fr[1] + dc // 2)
        if move.captured != midpoint:
            raise ValueError(
                f"Captured square {move.captured} is not the midpoint {midpoint}"
            )


def execute_move(state: GameState, move: Move) -> GameState:
    """Apply *move* and return a new state. Handles captures and promotion."""
    _check_geometry(move)
    piece = state.board[move.fr[0]][move.fr[1]]
    if piece is Cell.EMPTY:
        raise ValueError(f"No piece at {move.fr}")

    board = copy_board(state.board)
    board[move.fr[0]][move.fr[1]] = Cell.EMPTY

    if isinstance(move, Jump):
        board[move.captured[0]][move.captured[1]] = Cell.EMPTY
        moves_since_capture = 0
    else:
        moves_since_capture = state.moves_since_capture + 1

    # King promotion, judged on the destination square
    dest_r, dest_c = move.to
    if not piece.is_king and dest_r == piece.owner.promotion_row:
        piece = piece.promoted()

    board[dest_r][dest_c] = piece
    return replace(state, board=board, moves_since_capture=moves_since_capture)
