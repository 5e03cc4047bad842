"""Turn controller — the public rules API.

Sequences every player action as:
    validate against the legal move set -> execute -> either continue a
    multi-jump chain with the same piece, or pass the turn and check
    for game over.

Two tiers of mandatory capture are enforced:
- if any piece of the player to move can jump, only jump-capable pieces
  may move, and only by jumping;
- once a jump lands where the same piece can jump again, that piece must
  keep jumping until the chain is exhausted.

Nothing here mutates a GameState it was given; every accepted move
produces a new one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .board import Player, Position, in_bounds, owner_of, render_board
from .executor import execute_move
from .moves import Jump, Move, all_jumps_for, all_moves_for, jumps_from, moves_from
from .state import GameState, Outcome
from .terminal import detect_outcome

__all__ = [
    "MoveError",
    "MoveResult",
    "apply_move",
    "is_game_over",
    "legal_moves",
    "legal_moves_for_player",
    "mandatory_jumps",
    "new_game",
]

logger = logging.getLogger(__name__)


class MoveError(Enum):
    GAME_OVER = "game_over"
    EMPTY_SQUARE = "empty_square"
    OPPONENT_PIECE = "opponent_piece"
    JUMP_REQUIRED = "jump_required"
    CHAIN_IN_PROGRESS = "chain_in_progress"
    ILLEGAL_DESTINATION = "illegal_destination"
    NOT_YOUR_TURN = "not_your_turn"


@dataclass(frozen=True)
class MoveResult:
    """Result of offering a move to the turn controller."""

    legal: bool
    state: GameState
    move: Move | None = None
    error: MoveError | None = None
    reason: str | None = None


def mandatory_jumps(state: GameState) -> tuple[Position, ...]:
    """Squares of the player to move whose piece can capture, read from the board."""
    return tuple(pos for pos, _ in all_jumps_for(state.board, state.current_player))


def new_game() -> GameState:
    """Return the standard starting position with Player 1 to move."""
    state = GameState.initial()
    return replace(state, mandatory_jumps=mandatory_jumps(state))


def _check_bounds(*positions: Position) -> None:
    for pos in positions:
        if not in_bounds(pos):
            raise ValueError(f"Position {pos} is off the board")


def legal_moves(state: GameState, pos: Position) -> list[Move]:
    """Moves the piece at *pos* may make right now.

    Empty when the square does not hold a piece of the player to move,
    when another piece is mid-chain, or when the global mandatory-jump
    rule excludes this piece.
    """
    _check_bounds(pos)
    if state.result.is_over:
        return []
    if state.multi_jump_chain is not None:
        if pos != state.multi_jump_chain:
            return []
        return list(jumps_from(state.board, pos))
    if owner_of(state.board, pos) is not state.current_player:
        return []
    required = mandatory_jumps(state)
    if required and pos not in required:
        return []
    return moves_from(state.board, pos)


def legal_moves_for_player(state: GameState, player: Player) -> list[Move]:
    """Every legal move for *player*, in board-scan then direction order.

    While a chain is pending for *player*, only the chain piece's jumps
    are returned.
    """
    if state.multi_jump_chain is not None and player is state.current_player:
        return list(jumps_from(state.board, state.multi_jump_chain))
    return all_moves_for(state.board, player)


def is_game_over(state: GameState) -> Outcome:
    """Result recorded when the last turn completed.

    A position built by hand is not re-judged; run
    ``terminal.detect_outcome`` on it for that.
    """
    return state.result


def _reject(state: GameState, error: MoveError, reason: str) -> MoveResult:
    logger.debug("Rejected move for %s: %s", state.current_player.label, reason)
    return MoveResult(legal=False, state=state, error=error, reason=reason)


def _classify(state: GameState, fr: Position, to: Position) -> MoveResult | Move:
    """Return the matching legal move, or a rejection explaining why not."""
    if state.result.is_over:
        return _reject(state, MoveError.GAME_OVER, "The game is over.")

    chain = state.multi_jump_chain
    if chain is not None and fr != chain:
        return _reject(
            state,
            MoveError.CHAIN_IN_PROGRESS,
            f"You must complete the multi-jump with the piece at {list(chain)}.",
        )

    owner = owner_of(state.board, fr)
    if owner is None:
        return _reject(
            state,
            MoveError.EMPTY_SQUARE,
            "That square is empty. Please select one of your pieces.",
        )
    if owner is not state.current_player:
        return _reject(
            state,
            MoveError.OPPONENT_PIECE,
            f"That's {owner.label}'s piece. Select your own piece.",
        )
    required = mandatory_jumps(state) if chain is None else ()
    if required and fr not in required:
        return _reject(
            state,
            MoveError.JUMP_REQUIRED,
            "You must make a jump! Select a piece that can jump.",
        )

    for move in legal_moves(state, fr):
        if move.to == to:
            return move
    return _reject(
        state,
        MoveError.ILLEGAL_DESTINATION,
        f"No legal move from {list(fr)} to {list(to)}.",
    )


def apply_move(state: GameState, fr: Position, to: Position) -> MoveResult:
    """Validate and apply a move from *fr* to *to*.

    Caller mistakes come back as a rejected MoveResult carrying the
    original state. Off-board coordinates raise ValueError.
    """
    _check_bounds(fr, to)
    classified = _classify(state, fr, to)
    if isinstance(classified, MoveResult):
        return classified
    move = classified

    after = execute_move(state, move)

    # Promotion has already happened, so king directions apply here
    if isinstance(move, Jump) and jumps_from(after.board, move.to):
        after = replace(after, multi_jump_chain=move.to)
        after = replace(after, mandatory_jumps=mandatory_jumps(after))
        return MoveResult(legal=True, state=after, move=move)

    after = replace(
        after,
        current_player=state.current_player.opponent,
        multi_jump_chain=None,
    )
    after = replace(after, mandatory_jumps=mandatory_jumps(after))

    result = detect_outcome(after)
    if result.is_over:
        logger.info("Game over: %s", result.value)
        logger.debug("Final position:\n%s", render_board(after.board))
        after = replace(after, result=result)
    return MoveResult(legal=True, state=after, move=move)
