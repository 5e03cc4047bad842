"""GameState — the single value threaded through every core operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .board import (
    Board,
    Player,
    Position,
    board_from_snapshot,
    board_to_snapshot,
    create_initial_board,
)
from .moves import all_jumps_for


class Outcome(Enum):
    IN_PROGRESS = "in_progress"
    PLAYER_ONE_WINS = "player_one_wins"
    PLAYER_TWO_WINS = "player_two_wins"
    DRAW = "draw"

    @classmethod
    def win_for(cls, player: Player) -> Outcome:
        return cls.PLAYER_ONE_WINS if player is Player.ONE else cls.PLAYER_TWO_WINS

    @property
    def winner(self) -> Player | None:
        if self is Outcome.PLAYER_ONE_WINS:
            return Player.ONE
        if self is Outcome.PLAYER_TWO_WINS:
            return Player.TWO
        return None

    @property
    def is_over(self) -> bool:
        return self is not Outcome.IN_PROGRESS


class TurnPhase(Enum):
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_DESTINATION = "awaiting_destination"
    MULTI_JUMP_CONTINUATION = "multi_jump_continuation"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """Board plus turn bookkeeping.

    Treated as a value: the turn controller returns a new instance for
    every applied move and never mutates one it was handed.
    """

    board: Board
    current_player: Player = Player.ONE
    moves_since_capture: int = 0
    mandatory_jumps: tuple[Position, ...] = ()
    multi_jump_chain: Position | None = None
    result: Outcome = Outcome.IN_PROGRESS

    @property
    def phase(self) -> TurnPhase:
        if self.result.is_over:
            return TurnPhase.GAME_OVER
        if self.multi_jump_chain is not None:
            return TurnPhase.MULTI_JUMP_CONTINUATION
        return TurnPhase.AWAITING_SELECTION

    @classmethod
    def initial(cls) -> GameState:
        return cls(board=create_initial_board())

    def to_snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of the state."""
        return {
            "board": board_to_snapshot(self.board),
            "current_player": self.current_player.value,
            "moves_since_capture": self.moves_since_capture,
            "mandatory_jumps": [list(p) for p in self.mandatory_jumps],
            "multi_jump_chain": (
                list(self.multi_jump_chain) if self.multi_jump_chain else None
            ),
            "result": self.result.value,
        }

    @classmethod
    def from_snapshot(cls, snap: dict) -> GameState:
        """Rebuild a state; mandatory jumps are recomputed from the board."""
        chain = snap.get("multi_jump_chain")
        board = board_from_snapshot(snap["board"])
        player = Player(snap["current_player"])
        return cls(
            board=board,
            current_player=player,
            moves_since_capture=snap.get("moves_since_capture", 0),
            mandatory_jumps=tuple(pos for pos, _ in all_jumps_for(board, player)),
            multi_jump_chain=(chain[0], chain[1]) if chain else None,
            result=Outcome(snap.get("result", Outcome.IN_PROGRESS.value)),
        )
