"""GameSession — click-driven play on top of the rules API.

Owns everything the rules core deliberately does not: the selected
square, the message banner, the computer opponent toggle and its pacing,
restarts, and the per-game telemetry log. All rule decisions are
delegated to ``checkers_engine.core.game``.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from checkers_engine.config import GameConfig
from checkers_engine.core.board import Player, Position, count_pieces, owner_of
from checkers_engine.core.game import (
    MoveError,
    MoveResult,
    apply_move,
    legal_moves,
    mandatory_jumps,
    new_game,
)
from checkers_engine.core.moves import Jump, Move
from checkers_engine.core.seed import SeedManager
from checkers_engine.core.state import GameState, Outcome, TurnPhase
from checkers_engine.core.telemetry import GameLogger, MoveRecord
from checkers_engine.core.terminal import DRAW_MOVE_LIMIT
from checkers_engine.policy import RandomPolicy

logger = logging.getLogger(__name__)

INSTRUCTIONS = """\
How to play
  Player 1 (x) starts at the bottom and moves up; Player 2 (o) moves down.
  Men move one square diagonally forward. Kings (X, O) move in all four
  diagonal directions. Reach the far row to become a king.
  Jump over an adjacent opponent piece onto an empty square to capture it.
  If any of your pieces can jump, you must jump. After a jump, the same
  piece must keep jumping while it can.
  You win when your opponent has no pieces or no legal moves.
  {limit} moves in a row without a capture is a draw.

Commands
  r,c            select a piece, or pick a highlighted destination
  r,c r,c        move directly from one square to another
  reset          start a new game
  ai             toggle the computer opponent
  help           show these instructions
  quit           leave the game
""".format(limit=DRAW_MOVE_LIMIT)


class GameSession:
    """One interactive game at a time, with restart support."""

    def __init__(
        self,
        config: GameConfig | None = None,
        policy: RandomPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config or GameConfig()
        self._fixed_policy = policy
        self._sleep = sleep
        self._seeds = (
            SeedManager(self._config.seed) if self._config.seed is not None else None
        )
        self.ai_enabled = self._config.ai_enabled
        self.ai_player = self._config.ai_player

        self._game_number = 0
        self._state: GameState = new_game()
        self._selected: Position | None = None
        self._message = ""
        self._turn_number = 0
        self._policy: RandomPolicy = RandomPolicy()
        self._telemetry: GameLogger | None = None
        self.reset()

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def selected(self) -> Position | None:
        return self._selected

    @property
    def message(self) -> str:
        return self._message

    @property
    def game_number(self) -> int:
        return self._game_number

    @property
    def turn_number(self) -> int:
        return self._turn_number

    @property
    def policy(self) -> RandomPolicy:
        return self._policy

    @property
    def telemetry(self) -> GameLogger | None:
        return self._telemetry

    @property
    def phase(self) -> TurnPhase:
        phase = self._state.phase
        if phase is TurnPhase.AWAITING_SELECTION and self._selected is not None:
            return TurnPhase.AWAITING_DESTINATION
        return phase

    def highlights(self) -> list[Position]:
        """Destinations to highlight for the selected (or chain) piece."""
        origin = self._state.multi_jump_chain or self._selected
        if origin is None:
            return []
        return [m.to for m in legal_moves(self._state, origin)]

    def is_ai_turn(self) -> bool:
        return (
            self.ai_enabled
            and not self._state.result.is_over
            and self._state.current_player is self.ai_player
        )

    def result_message(self) -> str:
        result = self._state.result
        if result is Outcome.DRAW:
            return f"Game drawn - {DRAW_MOVE_LIMIT} moves without capture!"
        if result.winner is not None:
            return f"{result.winner.label} wins!"
        return ""

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Start a fresh game from the standard layout."""
        self._game_number += 1
        self._state = new_game()
        self._selected = None
        self._message = ""
        self._turn_number = 0

        if self._fixed_policy is not None:
            self._policy = self._fixed_policy
        elif self._seeds is not None:
            self._policy = RandomPolicy(self._seeds.rng_for_game(self._game_number))
        else:
            self._policy = RandomPolicy()

        self._telemetry = None
        if self._config.output_dir is not None:
            game_id = f"checkers-{self._game_number:03d}-{uuid.uuid4().hex[:8]}"
            self._telemetry = GameLogger(self._config.output_dir, game_id)

    def toggle_ai(self) -> bool:
        self.ai_enabled = not self.ai_enabled
        return self.ai_enabled

    def click(self, pos: Position) -> bool:
        """Handle a click on *pos*. Returns True if a move was made."""
        if self._state.result.is_over:
            self._message = "The game is over. Type 'reset' to play again."
            return False
        if self.is_ai_turn():
            self._message = "Wait for the computer to move."
            return False

        chain = self._state.multi_jump_chain
        if chain is not None:
            if pos in self.highlights():
                return self._play(chain, pos, actor="human").legal
            self._message = (
                "You must complete the multi-jump! Click a highlighted square."
            )
            return False

        if self._selected is None:
            self._select(pos)
            return False

        if pos in self.highlights():
            return self._play(self._selected, pos, actor="human").legal

        if owner_of(self._state.board, pos) is self._state.current_player:
            self._selected = None
            self._select(pos)
        else:
            self._selected = None
            self._message = ""
        return False

    def move(self, fr: Position, to: Position) -> MoveResult:
        """Offer a full move, bypassing the click selection flow."""
        if self.is_ai_turn():
            self._message = "Wait for the computer to move."
            return MoveResult(
                legal=False,
                state=self._state,
                error=MoveError.NOT_YOUR_TURN,
                reason=self._message,
            )
        return self._play(fr, to, actor="human")

    def play_ai_turn(self) -> list[Move]:
        """Let the computer move until the turn passes (chains included)."""
        played: list[Move] = []
        while self.is_ai_turn():
            self._sleep(self._config.ai_move_delay_s)
            choice = self._policy.choose(self._state)
            if choice is None:
                break
            result = self._play(choice.fr, choice.to, actor="ai")
            if not result.legal:
                # Policy only draws from the legal set
                raise RuntimeError(f"Policy chose an illegal move: {choice}")
            played.append(choice)
        return played

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _select(self, pos: Position) -> bool:
        self._message = ""
        owner = owner_of(self._state.board, pos)
        current = self._state.current_player
        if owner is None:
            self._message = "That square is empty. Please select one of your pieces."
            return False
        if owner is not current:
            self._message = f"That's {owner.label}'s piece. Select your own piece."
            return False
        required = mandatory_jumps(self._state)
        if required and pos not in required:
            self._message = "You must make a jump! Select a piece that can jump."
            return False
        self._selected = pos
        return True

    def _play(self, fr: Position, to: Position, actor: str) -> MoveResult:
        mover = self._state.current_player
        result = apply_move(self._state, fr, to)
        if not result.legal:
            self._message = result.reason or ""
            return result

        self._state = result.state
        self._turn_number += 1
        self._selected = self._state.multi_jump_chain
        self._message = ""
        self._record(mover, actor, result)

        if self._state.result.is_over:
            self._message = self.result_message()
            logger.info("Game %d finished: %s", self._game_number, self._message)
            self._finalize()
        return result

    def _record(self, mover: Player, actor: str, result: MoveResult) -> None:
        if self._telemetry is None:
            return
        move = result.move
        captured = list(move.captured) if isinstance(move, Jump) else None
        self._telemetry.log_move(
            MoveRecord(
                turn_number=self._turn_number,
                player=mover.value,
                actor=actor,
                from_square=list(move.fr),
                to_square=list(move.to),
                captured=captured,
                chain_continues=self._state.multi_jump_chain is not None,
                moves_since_capture=self._state.moves_since_capture,
                state_snapshot=self._state.to_snapshot(),
            )
        )

    def _finalize(self) -> None:
        if self._telemetry is None:
            return
        logger.info("Writing summary for %s", self._telemetry.game_id)
        pieces = count_pieces(self._state.board)
        self._telemetry.finalize_game(
            outcome=self._state.result.value,
            pieces_remaining={p.label: n for p, n in pieces.items()},
            total_turns=self._turn_number,
            extra={"seed": self._config.seed, "game_number": self._game_number},
        )
