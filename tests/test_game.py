"""Tests for the turn controller and the public rules API."""

import json
import random

import pytest
from checkers_engine.core.board import (
    Cell,
    Player,
    count_pieces,
    empty_board,
)
from checkers_engine.core.game import (
    MoveError,
    apply_move,
    is_game_over,
    legal_moves,
    legal_moves_for_player,
    mandatory_jumps,
    new_game,
)
from checkers_engine.core.moves import Jump, SimpleMove, all_jumps_for
from checkers_engine.core.state import GameState, Outcome, TurnPhase


def _state(board, player=Player.ONE, moves_since_capture=0) -> GameState:
    """Build a mid-game state the way the controller would at turn start."""
    jumps = tuple(pos for pos, _ in all_jumps_for(board, player))
    return GameState(
        board=board,
        current_player=player,
        moves_since_capture=moves_since_capture,
        mandatory_jumps=jumps,
    )


def _total_pieces(state: GameState) -> int:
    return sum(count_pieces(state.board).values())


# ------------------------------------------------------------------
# New game
# ------------------------------------------------------------------

class TestNewGame:
    def test_initial_state(self):
        state = new_game()
        assert state.current_player is Player.ONE
        assert state.moves_since_capture == 0
        assert state.mandatory_jumps == ()
        assert state.multi_jump_chain is None
        assert is_game_over(state) is Outcome.IN_PROGRESS
        assert state.phase is TurnPhase.AWAITING_SELECTION

    def test_opening_moves_for_player_one(self):
        moves = legal_moves_for_player(new_game(), Player.ONE)
        assert len(moves) == 7
        assert all(isinstance(m, SimpleMove) for m in moves)
        assert {m.fr for m in moves} == {(5, 0), (5, 2), (5, 4), (5, 6)}

    def test_new_games_are_independent(self):
        a = new_game()
        b = new_game()
        a.board[4][1] = Cell.PLAYER_1
        assert b.board[4][1] is Cell.EMPTY


# ------------------------------------------------------------------
# legal_moves
# ------------------------------------------------------------------

class TestLegalMoves:
    def test_own_piece(self):
        assert legal_moves(new_game(), (5, 0)) == [SimpleMove((5, 0), (4, 1))]

    def test_empty_square(self):
        assert legal_moves(new_game(), (4, 1)) == []

    def test_opponent_piece(self):
        assert legal_moves(new_game(), (2, 1)) == []

    def test_blocked_piece(self):
        assert legal_moves(new_game(), (7, 0)) == []

    def test_single_jump_offered(self):
        board = empty_board()
        board[3][4] = Cell.PLAYER_1
        board[2][3] = Cell.PLAYER_2
        state = _state(board)
        assert legal_moves(state, (3, 4)) == [Jump((3, 4), (1, 2), (2, 3))]

    def test_off_board_raises(self):
        with pytest.raises(ValueError):
            legal_moves(new_game(), (-1, 2))


# ------------------------------------------------------------------
# Basic turn flow
# ------------------------------------------------------------------

class TestApplyMove:
    def test_simple_move_passes_turn(self):
        result = apply_move(new_game(), (5, 0), (4, 1))
        assert result.legal is True
        assert result.move == SimpleMove((5, 0), (4, 1))
        assert result.state.current_player is Player.TWO
        assert result.state.moves_since_capture == 1
        assert result.state.board[4][1] is Cell.PLAYER_1
        assert result.state.board[5][0] is Cell.EMPTY

    def test_accepted_move_leaves_input_untouched(self):
        state = new_game()
        before = state.to_snapshot()
        apply_move(state, (5, 0), (4, 1))
        assert state.to_snapshot() == before

    def test_turns_alternate(self):
        state = apply_move(new_game(), (5, 0), (4, 1)).state
        result = apply_move(state, (2, 1), (3, 2))
        assert result.legal is True
        assert result.state.current_player is Player.ONE

    def test_off_board_raises(self):
        with pytest.raises(ValueError):
            apply_move(new_game(), (5, 0), (4, -1))


# ------------------------------------------------------------------
# Rejections
# ------------------------------------------------------------------

class TestRejections:
    def _assert_rejected(self, state, fr, to, error):
        before = state.to_snapshot()
        result = apply_move(state, fr, to)
        assert result.legal is False
        assert result.error is error
        assert result.reason
        assert result.state is state
        assert state.to_snapshot() == before
        return result

    def test_empty_square(self):
        self._assert_rejected(new_game(), (4, 1), (3, 2), MoveError.EMPTY_SQUARE)

    def test_opponent_piece(self):
        result = self._assert_rejected(
            new_game(), (2, 1), (3, 0), MoveError.OPPONENT_PIECE
        )
        assert "Player 2" in result.reason

    def test_illegal_destination(self):
        self._assert_rejected(
            new_game(), (5, 0), (3, 2), MoveError.ILLEGAL_DESTINATION
        )

    def test_backward_move_by_man(self):
        state = apply_move(new_game(), (5, 0), (4, 1)).state
        state = apply_move(state, (2, 1), (3, 0)).state
        self._assert_rejected(state, (4, 1), (5, 0), MoveError.ILLEGAL_DESTINATION)

    def test_game_over(self):
        board = empty_board()
        board[4][3] = Cell.PLAYER_1
        state = GameState(board=board, result=Outcome.PLAYER_ONE_WINS)
        self._assert_rejected(state, (4, 3), (3, 2), MoveError.GAME_OVER)


# ------------------------------------------------------------------
# Tier 1: any jump on the board forbids every simple move
# ------------------------------------------------------------------

class TestGlobalMandatoryJump:
    @pytest.fixture
    def state(self):
        board = empty_board()
        board[5][4] = Cell.PLAYER_1  # can jump (4,3)
        board[4][3] = Cell.PLAYER_2
        board[5][0] = Cell.PLAYER_1  # no jump of its own
        board[0][7] = Cell.PLAYER_2
        return _state(board)

    def test_mandatory_jumps_recorded(self, state):
        assert state.mandatory_jumps == ((5, 4),)

    def test_player_moves_are_jumps_only(self, state):
        moves = legal_moves_for_player(state, Player.ONE)
        assert moves == [Jump((5, 4), (3, 2), (4, 3))]

    def test_other_piece_has_no_legal_moves(self, state):
        assert legal_moves(state, (5, 0)) == []

    def test_other_piece_rejected(self, state):
        result = apply_move(state, (5, 0), (4, 1))
        assert result.legal is False
        assert result.error is MoveError.JUMP_REQUIRED
        assert "must make a jump" in result.reason

    def test_simple_move_by_jumper_rejected(self, state):
        result = apply_move(state, (5, 4), (4, 5))
        assert result.legal is False
        assert result.error is MoveError.ILLEGAL_DESTINATION

    def test_jump_accepted(self, state):
        result = apply_move(state, (5, 4), (3, 2))
        assert result.legal is True
        assert result.move == Jump((5, 4), (3, 2), (4, 3))
        assert result.state.board[4][3] is Cell.EMPTY
        assert result.state.current_player is Player.TWO

    def test_mandatory_jumps_recomputed_for_next_player(self):
        board = empty_board()
        board[5][2] = Cell.PLAYER_1
        board[2][3] = Cell.PLAYER_2
        state = _state(board)
        result = apply_move(state, (5, 2), (4, 3))
        assert result.state.current_player is Player.TWO
        assert result.state.mandatory_jumps == ()
        # Player 2 steps in front of the man and hands Player 1 a jump
        result = apply_move(result.state, (2, 3), (3, 2))
        assert result.state.mandatory_jumps == ((4, 3),)


class TestMandatoryJumpFromBoard:
    """States not produced by the controller still obey mandatory capture."""

    @pytest.fixture
    def grid(self):
        board = empty_board()
        board[5][4] = Cell.PLAYER_1  # can jump (4,3)
        board[5][0] = Cell.PLAYER_1  # quiet piece
        board[4][3] = Cell.PLAYER_2
        board[0][7] = Cell.PLAYER_2
        return board

    def test_board_only_snapshot(self, grid):
        snap = {"board": [[cell.value for cell in row] for row in grid], "current_player": 1}
        state = GameState.from_snapshot(snap)
        assert state.mandatory_jumps == ((5, 4),)
        assert legal_moves(state, (5, 0)) == []
        result = apply_move(state, (5, 0), (4, 1))
        assert result.legal is False
        assert result.error is MoveError.JUMP_REQUIRED

    def test_stale_snapshot_field_ignored(self, grid):
        snap = GameState(board=grid).to_snapshot()
        assert snap["mandatory_jumps"] == []
        state = GameState.from_snapshot(snap)
        assert state.mandatory_jumps == ((5, 4),)

    def test_bare_state_agrees_with_player_moves(self, grid):
        state = GameState(board=grid)
        assert mandatory_jumps(state) == ((5, 4),)
        assert legal_moves_for_player(state, Player.ONE) == [
            Jump((5, 4), (3, 2), (4, 3))
        ]
        assert legal_moves(state, (5, 0)) == []
        assert apply_move(state, (5, 0), (4, 1)).error is MoveError.JUMP_REQUIRED
        assert apply_move(state, (5, 4), (3, 2)).legal is True


# ------------------------------------------------------------------
# Tier 2: a chain must be finished by the same piece
# ------------------------------------------------------------------

class TestMultiJumpChain:
    @pytest.fixture
    def state(self):
        board = empty_board()
        board[5][4] = Cell.PLAYER_1  # (5,4) x (4,3) -> (3,2) x (2,3) -> (1,4)
        board[4][3] = Cell.PLAYER_2
        board[2][3] = Cell.PLAYER_2
        board[6][7] = Cell.PLAYER_1  # second jumper: (6,7) x (5,6) -> (4,5)
        board[5][6] = Cell.PLAYER_2
        return _state(board, moves_since_capture=12)

    def test_both_jumpers_mandatory_at_turn_start(self, state):
        assert state.mandatory_jumps == ((5, 4), (6, 7))

    def test_first_jump_keeps_the_turn(self, state):
        result = apply_move(state, (5, 4), (3, 2))
        after = result.state
        assert result.legal is True
        assert after.current_player is Player.ONE
        assert after.multi_jump_chain == (3, 2)
        assert after.phase is TurnPhase.MULTI_JUMP_CONTINUATION
        assert after.moves_since_capture == 0
        assert is_game_over(after) is Outcome.IN_PROGRESS

    def test_only_chain_piece_may_move(self, state):
        after = apply_move(state, (5, 4), (3, 2)).state
        assert legal_moves(after, (6, 7)) == []
        assert legal_moves(after, (3, 2)) == [Jump((3, 2), (1, 4), (2, 3))]
        assert legal_moves_for_player(after, Player.ONE) == [
            Jump((3, 2), (1, 4), (2, 3))
        ]

    def test_other_jumper_rejected_mid_chain(self, state):
        after = apply_move(state, (5, 4), (3, 2)).state
        result = apply_move(after, (6, 7), (4, 5))
        assert result.legal is False
        assert result.error is MoveError.CHAIN_IN_PROGRESS
        assert result.state is after

    def test_chain_piece_simple_move_rejected(self, state):
        after = apply_move(state, (5, 4), (3, 2)).state
        result = apply_move(after, (3, 2), (2, 1))
        assert result.legal is False
        assert result.error is MoveError.ILLEGAL_DESTINATION

    def test_chain_completes_and_turn_passes(self, state):
        after = apply_move(state, (5, 4), (3, 2)).state
        result = apply_move(after, (3, 2), (1, 4))
        final = result.state
        assert result.legal is True
        assert final.multi_jump_chain is None
        assert final.current_player is Player.TWO
        assert final.moves_since_capture == 0
        assert final.board[4][3] is Cell.EMPTY
        assert final.board[2][3] is Cell.EMPTY
        assert final.board[1][4] is Cell.PLAYER_1
        assert count_pieces(final.board)[Player.TWO] == 1
        assert is_game_over(final) is Outcome.IN_PROGRESS

    def test_king_chain_changes_direction(self):
        board = empty_board()
        board[3][2] = Cell.PLAYER_1_KING  # back over (4,3), then forward over (4,5)
        board[4][3] = Cell.PLAYER_2
        board[4][5] = Cell.PLAYER_2
        board[0][1] = Cell.PLAYER_2
        state = _state(board)
        first = apply_move(state, (3, 2), (5, 4))
        assert first.state.multi_jump_chain == (5, 4)
        second = apply_move(first.state, (5, 4), (3, 6))
        assert second.legal is True
        assert second.state.current_player is Player.TWO
        assert second.state.board[3][6] is Cell.PLAYER_1_KING

    def test_promotion_mid_chain_grants_king_jumps(self):
        board = empty_board()
        board[2][5] = Cell.PLAYER_1  # x (1,4) -> (0,3), promoted, x (1,2) -> (2,1)
        board[1][4] = Cell.PLAYER_2
        board[1][2] = Cell.PLAYER_2
        state = _state(board)
        first = apply_move(state, (2, 5), (0, 3))
        assert first.state.board[0][3] is Cell.PLAYER_1_KING
        assert first.state.multi_jump_chain == (0, 3)
        assert legal_moves(first.state, (0, 3)) == [Jump((0, 3), (2, 1), (1, 2))]

        second = apply_move(first.state, (0, 3), (2, 1))
        assert second.legal is True
        assert is_game_over(second.state) is Outcome.PLAYER_ONE_WINS
        assert second.state.phase is TurnPhase.GAME_OVER

    def test_chain_ends_when_no_further_jump(self):
        board = empty_board()
        board[3][4] = Cell.PLAYER_1
        board[2][3] = Cell.PLAYER_2
        board[0][7] = Cell.PLAYER_2
        result = apply_move(_state(board), (3, 4), (1, 2))
        assert result.state.multi_jump_chain is None
        assert result.state.current_player is Player.TWO


# ------------------------------------------------------------------
# Game end through apply_move
# ------------------------------------------------------------------

class TestGameEnd:
    def _blockade(self, moves_since_capture=0) -> GameState:
        board = empty_board()
        board[0][7] = Cell.PLAYER_2_KING  # corner: only neighbour is (1,6)
        board[1][6] = Cell.PLAYER_1_KING
        board[3][4] = Cell.PLAYER_1_KING  # steps to (2,5), closing the landing square
        return _state(board, moves_since_capture=moves_since_capture)

    def test_blocked_opponent_loses(self):
        result = apply_move(self._blockade(), (3, 4), (2, 5))
        assert result.legal is True
        assert is_game_over(result.state) is Outcome.PLAYER_ONE_WINS
        assert result.state.phase is TurnPhase.GAME_OVER

    def test_final_position_logged(self, caplog):
        with caplog.at_level("DEBUG", logger="checkers_engine.core.game"):
            apply_move(self._blockade(), (3, 4), (2, 5))
        assert "Game over: player_one_wins" in caplog.text
        assert "0 .......O" in caplog.text

    def test_no_moves_after_game_over(self):
        over = apply_move(self._blockade(), (3, 4), (2, 5)).state
        result = apply_move(over, (2, 5), (3, 4))
        assert result.legal is False
        assert result.error is MoveError.GAME_OVER
        assert legal_moves(over, (2, 5)) == []

    def test_win_beats_draw_on_the_same_move(self):
        result = apply_move(self._blockade(moves_since_capture=39), (3, 4), (2, 5))
        assert result.state.moves_since_capture == 40
        assert is_game_over(result.state) is Outcome.PLAYER_ONE_WINS

    def test_capturing_last_piece_wins(self):
        board = empty_board()
        board[3][4] = Cell.PLAYER_1
        board[2][3] = Cell.PLAYER_2
        result = apply_move(_state(board), (3, 4), (1, 2))
        assert is_game_over(result.state) is Outcome.PLAYER_ONE_WINS

    def test_forty_quiet_moves_draw(self):
        board = empty_board()
        board[7][0] = Cell.PLAYER_1_KING
        board[0][7] = Cell.PLAYER_2_KING
        state = _state(board)
        shuffle = [
            ((7, 0), (6, 1)),
            ((0, 7), (1, 6)),
            ((6, 1), (7, 0)),
            ((1, 6), (0, 7)),
        ]
        for i in range(40):
            assert is_game_over(state) is Outcome.IN_PROGRESS
            fr, to = shuffle[i % 4]
            result = apply_move(state, fr, to)
            assert result.legal is True
            state = result.state
            assert state.moves_since_capture == i + 1
        assert is_game_over(state) is Outcome.DRAW


# ------------------------------------------------------------------
# Properties over a full random game
# ------------------------------------------------------------------

class TestRandomGameProperties:
    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_board_rules_hold_every_move(self, seed):
        rng = random.Random(seed)
        state = new_game()
        for _ in range(2000):
            if state.result.is_over:
                break
            moves = legal_moves_for_player(state, state.current_player)
            if all_jumps_for(state.board, state.current_player):
                assert all(isinstance(m, Jump) for m in moves)

            move = rng.choice(moves)
            piece = state.board[move.fr[0]][move.fr[1]]
            result = apply_move(state, move.fr, move.to)
            assert result.legal is True
            after = result.state
            landed = after.board[move.to[0]][move.to[1]]

            if isinstance(move, Jump):
                assert _total_pieces(after) == _total_pieces(state) - 1
                assert after.board[move.captured[0]][move.captured[1]] is Cell.EMPTY
                assert after.moves_since_capture == 0
            else:
                assert _total_pieces(after) == _total_pieces(state)
                assert after.moves_since_capture == state.moves_since_capture + 1

            reached_far_row = move.to[0] == piece.owner.promotion_row
            if piece.is_king:
                assert landed.is_king
            else:
                assert landed.is_king == reached_far_row

            if after.multi_jump_chain is not None:
                assert after.multi_jump_chain == move.to
                assert after.current_player is state.current_player
            state = after
        assert state.result.is_over


# ------------------------------------------------------------------
# Snapshot round-trip
# ------------------------------------------------------------------

class TestStateSnapshot:
    def test_round_trip_initial(self):
        state = new_game()
        assert GameState.from_snapshot(state.to_snapshot()) == state

    def test_round_trip_mid_chain(self):
        board = empty_board()
        board[5][4] = Cell.PLAYER_1
        board[4][3] = Cell.PLAYER_2
        board[2][3] = Cell.PLAYER_2
        after = apply_move(_state(board), (5, 4), (3, 2)).state
        restored = GameState.from_snapshot(after.to_snapshot())
        assert restored == after
        assert restored.multi_jump_chain == (3, 2)

    def test_snapshot_is_json_serializable(self):
        state = apply_move(new_game(), (5, 0), (4, 1)).state
        snap = json.loads(json.dumps(state.to_snapshot()))
        assert snap["current_player"] == 2
        assert snap["moves_since_capture"] == 1
        assert snap["result"] == "in_progress"
        assert GameState.from_snapshot(snap) == state
