"""Checkers board model — 8×8 row/col representation.

Dark (playable) squares: (row + col) % 2 == 1.

Cell encoding (integer codes double as the snapshot format):
  0 — empty
  1 — Player 1 man
  2 — Player 2 man
  3 — Player 1 king
  4 — Player 2 king

Player 1 starts on rows 5-7 and moves UP the board (decreasing row).
Player 2 starts on rows 0-2 and moves DOWN the board (increasing row).
Row 0 is Player 1's promotion edge, row 7 is Player 2's.

All queries are fail-safe: out-of-bounds positions read as empty and
ownerless instead of raising.
"""

from __future__ import annotations

from enum import Enum

BOARD_SIZE = 8

Position = tuple[int, int]
Board = list[list["Cell"]]


class Player(Enum):
    ONE = 1
    TWO = 2

    @property
    def opponent(self) -> Player:
        return Player.TWO if self is Player.ONE else Player.ONE

    @property
    def promotion_row(self) -> int:
        return 0 if self is Player.ONE else BOARD_SIZE - 1

    @property
    def label(self) -> str:
        return f"Player {self.value}"


class Cell(Enum):
    EMPTY = 0
    PLAYER_1 = 1
    PLAYER_2 = 2
    PLAYER_1_KING = 3
    PLAYER_2_KING = 4

    @property
    def owner(self) -> Player | None:
        if self in (Cell.PLAYER_1, Cell.PLAYER_1_KING):
            return Player.ONE
        if self in (Cell.PLAYER_2, Cell.PLAYER_2_KING):
            return Player.TWO
        return None

    @property
    def is_king(self) -> bool:
        return self in (Cell.PLAYER_1_KING, Cell.PLAYER_2_KING)

    def promoted(self) -> Cell:
        """Return the king variant of a man (kings and empty are unchanged)."""
        if self is Cell.PLAYER_1:
            return Cell.PLAYER_1_KING
        if self is Cell.PLAYER_2:
            return Cell.PLAYER_2_KING
        return self


_SYMBOLS = {
    Cell.EMPTY: ".",
    Cell.PLAYER_1: "x",
    Cell.PLAYER_2: "o",
    Cell.PLAYER_1_KING: "X",
    Cell.PLAYER_2_KING: "O",
}


def empty_board() -> Board:
    """Return an 8×8 board with no pieces."""
    return [[Cell.EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def create_initial_board() -> Board:
    """Return a fresh 8×8 board with pieces in starting positions."""
    board = empty_board()
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if not is_dark(r, c):
                continue  # light square
            if r < 3:
                board[r][c] = Cell.PLAYER_2
            elif r > 4:
                board[r][c] = Cell.PLAYER_1
    return board


def copy_board(board: Board) -> Board:
    return [row[:] for row in board]


def is_dark(r: int, c: int) -> bool:
    return (r + c) % 2 == 1


def in_bounds(pos: Position) -> bool:
    r, c = pos
    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE


def cell_at(board: Board, pos: Position) -> Cell:
    if not in_bounds(pos):
        return Cell.EMPTY
    return board[pos[0]][pos[1]]


def owner_of(board: Board, pos: Position) -> Player | None:
    return cell_at(board, pos).owner


def is_king(board: Board, pos: Position) -> bool:
    return cell_at(board, pos).is_king


def is_empty(board: Board, pos: Position) -> bool:
    """True only for in-bounds squares holding no piece."""
    return in_bounds(pos) and board[pos[0]][pos[1]] is Cell.EMPTY


def count_pieces(board: Board) -> dict[Player, int]:
    """Count remaining pieces (men and kings) for each side."""
    counts = {Player.ONE: 0, Player.TWO: 0}
    for row in board:
        for cell in row:
            owner = cell.owner
            if owner:
                counts[owner] += 1
    return counts


def positions_of(board: Board, player: Player) -> list[Position]:
    """Squares owned by *player*, in row-major scan order."""
    return [
        (r, c)
        for r in range(BOARD_SIZE)
        for c in range(BOARD_SIZE)
        if board[r][c].owner is player
    ]


# ── Snapshot ─────────────────────────────────────────────────────


def board_to_snapshot(board: Board) -> list[list[int]]:
    """Row-major grid of integer cell codes, row 0 first."""
    return [[cell.value for cell in row] for row in board]


def board_from_snapshot(grid: list[list[int]]) -> Board:
    if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
        raise ValueError(f"Board snapshot must be {BOARD_SIZE}x{BOARD_SIZE}")
    return [[Cell(value) for value in row] for row in grid]


def render_board(board: Board) -> str:
    """Compact plain-text board for log output, one row per line."""
    header = "  " + "".join(str(c) for c in range(BOARD_SIZE))
    rows = [f"{r} " + "".join(_SYMBOLS[cell] for cell in row) for r, row in enumerate(board)]
    return "\n".join([header, *rows])
