"""Move generation — single jumps, simple moves, and the mandatory-jump rule.

Each generated jump is ONE capture. Multi-jump chains are not expanded
here: the turn controller asks for further jumps from the landing square
after every capture, so king status is always re-read from the board.

Direction order is fixed (up-left, up-right, down-left, down-right),
filtered to the piece's allowed subset, and the board is scanned in
row-major order. Output is therefore deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass

from .board import (
    Board,
    Player,
    Position,
    cell_at,
    in_bounds,
    is_empty,
    owner_of,
    positions_of,
)

_UP_LEFT = (-1, -1)
_UP_RIGHT = (-1, 1)
_DOWN_LEFT = (1, -1)
_DOWN_RIGHT = (1, 1)

_ALL_DIRECTIONS = (_UP_LEFT, _UP_RIGHT, _DOWN_LEFT, _DOWN_RIGHT)


@dataclass(frozen=True)
class SimpleMove:
    """One diagonal step onto an empty square."""

    fr: Position
    to: Position


@dataclass(frozen=True)
class Jump:
    """Two diagonal steps over an opponent piece at *captured*."""

    fr: Position
    to: Position
    captured: Position


Move = SimpleMove | Jump


def directions_for(board: Board, pos: Position) -> tuple[tuple[int, int], ...]:
    """Return diagonal direction vectors for the piece at *pos*."""
    cell = cell_at(board, pos)
    if cell.is_king:
        return _ALL_DIRECTIONS
    if cell.owner is Player.ONE:
        return (_UP_LEFT, _UP_RIGHT)
    if cell.owner is Player.TWO:
        return (_DOWN_LEFT, _DOWN_RIGHT)
    return ()


def _require_piece(board: Board, pos: Position) -> Player:
    if not in_bounds(pos):
        raise ValueError(f"Position {pos} is off the board")
    owner = owner_of(board, pos)
    if owner is None:
        raise ValueError(f"No piece at {pos}")
    return owner


def jumps_from(board: Board, pos: Position) -> list[Jump]:
    """All single captures available to the piece at *pos*."""
    owner = _require_piece(board, pos)
    r, c = pos
    jumps: list[Jump] = []
    for dr, dc in directions_for(board, pos):
        mid = (r + dr, c + dc)
        land = (r + dr * 2, c + dc * 2)
        if not in_bounds(land):
            continue
        if owner_of(board, mid) is not owner.opponent:
            continue  # empty or own piece
        if not is_empty(board, land):
            continue
        jumps.append(Jump(fr=pos, to=land, captured=mid))
    return jumps


def simple_moves_from(board: Board, pos: Position) -> list[SimpleMove]:
    _require_piece(board, pos)
    r, c = pos
    moves: list[SimpleMove] = []
    for dr, dc in directions_for(board, pos):
        dest = (r + dr, c + dc)
        if is_empty(board, dest):
            moves.append(SimpleMove(fr=pos, to=dest))
    return moves


def moves_from(board: Board, pos: Position) -> list[Move]:
    """Jumps for the piece if it has any, otherwise its simple moves."""
    jumps = jumps_from(board, pos)
    if jumps:
        return list(jumps)
    return list(simple_moves_from(board, pos))


def all_jumps_for(board: Board, player: Player) -> list[tuple[Position, list[Jump]]]:
    """(position, jumps) for every piece of *player* that can capture."""
    result: list[tuple[Position, list[Jump]]] = []
    for pos in positions_of(board, player):
        jumps = jumps_from(board, pos)
        if jumps:
            result.append((pos, jumps))
    return result


def all_moves_for(board: Board, player: Player) -> list[Move]:
    """Return all legal moves for *player*.

    Mandatory capture: if any piece can jump, only jumps are returned,
    even for pieces that have no jump of their own.
    """
    capture_moves: list[Move] = [
        jump for _, jumps in all_jumps_for(board, player) for jump in jumps
    ]
    if capture_moves:
        return capture_moves

    simple_moves: list[Move] = []
    for pos in positions_of(board, player):
        simple_moves.extend(simple_moves_from(board, pos))
    return simple_moves
