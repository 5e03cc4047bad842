"""Rich terminal rendering for a GameSession."""

from __future__ import annotations

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from checkers_engine.core.board import BOARD_SIZE, Cell, Player, Position, is_dark
from checkers_engine.core.game import mandatory_jumps
from checkers_engine.core.state import GameState, TurnPhase
from checkers_engine.session import GameSession

PLAYER_COLORS = {
    Player.ONE: "bold red",
    Player.TWO: "bold white",
}

_PIECE_GLYPHS = {
    Cell.PLAYER_1: "x",
    Cell.PLAYER_2: "o",
    Cell.PLAYER_1_KING: "X",
    Cell.PLAYER_2_KING: "O",
}

_DARK_BG = "on grey23"
_LIGHT_BG = "on grey70"
_SELECTED_BG = "on dark_goldenrod"
_HIGHLIGHT_BG = "on dark_green"


def _cell_text(
    state: GameState,
    pos: Position,
    selected: Position | None,
    highlights: set[Position],
) -> Text:
    r, c = pos
    cell = state.board[r][c]
    if pos == selected:
        bg = _SELECTED_BG
    elif pos in highlights:
        bg = _HIGHLIGHT_BG
    elif is_dark(r, c):
        bg = _DARK_BG
    else:
        bg = _LIGHT_BG

    if cell is Cell.EMPTY:
        glyph = "*" if pos in highlights else " "
        return Text(f" {glyph} ", style=bg)
    return Text(f" {_PIECE_GLYPHS[cell]} ", style=f"{PLAYER_COLORS[cell.owner]} {bg}")


def board_table(
    state: GameState,
    selected: Position | None = None,
    highlights: list[Position] | None = None,
) -> Table:
    """Build the 8×8 board with row/column coordinates."""
    marked = set(highlights or [])
    table = Table(box=box.SIMPLE_HEAD, show_edge=False, padding=0, pad_edge=False)
    table.add_column("", justify="right", style="dim")
    for c in range(BOARD_SIZE):
        table.add_column(str(c), justify="center")
    for r in range(BOARD_SIZE):
        cells = [_cell_text(state, (r, c), selected, marked) for c in range(BOARD_SIZE)]
        table.add_row(f"{r} ", *cells)
    return table


def turn_text(session: GameSession) -> Text:
    state = session.state
    if state.result.is_over:
        return Text(session.result_message(), style="bold green")

    player = state.current_player
    text = Text(f"{player.label}'s turn", style=PLAYER_COLORS[player])
    if session.is_ai_turn():
        text.append(" (computer)", style="dim")
    if session.phase is TurnPhase.MULTI_JUMP_CONTINUATION:
        text.append("  multi-jump in progress", style="bold yellow")
    elif mandatory_jumps(state):
        text.append("  jump available - you must capture", style="yellow")
    text.append(
        f"   moves without capture: {state.moves_since_capture}", style="dim"
    )
    return text


def render_session(session: GameSession) -> Group:
    """Everything shown between two inputs: board, turn line, banner."""
    parts = [
        board_table(session.state, session.selected, session.highlights()),
        turn_text(session),
    ]
    if session.message and not session.state.result.is_over:
        parts.append(Panel(Text(session.message, style="bold red"), box=box.ROUNDED))
    ai = "ON" if session.ai_enabled else "OFF"
    parts.append(Text(f"AI: {ai}  |  game {session.game_number}", style="dim"))
    return Group(*parts)
