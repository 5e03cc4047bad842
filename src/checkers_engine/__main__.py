"""CLI entry point: python -m checkers_engine [config.yaml]"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from checkers_engine.config import GameConfig, load_config, parse_player
from checkers_engine.core.parser import MoveParser
from checkers_engine.display import render_session
from checkers_engine.session import INSTRUCTIONS, GameSession


def _build_config(args: argparse.Namespace) -> GameConfig:
    config = load_config(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.seed = args.seed
    if args.no_ai:
        config.ai_enabled = False
    if args.ai_player is not None:
        config.ai_player = parse_player(args.ai_player)
    if args.delay_ms is not None:
        config.ai_move_delay_ms = args.delay_ms
    if args.output:
        config.output_dir = args.output
    return config


def _watch(session: GameSession, console: Console) -> None:
    """Computer vs computer until the game ends."""
    session.ai_enabled = True
    while not session.state.result.is_over:
        session.ai_player = session.state.current_player
        console.print(render_session(session))
        session.play_ai_turn()
    console.print(render_session(session))
    console.print(f"Turns played: {session.turn_number}")


def _interactive(session: GameSession, console: Console) -> None:
    parser = MoveParser()
    console.print(INSTRUCTIONS)
    while True:
        if session.is_ai_turn():
            console.print(render_session(session))
            session.play_ai_turn()
            continue

        console.print(render_session(session))
        try:
            line = console.input("[bold]> [/bold]").strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            return

        command = line.lower()
        if command in ("quit", "exit", "q"):
            return
        if command == "reset":
            session.reset()
            continue
        if command == "ai":
            enabled = session.toggle_ai()
            console.print(f"AI: {'ON' if enabled else 'OFF'}")
            continue
        if command in ("help", "?"):
            console.print(INSTRUCTIONS)
            continue

        parsed = parser.parse(line)
        if not parsed.success:
            console.print(f"[red]{parsed.error}[/red]")
            continue
        if len(parsed.positions) == 1:
            session.click(parsed.positions[0])
        else:
            session.move(*parsed.positions)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="checkers_engine",
        description="American checkers against a random computer opponent",
    )
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Path to game YAML config file",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the computer opponent")
    parser.add_argument(
        "--no-ai",
        action="store_true",
        default=False,
        help="Two humans share the terminal",
    )
    parser.add_argument(
        "--ai-player",
        type=int,
        choices=[1, 2],
        default=None,
        help="Which side the computer plays (default: 2)",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pause before each computer move, in milliseconds",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Directory for JSONL game logs",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        default=False,
        help="Let the computer play both sides",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config and not args.config.exists():
        print(f"Error: config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    try:
        config = _build_config(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    console = Console()
    session = GameSession(config)
    if args.watch:
        _watch(session, console)
    else:
        _interactive(session, console)


if __name__ == "__main__":
    main()
