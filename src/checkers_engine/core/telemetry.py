"""GameLogger — JSONL game logging.

One logger per game. Writes one JSONL line per applied move plus a game
summary as the final line. All entries include schema version and game ID.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

import checkers_engine

_SCHEMA_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@dataclass
class MoveRecord:
    """One applied move of game telemetry."""

    turn_number: int
    player: int
    actor: str  # "human" or "ai"
    from_square: list[int]
    to_square: list[int]
    captured: list[int] | None
    chain_continues: bool
    moves_since_capture: int
    state_snapshot: dict


class GameLogger:
    """Writes JSONL telemetry for a single game."""

    def __init__(self, output_dir: Path, game_id: str):
        self._output_dir = Path(output_dir)
        self._game_id = game_id
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._output_dir / f"{game_id}.jsonl"

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def game_id(self) -> str:
        return self._game_id

    def log_move(self, entry: MoveRecord) -> None:
        record = asdict(entry)
        record["schema_version"] = _SCHEMA_VERSION
        record["game_id"] = self._game_id
        record["timestamp"] = datetime.now(timezone.utc).isoformat()
        self._append(record)

    def finalize_game(
        self,
        outcome: str,
        pieces_remaining: dict[str, int],
        total_turns: int,
        extra: dict | None = None,
    ) -> None:
        record = {
            "schema_version": _SCHEMA_VERSION,
            "record_type": "game_summary",
            "game_id": self._game_id,
            "outcome": outcome,
            "pieces_remaining": pieces_remaining,
            "total_turns": total_turns,
            "engine_version": checkers_engine.__version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if extra:
            record.update(extra)
        self._append(record)

    def _append(self, record: dict) -> None:
        try:
            with open(self._file_path, "a") as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError as exc:
            logger.warning("Failed to write telemetry to %s: %s", self._file_path, exc)
