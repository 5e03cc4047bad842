"""Game configuration loader."""

import yaml
from dataclasses import dataclass
from pathlib import Path

from checkers_engine.core.board import Player


@dataclass
class GameConfig:
    seed: int | None = None  # None = nondeterministic opponent
    ai_enabled: bool = True
    ai_player: Player = Player.TWO
    ai_move_delay_ms: int = 1000
    output_dir: Path | None = None  # telemetry; None = no game log

    @property
    def ai_move_delay_s(self) -> float:
        return self.ai_move_delay_ms / 1000.0


def parse_player(value) -> Player:
    """Accept 1/2 (int or str) and return the matching Player."""
    try:
        return Player(int(value))
    except (TypeError, ValueError):
        raise ValueError(f"ai_player must be 1 or 2, got {value!r}") from None


def load_config(path: Path) -> GameConfig:
    """Load game config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    g = raw.get("game", {}) or {}
    telemetry = raw.get("telemetry", {}) or {}

    delay = g.get("ai_move_delay_ms", 1000)
    if delay < 0:
        raise ValueError(f"ai_move_delay_ms must be >= 0, got {delay}")

    output_dir = telemetry.get("output_dir")
    return GameConfig(
        seed=g.get("seed"),
        ai_enabled=g.get("ai_enabled", True),
        ai_player=parse_player(g.get("ai_player", 2)),
        ai_move_delay_ms=delay,
        output_dir=Path(output_dir) if output_dir else None,
    )
