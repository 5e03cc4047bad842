"""Schema loading utility."""

import json
from pathlib import Path

MOVE_SCHEMA_PATH = Path(__file__).parent / "move_schema.json"


def load_schema(path: Path = MOVE_SCHEMA_PATH) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)
