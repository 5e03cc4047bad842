"""MoveParser — turn terminal input into board coordinates.

Accepted forms:
  ``5,0``                         one square (a click)
  ``5,0 4,1`` or ``5 0 4 1``      a move
  ``{"from": [5, 0], "to": [4, 1]}``  a move, validated against the
                                   packaged JSON Schema
"""

import json
import re
from dataclasses import dataclass

import jsonschema

from checkers_engine.core.board import Position, in_bounds
from checkers_engine.core.schemas import load_schema

_INT_RE = re.compile(r"-?\d+")


@dataclass(frozen=True)
class ParseResult:
    """Result of parsing one line of input."""

    success: bool
    positions: tuple[Position, ...] = ()
    error: str | None = None


class MoveParser:
    """Parse clicks and moves; coordinates are always checked against the board."""

    def __init__(self, schema: dict | None = None) -> None:
        self._schema = schema if schema is not None else load_schema()

    def parse(self, raw_text: str) -> ParseResult:
        text = raw_text.strip()
        if not text:
            return ParseResult(success=False, error="Empty input")
        if text.startswith("{"):
            return self._parse_json(text)
        return self._parse_text(text)

    def _parse_json(self, text: str) -> ParseResult:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            return ParseResult(success=False, error=f"JSON parse error: {e}")
        try:
            jsonschema.validate(parsed, self._schema)
        except jsonschema.ValidationError as e:
            return ParseResult(success=False, error=f"Schema validation: {e.message}")
        fr = (parsed["from"][0], parsed["from"][1])
        to = (parsed["to"][0], parsed["to"][1])
        return ParseResult(success=True, positions=(fr, to))

    def _parse_text(self, text: str) -> ParseResult:
        if _INT_RE.sub("", text).strip(" ,;-></()[]") != "":
            return ParseResult(success=False, error=f"Unrecognized input: {text!r}")
        numbers = [int(n) for n in _INT_RE.findall(text)]
        if len(numbers) not in (2, 4):
            return ParseResult(
                success=False,
                error="Expected 'row,col' or 'row,col row,col'.",
            )
        positions = tuple(
            (numbers[i], numbers[i + 1]) for i in range(0, len(numbers), 2)
        )
        for pos in positions:
            if not in_bounds(pos):
                return ParseResult(
                    success=False,
                    error=f"Square {list(pos)} is off the board (rows and columns are 0-7).",
                )
        return ParseResult(success=True, positions=positions)
