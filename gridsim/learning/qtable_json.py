"""Parse externally generated Q-tables for bulk injection into a learner.

Accepted shape, keyed by cell then action label::

    {"(0, 1)": {"Up": 0.5, "Right": 2.0}, "(3, 4)": {"Stay": -1.0}}

Generators often wrap their output in a Markdown code fence or prefix it
with a short sentence, or both; only the JSON itself is parsed.
"""

from __future__ import annotations

import re

from pydantic import TypeAdapter

from gridsim.core.types import Action, Position
from gridsim.learning.qtable import QKey

_CELL_RE = re.compile(r"^\(\s*(\d+)\s*,\s*(\d+)\s*\)$")
_FENCED_RE = re.compile(r"```(?:json)?\s*(.*?)\s*(?:```|$)", re.IGNORECASE | re.DOTALL)
_PREAMBLE_RE = re.compile(r"^(?:json\s*|here[^\n{]*?:\s*)", re.IGNORECASE)

_RAW_TABLE = TypeAdapter(dict[str, dict[str, float]])


def clean_json_text(text: str) -> str:
    """Return the fenced block if there is one, else the text minus a leading label."""
    fenced = _FENCED_RE.search(text)
    if fenced is not None:
        return fenced.group(1).strip()
    return _PREAMBLE_RE.sub("", text.strip(), count=1).strip()


def parse_cell(label: str) -> Position:
    match = _CELL_RE.match(label.strip())
    if match is None:
        raise ValueError(f"Invalid cell key: {label!r} (expected '(row, col)')")
    return Position(int(match.group(1)), int(match.group(2)))


def parse_qtable_json(text: str) -> dict[QKey, float]:
    """Turn Q-table JSON into a ``(Position, Action) -> value`` mapping.

    Raises ValueError (pydantic's ValidationError included) on bad input.
    """
    raw = _RAW_TABLE.validate_json(clean_json_text(text))
    values: dict[QKey, float] = {}
    for cell_label, by_action in raw.items():
        cell = parse_cell(cell_label)
        for action_label, value in by_action.items():
            values[(cell, Action.from_label(action_label))] = value
    return values
