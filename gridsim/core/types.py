"""Framework-level types used across the grid simulation.

These are the shared vocabulary of the engine: cells, moves, the
environment's transition output, and why an episode ended.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Agent identity
# ---------------------------------------------------------------------------

AgentID = str  # unique within a world


# ---------------------------------------------------------------------------
# Grid cells
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A grid cell, addressed as (row, col) with (0, 0) at the top-left."""

    row: int
    col: int

    def __post_init__(self) -> None:
        for value in (self.row, self.col):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Position components must be ints, got {self.row!r}, {self.col!r}")

    def offset(self, drow: int, dcol: int) -> Position:
        return Position(self.row + drow, self.col + dcol)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

_DELTAS: dict[str, tuple[int, int]] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
    "stay": (0, 0),
}


class Action(Enum):
    """The five moves available to every agent."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    STAY = "stay"

    @property
    def delta(self) -> tuple[int, int]:
        """(row, col) displacement applied by this action."""
        return _DELTAS[self.value]

    @classmethod
    def from_label(cls, label: str) -> Action:
        """Parse ``"Up"``, ``"UP"`` or ``"up"`` into an Action."""
        try:
            return cls(label.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown action: {label!r}") from None


ALL_ACTIONS: tuple[Action, ...] = tuple(Action)


# ---------------------------------------------------------------------------
# Step result (what the grid returns for one agent move)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of a single transition: where the agent ended up and what it earned."""

    position: Position
    reward: float


# ---------------------------------------------------------------------------
# Termination
# ---------------------------------------------------------------------------

class TerminationReason(Enum):
    """Why an episode ended."""

    END_EPISODE = "end_episode"
    STEP_LIMIT = "step_limit"
