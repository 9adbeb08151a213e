"""GridEnvironment: deterministic cell-to-cell transitions with walls.

Boundary policy is *clamp*: a move that would leave the grid is clipped to
the nearest in-bounds cell, so pushing against an edge leaves the agent
where it is. Every transition costs the fixed step penalty, wherever the
agent ends up.
"""

from __future__ import annotations

from gridsim.core.base_env import BaseEnvironment
from gridsim.core.types import Action, Position, StepResult


class GridEnvironment(BaseEnvironment):
    """Pure transition function over a rows x cols grid."""

    def __init__(
        self,
        rows: int,
        cols: int,
        step_penalty: float = -1.0,
        walls: frozenset[Position] = frozenset(),
    ) -> None:
        self._rows = rows
        self._cols = cols
        self._step_penalty = step_penalty
        self._walls = frozenset(walls)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def step_penalty(self) -> float:
        return self._step_penalty

    @property
    def walls(self) -> frozenset[Position]:
        return self._walls

    def with_walls(self, walls: frozenset[Position]) -> GridEnvironment:
        """Same grid and penalty, different blocking set."""
        if walls is self._walls:
            return self
        return GridEnvironment(self._rows, self._cols, self._step_penalty, walls)

    def step(self, position: Position, action: Action) -> StepResult:
        drow, dcol = action.delta
        candidate = Position(
            min(max(position.row + drow, 0), self._rows - 1),
            min(max(position.col + dcol, 0), self._cols - 1),
        )
        if candidate in self._walls:
            return StepResult(position, self._step_penalty)
        return StepResult(candidate, self._step_penalty)
