"""Sparse tabular value store for (position, action) pairs.

Unvisited pairs read as the configured optimistic value. Only pairs that
have been updated or explicitly set are stored.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

import numpy as np

from gridsim.core.types import ALL_ACTIONS, Action, Position
from gridsim.learning.parameters import LearningParameters

QKey = tuple[Position, Action]


class QTable:
    """Q-value table with optimistic defaults and random tie-breaking."""

    def __init__(self, params: LearningParameters, rng: np.random.Generator) -> None:
        self._params = params
        self._rng = rng
        self._table: dict[QKey, float] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def value(self, state: Position, action: Action) -> float:
        return self._table.get((state, action), self._params.optimistic)

    def values(self, state: Position) -> list[float]:
        """Values of every action at *state*, in ``Action`` declaration order."""
        return [self.value(state, a) for a in ALL_ACTIONS]

    def best_actions(self, state: Position) -> list[Action]:
        """All actions sharing the maximum value at *state*."""
        values = self.values(state)
        best = max(values)
        return [a for a, v in zip(ALL_ACTIONS, values) if v == best]

    def best_action(self, state: Position) -> Action:
        """Greedy action; ties are broken uniformly at random."""
        candidates = self.best_actions(state)
        if len(candidates) == 1:
            return candidates[0]
        return candidates[int(self._rng.integers(len(candidates)))]

    def visited(self, state: Position, action: Action) -> bool:
        return (state, action) in self._table

    def __len__(self) -> int:
        return len(self._table)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update(
        self,
        state: Position,
        action: Action,
        reward: float,
        next_state: Position,
    ) -> float:
        """One-step Q-learning backup. Returns the new value."""
        alpha = self._params.alpha
        best_next = max(self.values(next_state))
        new_value = (1.0 - alpha) * self.value(state, action) + alpha * (
            reward + self._params.gamma * best_next
        )
        self._table[(state, action)] = new_value
        return new_value

    def set_values(self, values: Mapping[QKey, float]) -> None:
        """Bulk-overwrite entries, e.g. with an externally generated table."""
        for (state, action), value in values.items():
            self._table[(state, action)] = float(value)

    def reset(self) -> None:
        """Forget everything learned; all pairs read optimistic again."""
        self._table.clear()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def snapshot(self) -> Mapping[QKey, float]:
        """Read-only copy of the stored entries at this instant."""
        return MappingProxyType(dict(self._table))

    def to_array(self, rows: int, cols: int) -> np.ndarray:
        """Dense ``(rows, cols, len(Action))`` view, default-filled."""
        dense = np.full((rows, cols, len(ALL_ACTIONS)), self._params.optimistic, dtype=np.float64)
        index = {a: i for i, a in enumerate(ALL_ACTIONS)}
        for (state, action), value in self._table.items():
            if 0 <= state.row < rows and 0 <= state.col < cols:
                dense[state.row, state.col, index[action]] = value
        return dense
