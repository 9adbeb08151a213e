"""Abstract environment contract.

An environment is a pure transition function over grid cells: given where
an agent stands and what it does, say where it ends up and what it earns.
Episode bookkeeping (walls opening, triggers, termination) lives above this
layer, in the wall/trigger manager and the episode runner.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from gridsim.core.types import Action, Position, StepResult


class BaseEnvironment(ABC):
    """Transition contract shared by all grid environments."""

    @property
    @abstractmethod
    def rows(self) -> int:
        """Number of grid rows."""
        ...

    @property
    @abstractmethod
    def cols(self) -> int:
        """Number of grid columns."""
        ...

    @abstractmethod
    def step(self, position: Position, action: Action) -> StepResult:
        """Apply *action* at *position*. Must be pure and total."""
        ...

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.row < self.rows and 0 <= position.col < self.cols
