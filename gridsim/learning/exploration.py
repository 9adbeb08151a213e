"""Epsilon-greedy action selection with warm-up and linear decay."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gridsim.core.types import ALL_ACTIONS, Action, Position
from gridsim.learning.parameters import LearningParameters
from gridsim.learning.qtable import QTable


@dataclass(frozen=True, slots=True)
class ActionChoice:
    """An action plus whether it came from the random branch.

    ``explored`` is for observability only; it never feeds the update.
    """

    action: Action
    explored: bool


class ExplorationPolicy:
    """Chooses between a uniformly random action and the table's greedy one.

    Owns the episode counter that drives the epsilon schedule.
    """

    def __init__(
        self,
        params: LearningParameters,
        table: QTable,
        rng: np.random.Generator,
    ) -> None:
        self._params = params
        self._table = table
        self._rng = rng
        self._episode = 0

    @property
    def episode(self) -> int:
        return self._episode

    @property
    def epsilon(self) -> float:
        return self._params.epsilon(self._episode)

    def choose(self, state: Position) -> ActionChoice:
        # Single draw decides the branch.
        if self._rng.random() < self.epsilon:
            action = ALL_ACTIONS[int(self._rng.integers(len(ALL_ACTIONS)))]
            return ActionChoice(action, explored=True)
        return ActionChoice(self._table.best_action(state), explored=False)

    def increment_episode(self) -> None:
        self._episode += 1

    def set_episode(self, episode: int) -> None:
        if episode < 0:
            raise ValueError(f"episode must be >= 0, got {episode}")
        self._episode = episode
