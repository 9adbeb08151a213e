"""Per-agent learners: a private Q-table behind choose/update operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

import numpy as np

from gridsim.core.seeding import make_rng
from gridsim.core.types import ALL_ACTIONS, Action, Position
from gridsim.learning.exploration import ActionChoice, ExplorationPolicy
from gridsim.learning.parameters import LearningParameters
from gridsim.learning.qtable import QKey, QTable


class BaseLearner(ABC):
    """Interface every per-agent learner must implement."""

    @abstractmethod
    def choose(self, state: Position) -> ActionChoice:
        """Pick an action for *state* under the current exploration rate."""

    @abstractmethod
    def update(self, state: Position, action: Action, reward: float, next_state: Position) -> None:
        """Apply one learning update with the reward as given."""

    @abstractmethod
    def update_with_goal(
        self, state: Position, action: Action, env_reward: float, next_state: Position
    ) -> None:
        """Like ``update``, but with the learner's goal-reward policy applied."""

    @abstractmethod
    def increment_episode(self) -> None:
        """Advance the episode counter driving the exploration schedule."""

    @property
    @abstractmethod
    def epsilon(self) -> float:
        """Current exploration rate."""


class QLearner(BaseLearner):
    """Tabular Q-learner for one agent.

    On a transition that lands on ``goal`` the configured ``goal_reward``
    *replaces* the environment reward instead of being added to it.

    Parameters
    ----------
    goal : Position
        Cell treated as terminal for reward substitution. Reaching it does
        not end an episode by itself.
    goal_reward : float
        Reward used in place of the environment reward on goal arrival.
    params : LearningParameters
        Learning rate, discount, exploration schedule, optimistic default.
    rng : np.random.Generator, optional
        Source for both exploration draws and tie-breaking. Pass a seeded
        generator for reproducible runs.
    """

    def __init__(
        self,
        goal: Position,
        goal_reward: float = 0.0,
        params: LearningParameters | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._goal = goal
        self._goal_reward = goal_reward
        self._params = params or LearningParameters()
        self._rng = rng if rng is not None else make_rng()
        self._table = QTable(self._params, self._rng)
        self._policy = ExplorationPolicy(self._params, self._table, self._rng)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def goal(self) -> Position:
        return self._goal

    @property
    def goal_reward(self) -> float:
        return self._goal_reward

    @property
    def params(self) -> LearningParameters:
        return self._params

    # ------------------------------------------------------------------
    # Acting and learning
    # ------------------------------------------------------------------

    def choose(self, state: Position) -> ActionChoice:
        return self._policy.choose(state)

    def update(self, state: Position, action: Action, reward: float, next_state: Position) -> None:
        self._table.update(state, action, reward, next_state)

    def update_with_goal(
        self, state: Position, action: Action, env_reward: float, next_state: Position
    ) -> None:
        reward = self._goal_reward if next_state == self._goal else env_reward
        self._table.update(state, action, reward, next_state)

    # ------------------------------------------------------------------
    # Exploration schedule
    # ------------------------------------------------------------------

    @property
    def epsilon(self) -> float:
        return self._policy.epsilon

    @property
    def episode(self) -> int:
        return self._policy.episode

    def increment_episode(self) -> None:
        self._policy.increment_episode()

    def set_episode(self, episode: int) -> None:
        self._policy.set_episode(episode)

    def reset_episode_counter(self) -> None:
        self._policy.set_episode(0)

    # ------------------------------------------------------------------
    # Table access
    # ------------------------------------------------------------------

    def q_value(self, state: Position, action: Action) -> float:
        return self._table.value(state, action)

    def q_values(self, state: Position) -> dict[Action, float]:
        return dict(zip(ALL_ACTIONS, self._table.values(state)))

    def visited(self, state: Position, action: Action) -> bool:
        return self._table.visited(state, action)

    @property
    def size(self) -> int:
        return len(self._table)

    def snapshot(self) -> Mapping[QKey, float]:
        return self._table.snapshot()

    def load_values(self, values: Mapping[QKey, float]) -> None:
        """Inject externally produced values before training starts."""
        self._table.set_values(values)

    def reset_table(self) -> None:
        self._table.reset()

    def to_array(self, rows: int, cols: int) -> np.ndarray:
        return self._table.to_array(rows, cols)
