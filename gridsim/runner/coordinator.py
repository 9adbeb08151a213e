"""Joint action coordination: one lock-step move for every agent.

Order within a step:
  1. every learner chooses from its agent's pre-step position
  2. every agent moves on the same effective wall set (no agent blocks another)
  3. triggers are checked against the full next-position map
  4. every learner updates with step penalty + trigger bonus

Because each move depends only on the mover's own pre-step position,
this ordering is equivalent to all agents acting simultaneously. Only
trigger effects are serialized, in trigger-list order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from gridsim.core.types import Action, AgentID, Position
from gridsim.envs.grid.env import GridEnvironment
from gridsim.envs.grid.walls import WallTriggerManager
from gridsim.learning.learner import BaseLearner
from gridsim.world.model import Trigger


@dataclass(frozen=True, slots=True)
class JointStep:
    """Everything that happened to every agent during one step."""

    actions: dict[AgentID, Action]
    next_positions: dict[AgentID, Position]
    step_rewards: dict[AgentID, float]
    bonuses: dict[AgentID, float]
    any_exploring: bool
    fired: tuple[Trigger, ...]

    @property
    def rewards(self) -> dict[AgentID, float]:
        """Per-agent reward fed to the learners (before goal substitution)."""
        return {aid: self.step_rewards[aid] + self.bonuses.get(aid, 0.0) for aid in self.step_rewards}

    @property
    def total_reward(self) -> float:
        return sum(self.rewards.values())


class JointActionCoordinator:
    """Drives every agent's learner through one simultaneous step."""

    def __init__(
        self,
        env: GridEnvironment,
        learners: Mapping[AgentID, BaseLearner],
        walls: WallTriggerManager,
    ) -> None:
        self._env = env
        self._learners = dict(learners)
        self._walls = walls

    @property
    def agent_ids(self) -> list[AgentID]:
        return list(self._learners)

    def epsilon(self, agent_id: AgentID) -> float:
        return self._learners[agent_id].epsilon

    def step(self, positions: Mapping[AgentID, Position]) -> JointStep:
        # --- 1. joint action from pre-step positions ----------------------
        actions: dict[AgentID, Action] = {}
        any_exploring = False
        for aid, learner in self._learners.items():
            choice = learner.choose(positions[aid])
            actions[aid] = choice.action
            any_exploring = any_exploring or choice.explored

        # --- 2. transitions on one consistent wall set --------------------
        grid = self._env.with_walls(self._walls.effective_walls)
        next_positions: dict[AgentID, Position] = {}
        step_rewards: dict[AgentID, float] = {}
        for aid, action in actions.items():
            result = grid.step(positions[aid], action)
            next_positions[aid] = result.position
            step_rewards[aid] = result.reward

        # --- 3. triggers ---------------------------------------------------
        bonuses = self._walls.process_triggers(next_positions)

        # --- 4. learning updates, after all next positions are known -------
        for aid, learner in self._learners.items():
            learner.update_with_goal(
                positions[aid],
                actions[aid],
                step_rewards[aid] + bonuses.get(aid, 0.0),
                next_positions[aid],
            )

        return JointStep(
            actions=actions,
            next_positions=next_positions,
            step_rewards=step_rewards,
            bonuses=bonuses,
            any_exploring=any_exploring,
            fired=self._walls.last_fired,
        )

    def increment_episode(self) -> None:
        for learner in self._learners.values():
            learner.increment_episode()
