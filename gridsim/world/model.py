"""Domain model for multi-agent grid worlds.

A WorldSpec is the fully-resolved description of one training run: grid
geometry, static walls, position-triggered effects, and the agents with
their pre-configured learners. Everything here is immutable once built;
per-episode mutable state lives in ``gridsim.envs.grid``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from gridsim.core.types import AgentID, Position

if TYPE_CHECKING:
    from gridsim.learning.learner import BaseLearner


# ---------------------------------------------------------------------------
# Effects (closed set)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OpenWall:
    """Remove the wall at ``at`` for the rest of the episode."""

    at: Position


@dataclass(frozen=True, slots=True)
class Reward:
    """Add ``delta`` to the owning agent's reward for this step."""

    delta: float


@dataclass(frozen=True, slots=True)
class EndEpisode:
    """Terminate the episode after the current step."""


Effect = Union[OpenWall, Reward, EndEpisode]


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Trigger:
    """Fires once per episode when ``agent_id`` steps onto ``at``."""

    agent_id: AgentID
    at: Position
    effects: tuple[Effect, ...]


# ---------------------------------------------------------------------------
# Agents and world
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AgentSpec:
    """One agent: where it starts, the cell its learner treats as terminal, and the learner it owns."""

    id: AgentID
    start: Position
    goal: Position
    learner: BaseLearner


@dataclass(frozen=True, slots=True)
class WorldSpec:
    """Complete, immutable description of a multi-agent training run.

    ``step_delay_ms`` and ``show_after`` are hints for a visualization layer
    and are never consulted by the simulation itself.
    """

    rows: int
    cols: int
    step_penalty: float
    static_walls: frozenset[Position]
    triggers: tuple[Trigger, ...]
    agents: tuple[AgentSpec, ...]
    episodes: int
    step_limit: int
    step_delay_ms: int = 0
    show_after: int = 0

    @property
    def agent_ids(self) -> list[AgentID]:
        return [a.id for a in self.agents]

    def agent(self, agent_id: AgentID) -> AgentSpec:
        for spec in self.agents:
            if spec.id == agent_id:
                return spec
        raise KeyError(agent_id)
