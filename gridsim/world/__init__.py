"""Immutable world description: effects, triggers, agents."""

from gridsim.world.model import (
    AgentSpec,
    Effect,
    EndEpisode,
    OpenWall,
    Reward,
    Trigger,
    WorldSpec,
)

__all__ = [
    "AgentSpec",
    "Effect",
    "EndEpisode",
    "OpenWall",
    "Reward",
    "Trigger",
    "WorldSpec",
]
