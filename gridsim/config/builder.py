"""Assemble a WorldSpec from a validated SimulationConfig.

Every agent gets its own QLearner with a Generator spawned from the
root seed (see core.seeding), so runs are reproducible end to end.

Trigger order is fixed here and is the order effects are applied in when
several fire in the same step: each agent's ``on_goal`` trigger first (in
agent order), then the explicit ``triggers`` list.
"""

from __future__ import annotations

import numpy as np

from gridsim.config.schema import (
    AgentConfig,
    EffectConfig,
    EndEpisodeEffectConfig,
    LearnerConfig,
    OpenWallEffectConfig,
    RewardEffectConfig,
    SimulationConfig,
)
from gridsim.core.seeding import agent_rngs
from gridsim.core.types import Position
from gridsim.learning.learner import QLearner
from gridsim.learning.parameters import LearningParameters
from gridsim.world.model import AgentSpec, Effect, EndEpisode, OpenWall, Reward, Trigger, WorldSpec


def learning_parameters(config: LearnerConfig) -> LearningParameters:
    return LearningParameters(
        alpha=config.alpha,
        gamma=config.gamma,
        eps0=config.eps0,
        eps_min=config.eps_min,
        warm=config.warm,
        optimistic=config.optimistic,
    )


def build_effect(config: EffectConfig) -> Effect:
    if isinstance(config, OpenWallEffectConfig):
        return OpenWall(Position(*config.at))
    if isinstance(config, RewardEffectConfig):
        return Reward(config.delta)
    if isinstance(config, EndEpisodeEffectConfig):
        return EndEpisode()
    raise TypeError(f"Unknown effect config: {config!r}")


def build_agent(config: AgentConfig, rng: np.random.Generator) -> AgentSpec:
    goal = Position(*config.goal)
    learner = QLearner(
        goal=goal,
        goal_reward=config.goal_reward,
        params=learning_parameters(config.learner),
        rng=rng,
    )
    return AgentSpec(id=config.id, start=Position(*config.start), goal=goal, learner=learner)


def build_world(config: SimulationConfig) -> WorldSpec:
    """Build the immutable WorldSpec (with fresh learners) for *config*."""
    rngs = agent_rngs(config.identity.seed, [a.id for a in config.agents])
    agents = tuple(build_agent(agent_cfg, rngs[agent_cfg.id]) for agent_cfg in config.agents)

    triggers: list[Trigger] = []
    for agent_cfg in config.agents:
        if agent_cfg.on_goal:
            triggers.append(Trigger(
                agent_id=agent_cfg.id,
                at=Position(*agent_cfg.goal),
                effects=tuple(build_effect(e) for e in agent_cfg.on_goal),
            ))
    for trigger_cfg in config.triggers:
        triggers.append(Trigger(
            agent_id=trigger_cfg.agent,
            at=Position(*trigger_cfg.at),
            effects=tuple(build_effect(e) for e in trigger_cfg.effects),
        ))

    grid = config.grid
    training = config.training
    return WorldSpec(
        rows=grid.rows,
        cols=grid.cols,
        step_penalty=grid.step_penalty,
        static_walls=frozenset(Position(r, c) for r, c in grid.all_walls()),
        triggers=tuple(triggers),
        agents=agents,
        episodes=training.episodes,
        step_limit=training.step_limit,
        step_delay_ms=training.step_delay_ms,
        show_after=training.show_after,
    )
