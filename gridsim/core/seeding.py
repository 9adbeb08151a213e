"""Seeded random generators for learners.

Every learner draws (exploration and tie-breaking) from its own numpy
Generator. A run's generators all come from the config's root seed, so the
same config trains the same tables.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from gridsim.core.types import AgentID


def make_rng(seed: int | None = None) -> np.random.Generator:
    """A Generator for *seed*; ``None`` gives an unseeded one."""
    return np.random.default_rng(seed)


def agent_rngs(root_seed: int, agent_ids: Sequence[AgentID]) -> dict[AgentID, np.random.Generator]:
    """One independent Generator per agent, spawned from *root_seed*.

    Streams depend on the agent's position in *agent_ids*, not its name, so
    renaming an agent keeps its stream and reordering agents swaps streams.
    """
    if len(set(agent_ids)) != len(agent_ids):
        raise ValueError(f"agent ids must be unique, got {list(agent_ids)}")
    children = np.random.SeedSequence(root_seed).spawn(len(agent_ids))
    return {aid: np.random.default_rng(child) for aid, child in zip(agent_ids, children)}
