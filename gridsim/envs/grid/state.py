"""Per-episode mutable state and the read-only snapshots built from it.

An EpisodeState is created fresh at every reset and discarded when the
episode ends. Observers only ever see EpisodeSnapshot copies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from gridsim.core.types import AgentID, Position, TerminationReason
from gridsim.world.model import Trigger


@dataclass(slots=True)
class EpisodeState:
    """Where every agent is and what the episode has accumulated so far."""

    positions: dict[AgentID, Position]
    step: int = 0
    reward: float = 0.0
    termination: TerminationReason | None = None

    @property
    def done(self) -> bool:
        return self.termination is not None

    def snapshot(
        self,
        opened_walls: frozenset[Position],
        *,
        any_exploring: bool = False,
        fired: tuple[Trigger, ...] = (),
    ) -> EpisodeSnapshot:
        return EpisodeSnapshot(
            step=self.step,
            positions=MappingProxyType(dict(self.positions)),
            opened_walls=opened_walls,
            done=self.done,
            reward=self.reward,
            any_exploring=any_exploring,
            fired=fired,
        )


@dataclass(frozen=True, slots=True)
class EpisodeSnapshot:
    """Immutable view of an episode after a step, handed to observers.

    ``any_exploring`` and ``fired`` describe the step that produced this
    snapshot and are informational only.
    """

    step: int
    positions: Mapping[AgentID, Position]
    opened_walls: frozenset[Position]
    done: bool
    reward: float
    any_exploring: bool = False
    fired: tuple[Trigger, ...] = ()
