"""Episode state machine: Running until EndEpisode fires or the step limit hits.

Reaching a goal cell never ends an episode on its own; a world that wants
that attaches an ``EndEpisode`` trigger at the goal.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from gridsim.core.types import AgentID, Position, TerminationReason
from gridsim.envs.grid.env import GridEnvironment
from gridsim.envs.grid.state import EpisodeSnapshot, EpisodeState
from gridsim.envs.grid.walls import WallTriggerManager
from gridsim.runner.coordinator import JointActionCoordinator, JointStep
from gridsim.world.model import WorldSpec

StepObserver = Callable[[EpisodeSnapshot], None]


@dataclass(frozen=True, slots=True)
class EpisodeResult:
    """Outcome of one finished episode."""

    steps: int
    total_reward: float
    final_positions: dict[AgentID, Position]
    opened_walls: frozenset[Position]
    termination_reason: TerminationReason

    @property
    def completed(self) -> bool:
        """True when an EndEpisode effect ended the episode, False on step limit."""
        return self.termination_reason is TerminationReason.END_EPISODE


class EpisodeRunner:
    """Runs episodes of a WorldSpec one step at a time."""

    def __init__(self, world: WorldSpec) -> None:
        self._world = world
        self._walls = WallTriggerManager(world.static_walls, world.triggers)
        env = GridEnvironment(world.rows, world.cols, world.step_penalty, world.static_walls)
        self._coordinator = JointActionCoordinator(
            env, {a.id: a.learner for a in world.agents}, self._walls
        )
        self._state: EpisodeState | None = None
        self._last_step: JointStep | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> EpisodeSnapshot:
        """Start a fresh episode: agents at start, no opened walls, all triggers armed."""
        self._walls.reset()
        self._state = EpisodeState(positions={a.id: a.start for a in self._world.agents})
        self._last_step = None
        return self._state.snapshot(self._walls.opened_walls)

    def step(self) -> EpisodeSnapshot:
        if self._state is None:
            raise RuntimeError("Must call reset() before step().")
        if self._state.done:
            raise RuntimeError("Episode is done. Call reset().")

        state = self._state
        joint = self._coordinator.step(state.positions)
        self._last_step = joint

        state.positions = joint.next_positions
        state.step += 1
        state.reward += joint.total_reward

        if self._walls.is_done():
            state.termination = TerminationReason.END_EPISODE
        elif state.step >= self._world.step_limit:
            state.termination = TerminationReason.STEP_LIMIT

        return state.snapshot(
            self._walls.opened_walls,
            any_exploring=joint.any_exploring,
            fired=joint.fired,
        )

    def run(self, on_step: StepObserver | None = None) -> EpisodeResult:
        """Step until done, reporting a snapshot after every step."""
        if self._state is None:
            raise RuntimeError("Must call reset() before run().")
        while not self._state.done:
            snapshot = self.step()
            if on_step is not None:
                on_step(snapshot)
        return self.result()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def world(self) -> WorldSpec:
        return self._world

    @property
    def coordinator(self) -> JointActionCoordinator:
        return self._coordinator

    @property
    def last_step(self) -> JointStep | None:
        return self._last_step

    def is_done(self) -> bool:
        return self._state is not None and self._state.done

    def current_snapshot(self) -> EpisodeSnapshot:
        if self._state is None:
            raise RuntimeError("Must call reset() before current_snapshot().")
        return self._state.snapshot(self._walls.opened_walls)

    def result(self) -> EpisodeResult:
        state = self._state
        if state is None or state.termination is None:
            raise RuntimeError("Episode has not finished.")
        return EpisodeResult(
            steps=state.step,
            total_reward=state.reward,
            final_positions=dict(state.positions),
            opened_walls=self._walls.opened_walls,
            termination_reason=state.termination,
        )
