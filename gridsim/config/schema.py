"""Configuration schema for grid-world training runs.

This module defines the Pydantic models that fully describe a run: grid
geometry and walls, agents with their learner settings, triggers, episode
budget, and instrumentation. ``gridsim.config.builder`` turns a validated
config into the immutable WorldSpec the simulation consumes; the simulation
itself never re-validates.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from gridsim.config.layout import walls_from_ascii, wall_line

Cell = tuple[int, int]


# ---------------------------------------------------------------------------
# Section 1: Run Identity
# ---------------------------------------------------------------------------

class RunIdentity(BaseModel):
    """What this run is."""

    name: str = Field(
        default="gridsim",
        description="Free-form run / scenario name, used in artifact paths.",
    )
    seed: int = Field(
        ge=0,
        description="Root seed; each agent's random source is derived from it.",
    )


# ---------------------------------------------------------------------------
# Section 2: Grid & Walls
# ---------------------------------------------------------------------------

class WallLineConfig(BaseModel):
    """A straight run of wall cells between two endpoints (inclusive)."""

    direction: Literal["horizontal", "vertical"]
    start: Cell
    end: Cell

    @model_validator(mode="after")
    def endpoints_aligned(self) -> WallLineConfig:
        # Raises if the endpoints don't share the required row/column.
        wall_line(self.direction, self.start, self.end)
        return self


class GridConfig(BaseModel):
    """Grid size, step cost and static walls."""

    rows: int = Field(gt=0, le=1_000, description="Number of grid rows.")
    cols: int = Field(gt=0, le=1_000, description="Number of grid columns.")
    step_penalty: float = Field(
        default=-1.0,
        description="Reward every agent receives for every move, blocked or not.",
    )
    walls: list[Cell] = Field(default_factory=list, description="Individual wall cells.")
    ascii_walls: str | None = Field(
        default=None,
        description="Text map, one line per row; '#' marks a wall.",
    )
    wall_lines: list[WallLineConfig] = Field(default_factory=list)

    def all_walls(self) -> set[Cell]:
        """Union of explicit walls, ASCII-map walls and wall lines."""
        cells = set(self.walls)
        if self.ascii_walls:
            cells |= walls_from_ascii(self.ascii_walls)
        for line in self.wall_lines:
            cells.update(wall_line(line.direction, line.start, line.end))
        return cells

    def contains(self, cell: Cell) -> bool:
        return 0 <= cell[0] < self.rows and 0 <= cell[1] < self.cols

    @model_validator(mode="after")
    def walls_in_bounds(self) -> GridConfig:
        outside = sorted(c for c in self.all_walls() if not self.contains(c))
        if outside:
            raise ValueError(f"Wall cells outside the {self.rows}x{self.cols} grid: {outside}")
        return self


# ---------------------------------------------------------------------------
# Section 3: Effects & Triggers
# ---------------------------------------------------------------------------

class OpenWallEffectConfig(BaseModel):
    kind: Literal["open_wall"] = "open_wall"
    at: Cell


class RewardEffectConfig(BaseModel):
    kind: Literal["reward"] = "reward"
    delta: float


class EndEpisodeEffectConfig(BaseModel):
    kind: Literal["end_episode"] = "end_episode"


EffectConfig = Annotated[
    Union[OpenWallEffectConfig, RewardEffectConfig, EndEpisodeEffectConfig],
    Field(discriminator="kind"),
]


class TriggerConfig(BaseModel):
    """Effects applied once per episode when ``agent`` steps onto ``at``."""

    agent: str = Field(min_length=1)
    at: Cell
    effects: list[EffectConfig] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Section 4: Agents & Learners
# ---------------------------------------------------------------------------

class LearnerConfig(BaseModel):
    """Q-learning hyper-parameters for one agent."""

    alpha: float = Field(default=0.1, ge=0.0, le=1.0, description="Learning rate.")
    gamma: float = Field(default=0.9, ge=0.0, le=1.0, description="Discount factor.")
    eps0: float = Field(default=0.9, ge=0.0, le=1.0, description="Exploration rate during warm-up.")
    eps_min: float = Field(default=0.15, ge=0.0, le=1.0, description="Exploration floor.")
    warm: int = Field(default=10_000, ge=0, description="Warm-up episodes (also the decay length).")
    optimistic: float = Field(
        default=0.0, ge=0.0,
        description="Value assumed for (cell, action) pairs never updated.",
    )

    @model_validator(mode="after")
    def floor_below_start(self) -> LearnerConfig:
        if self.eps_min > self.eps0:
            raise ValueError(
                f"eps_min must be <= eps0 (got {self.eps_min} > {self.eps0})."
            )
        return self


class AgentConfig(BaseModel):
    """One agent: start, goal, goal reward, learner settings."""

    id: str = Field(min_length=1)
    start: Cell
    goal: Cell
    goal_reward: float = Field(
        default=0.0,
        description="Replaces the step reward in the learner's update on goal arrival.",
    )
    learner: LearnerConfig = LearnerConfig()
    on_goal: list[EffectConfig] = Field(
        default_factory=list,
        description="Effects of a trigger owned by this agent placed at its goal.",
    )


# ---------------------------------------------------------------------------
# Section 5: Training
# ---------------------------------------------------------------------------

class TrainingConfig(BaseModel):
    """Episode budget and progress reporting."""

    episodes: int = Field(ge=1, le=10_000_000)
    step_limit: int = Field(ge=1, le=1_000_000, description="Maximum steps per episode.")
    progress_every: int = Field(
        default=1_000, ge=1,
        description="Emit a progress line every N episodes.",
    )
    step_delay_ms: int = Field(default=0, ge=0, description="Visualization hint only.")
    show_after: int = Field(default=0, ge=0, description="Visualization hint only.")


# ---------------------------------------------------------------------------
# Section 6: Instrumentation
# ---------------------------------------------------------------------------

class InstrumentationConfig(BaseModel):
    """What metrics to collect and how often."""

    enable_episode_metrics: bool = Field(
        default=True,
        description="Collect per-episode metrics (steps, reward, termination).",
    )
    enable_event_log: bool = Field(
        default=True,
        description="Log semantic events (trigger fired, wall opened, completion).",
    )
    episode_log_frequency: int = Field(
        default=1, ge=1,
        description="Log episode metrics every N episodes. 1 = every episode.",
    )
    summary_window: int = Field(
        default=100, ge=1,
        description="Trailing episodes averaged in the run summary.",
    )
    recent_events: int = Field(
        default=1000, ge=1,
        description="Most recent events kept in memory; older ones live only in events.jsonl.",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

class SimulationConfig(BaseModel):
    """Complete configuration for one training run.

    A single instance of this model fully defines a reproducible run.
    """

    identity: RunIdentity
    grid: GridConfig
    agents: list[AgentConfig] = Field(min_length=1)
    triggers: list[TriggerConfig] = Field(default_factory=list)
    training: TrainingConfig
    instrumentation: InstrumentationConfig = InstrumentationConfig()

    @model_validator(mode="after")
    def agent_ids_unique(self) -> SimulationConfig:
        ids = [a.id for a in self.agents]
        dupes = sorted({aid for aid in ids if ids.count(aid) > 1})
        if dupes:
            raise ValueError(f"Duplicate agent ids: {dupes}")
        return self

    @model_validator(mode="after")
    def agent_cells_in_bounds(self) -> SimulationConfig:
        for agent in self.agents:
            for label, cell in (("start", agent.start), ("goal", agent.goal)):
                if not self.grid.contains(cell):
                    raise ValueError(
                        f"Agent {agent.id!r} {label} {cell} is outside the "
                        f"{self.grid.rows}x{self.grid.cols} grid."
                    )
        return self

    @model_validator(mode="after")
    def triggers_reference_agents(self) -> SimulationConfig:
        ids = {a.id for a in self.agents}
        for trigger in self.triggers:
            if trigger.agent not in ids:
                raise ValueError(
                    f"Trigger at {trigger.at} references unknown agent {trigger.agent!r}."
                )
        return self

    @model_validator(mode="after")
    def effect_cells_in_bounds(self) -> SimulationConfig:
        effect_lists = [t.effects for t in self.triggers] + [a.on_goal for a in self.agents]
        for trigger in self.triggers:
            if not self.grid.contains(trigger.at):
                raise ValueError(f"Trigger cell {trigger.at} is outside the grid.")
        for effects in effect_lists:
            for effect in effects:
                if isinstance(effect, OpenWallEffectConfig) and not self.grid.contains(effect.at):
                    raise ValueError(f"open_wall target {effect.at} is outside the grid.")
        return self
