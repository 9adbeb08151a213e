"""Default configuration and named scenario presets.

Every preset is a complete, valid SimulationConfig. Reaching a goal only
ends the episode where the preset says so with an ``end_episode`` effect.
"""

from __future__ import annotations

from collections.abc import Callable

from gridsim.config.schema import (
    AgentConfig,
    EffectConfig,
    EndEpisodeEffectConfig,
    GridConfig,
    LearnerConfig,
    OpenWallEffectConfig,
    RewardEffectConfig,
    RunIdentity,
    SimulationConfig,
    TrainingConfig,
    TriggerConfig,
    WallLineConfig,
)


def _goal_effects(reward: float, *, end: bool = True) -> list[EffectConfig]:
    effects: list[EffectConfig] = [RewardEffectConfig(delta=reward)]
    if end:
        effects.append(EndEpisodeEffectConfig())
    return effects


def goal_5x5_config(seed: int = 42) -> SimulationConfig:
    """One greedy agent on an open 5x5 grid; reaching (4, 4) pays 100 and ends the episode."""
    return SimulationConfig(
        identity=RunIdentity(name="goal_5x5", seed=seed),
        grid=GridConfig(rows=5, cols=5, step_penalty=-1.0),
        agents=[
            AgentConfig(
                id="A",
                start=(0, 0),
                goal=(4, 4),
                goal_reward=100.0,
                learner=LearnerConfig(
                    alpha=0.5, gamma=0.9, eps0=0.0, eps_min=0.0, warm=1, optimistic=0.0,
                ),
                on_goal=_goal_effects(100.0),
            ),
        ],
        training=TrainingConfig(episodes=300, step_limit=100, progress_every=100),
    )


def wall_config(seed: int = 42) -> SimulationConfig:
    """Two agents: Opener reaches a switch that opens the dividing wall for Runner."""
    learner = LearnerConfig(
        alpha=0.15, gamma=0.9, eps0=0.8, eps_min=0.1, warm=1_500, optimistic=0.5,
    )
    return SimulationConfig(
        identity=RunIdentity(name="wall", seed=seed),
        grid=GridConfig(
            rows=8,
            cols=12,
            step_penalty=-1.0,
            walls=[(2, 2), (3, 2), (5, 9), (6, 9)],
            wall_lines=[WallLineConfig(direction="vertical", start=(1, 6), end=(6, 6))],
        ),
        agents=[
            AgentConfig(
                id="Opener",
                start=(1, 1),
                goal=(6, 2),
                goal_reward=25.0,
                learner=learner,
                on_goal=[RewardEffectConfig(delta=25.0), OpenWallEffectConfig(at=(4, 6))],
            ),
            AgentConfig(
                id="Runner",
                start=(1, 2),
                goal=(6, 10),
                goal_reward=55.0,
                learner=learner,
                on_goal=_goal_effects(55.0),
            ),
        ],
        training=TrainingConfig(
            episodes=12_000, step_limit=300, step_delay_ms=100, show_after=10_000,
        ),
    )


def treasure_hunt_config(seed: int = 42) -> SimulationConfig:
    """Three agents: keys open the treasure chamber, a guardian clears obstacles."""

    def learner(optimistic: float) -> LearnerConfig:
        return LearnerConfig(
            alpha=0.15, gamma=0.95, eps0=0.9, eps_min=0.05, warm=3_000, optimistic=optimistic,
        )

    return SimulationConfig(
        identity=RunIdentity(name="treasure_hunt", seed=seed),
        grid=GridConfig(
            rows=12,
            cols=15,
            step_penalty=-1.0,
            walls=[(9, 10), (10, 10), (6, 7), (7, 7), (5, 2), (1, 8), (2, 11)],
            wall_lines=[
                WallLineConfig(direction="horizontal", start=(8, 10), end=(8, 14)),
                WallLineConfig(direction="horizontal", start=(11, 10), end=(11, 14)),
                WallLineConfig(direction="vertical", start=(8, 10), end=(11, 10)),
                WallLineConfig(direction="vertical", start=(8, 14), end=(11, 14)),
                WallLineConfig(direction="horizontal", start=(4, 5), end=(4, 9)),
                WallLineConfig(direction="vertical", start=(1, 3), end=(3, 3)),
                WallLineConfig(direction="horizontal", start=(2, 1), end=(2, 2)),
            ],
        ),
        agents=[
            AgentConfig(id="KeyMaster", start=(0, 0), goal=(1, 12), goal_reward=60.0,
                        learner=learner(1.0)),
            AgentConfig(id="Guardian", start=(0, 14), goal=(5, 7), goal_reward=70.0,
                        learner=learner(0.8)),
            AgentConfig(id="TreasureHunter", start=(11, 0), goal=(9, 12), goal_reward=150.0,
                        learner=learner(0.5)),
        ],
        triggers=[
            TriggerConfig(agent="KeyMaster", at=(1, 12), effects=[
                OpenWallEffectConfig(at=(9, 10)), RewardEffectConfig(delta=40.0),
            ]),
            TriggerConfig(agent="KeyMaster", at=(3, 1), effects=[
                OpenWallEffectConfig(at=(10, 10)), RewardEffectConfig(delta=40.0),
            ]),
            TriggerConfig(agent="Guardian", at=(5, 7), effects=[
                OpenWallEffectConfig(at=(6, 7)),
                OpenWallEffectConfig(at=(7, 7)),
                RewardEffectConfig(delta=50.0),
            ]),
            TriggerConfig(agent="Guardian", at=(2, 5), effects=[
                OpenWallEffectConfig(at=(4, 7)), RewardEffectConfig(delta=30.0),
            ]),
            TriggerConfig(agent="TreasureHunter", at=(9, 12), effects=_goal_effects(100.0)),
        ],
        training=TrainingConfig(
            episodes=20_000, step_limit=600, step_delay_ms=150, show_after=17_000,
        ),
    )


FOUR_AGENT_MAZE = """
..........
..........
..###.##..
..#....#..
..#.#..#..
.......#..
..#..#....
..###.##..
..........
..........
"""


def four_agent_maze_config(seed: int = 42) -> SimulationConfig:
    """Four corner agents heading into a small central maze; the first arrival ends the episode."""
    learner = LearnerConfig(
        alpha=0.12, gamma=0.9, eps0=0.85, eps_min=0.1, warm=2_000, optimistic=0.3,
    )
    corners = [
        ("NorthWest", (0, 0), (5, 5), 80.0),
        ("NorthEast", (0, 9), (3, 3), 75.0),
        ("SouthWest", (9, 0), (6, 6), 85.0),
        ("SouthEast", (9, 9), (4, 3), 90.0),
    ]
    return SimulationConfig(
        identity=RunIdentity(name="four_agent_maze", seed=seed),
        grid=GridConfig(rows=10, cols=10, step_penalty=-1.0, ascii_walls=FOUR_AGENT_MAZE),
        agents=[
            AgentConfig(
                id=name, start=start, goal=goal, goal_reward=reward,
                learner=learner, on_goal=_goal_effects(reward),
            )
            for name, start, goal, reward in corners
        ],
        training=TrainingConfig(
            episodes=18_000, step_limit=400, step_delay_ms=120, show_after=15_000,
        ),
    )


def default_config(seed: int = 42) -> SimulationConfig:
    """Return a complete, valid default config (the two-agent wall scenario)."""
    return wall_config(seed)


SCENARIOS: dict[str, Callable[[int], SimulationConfig]] = {
    "goal_5x5": goal_5x5_config,
    "wall": wall_config,
    "treasure_hunt": treasure_hunt_config,
    "four_agent_maze": four_agent_maze_config,
}


def scenario_presets(seed: int = 42) -> dict[str, SimulationConfig]:
    """Return every named scenario, built with *seed*."""
    return {name: factory(seed) for name, factory in SCENARIOS.items()}
