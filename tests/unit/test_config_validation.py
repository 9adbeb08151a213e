"""Tests for the simulation configuration schema.

Covers:
  - valid config construction and defaults
  - wall sources (cells, ASCII map, lines) and their bounds
  - cross-field validators (unique ids, cells in bounds, trigger agents)
  - learner constraints
  - effect discriminated union from JSON
  - default config and presets
"""

import pytest
from pydantic import ValidationError

from gridsim.config.defaults import default_config, scenario_presets
from gridsim.config.schema import (
    AgentConfig,
    EndEpisodeEffectConfig,
    GridConfig,
    InstrumentationConfig,
    LearnerConfig,
    OpenWallEffectConfig,
    RewardEffectConfig,
    RunIdentity,
    SimulationConfig,
    TrainingConfig,
    TriggerConfig,
    WallLineConfig,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _base_kwargs(seed: int = 42) -> dict:
    """Return kwargs that produce a valid SimulationConfig."""
    return dict(
        identity=RunIdentity(seed=seed),
        grid=GridConfig(rows=4, cols=5, walls=[(1, 1)]),
        agents=[
            AgentConfig(id="A", start=(0, 0), goal=(3, 4), goal_reward=10.0),
            AgentConfig(id="B", start=(3, 0), goal=(0, 4)),
        ],
        triggers=[
            TriggerConfig(agent="A", at=(2, 2), effects=[OpenWallEffectConfig(at=(1, 1))]),
        ],
        training=TrainingConfig(episodes=10, step_limit=20),
    )


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestValidConfig:
    def test_explicit_valid_config(self):
        cfg = SimulationConfig(**_base_kwargs())
        assert cfg.identity.seed == 42
        assert len(cfg.agents) == 2

    def test_learner_defaults(self):
        learner = LearnerConfig()
        assert (learner.alpha, learner.gamma, learner.eps0, learner.eps_min) == (0.1, 0.9, 0.9, 0.15)
        assert learner.warm == 10_000
        assert learner.optimistic == 0.0

    def test_training_and_instrumentation_defaults(self):
        cfg = SimulationConfig(**_base_kwargs())
        assert cfg.training.progress_every == 1_000
        assert cfg.grid.step_penalty == -1.0
        assert cfg.instrumentation.enable_episode_metrics is True
        assert cfg.instrumentation.episode_log_frequency == 1
        assert cfg.instrumentation.recent_events == 1_000

    def test_recent_events_must_be_positive(self):
        with pytest.raises(ValidationError):
            InstrumentationConfig(recent_events=0)

    def test_json_round_trip(self):
        cfg = SimulationConfig(**_base_kwargs())
        again = SimulationConfig.model_validate_json(cfg.model_dump_json())
        assert again == cfg

    def test_effects_from_json(self):
        raw = """
        {
          "identity": {"seed": 1},
          "grid": {"rows": 3, "cols": 3, "walls": [[0, 1]]},
          "agents": [{"id": "A", "start": [0, 0], "goal": [2, 2],
                      "on_goal": [{"kind": "reward", "delta": 5}, {"kind": "end_episode"}]}],
          "triggers": [{"agent": "A", "at": [1, 0], "effects": [{"kind": "open_wall", "at": [0, 1]}]}],
          "training": {"episodes": 3, "step_limit": 5}
        }
        """
        cfg = SimulationConfig.model_validate_json(raw)
        assert isinstance(cfg.agents[0].on_goal[0], RewardEffectConfig)
        assert isinstance(cfg.agents[0].on_goal[1], EndEpisodeEffectConfig)
        assert isinstance(cfg.triggers[0].effects[0], OpenWallEffectConfig)

    def test_unknown_effect_kind_rejected(self):
        with pytest.raises(ValidationError):
            TriggerConfig.model_validate({"agent": "A", "at": [0, 0], "effects": [{"kind": "teleport"}]})


# ---------------------------------------------------------------------------
# Walls
# ---------------------------------------------------------------------------

class TestWalls:
    def test_all_sources_merge(self):
        grid = GridConfig(
            rows=4,
            cols=4,
            walls=[(0, 0)],
            ascii_walls="....\n.#..\n....\n....",
            wall_lines=[WallLineConfig(direction="vertical", start=(1, 3), end=(3, 3))],
        )
        assert grid.all_walls() == {(0, 0), (1, 1), (1, 3), (2, 3), (3, 3)}

    def test_wall_outside_grid(self):
        with pytest.raises(ValidationError, match="outside"):
            GridConfig(rows=2, cols=2, walls=[(2, 0)])

    def test_ascii_map_larger_than_grid(self):
        with pytest.raises(ValidationError, match="outside"):
            GridConfig(rows=1, cols=2, ascii_walls="..#")

    def test_misaligned_wall_line(self):
        with pytest.raises(ValidationError, match="equal rows"):
            WallLineConfig(direction="horizontal", start=(0, 0), end=(1, 3))


# ---------------------------------------------------------------------------
# Cross-field validators
# ---------------------------------------------------------------------------

class TestCrossField:
    def test_duplicate_agent_ids(self):
        kwargs = _base_kwargs()
        kwargs["agents"] = [
            AgentConfig(id="A", start=(0, 0), goal=(1, 0)),
            AgentConfig(id="A", start=(2, 0), goal=(3, 0)),
        ]
        with pytest.raises(ValidationError, match="Duplicate agent ids"):
            SimulationConfig(**kwargs)

    def test_start_out_of_bounds(self):
        kwargs = _base_kwargs()
        kwargs["agents"] = [AgentConfig(id="A", start=(4, 0), goal=(0, 0))]
        kwargs["triggers"] = []
        with pytest.raises(ValidationError, match="start"):
            SimulationConfig(**kwargs)

    def test_goal_out_of_bounds(self):
        kwargs = _base_kwargs()
        kwargs["agents"] = [AgentConfig(id="A", start=(0, 0), goal=(0, 5))]
        kwargs["triggers"] = []
        with pytest.raises(ValidationError, match="goal"):
            SimulationConfig(**kwargs)

    def test_trigger_unknown_agent(self):
        kwargs = _base_kwargs()
        kwargs["triggers"] = [TriggerConfig(agent="Z", at=(0, 0), effects=[EndEpisodeEffectConfig()])]
        with pytest.raises(ValidationError, match="unknown agent"):
            SimulationConfig(**kwargs)

    def test_trigger_cell_out_of_bounds(self):
        kwargs = _base_kwargs()
        kwargs["triggers"] = [TriggerConfig(agent="A", at=(9, 9), effects=[EndEpisodeEffectConfig()])]
        with pytest.raises(ValidationError, match="Trigger cell"):
            SimulationConfig(**kwargs)

    def test_open_wall_target_out_of_bounds(self):
        kwargs = _base_kwargs()
        kwargs["agents"] = [
            AgentConfig(id="A", start=(0, 0), goal=(1, 0), on_goal=[OpenWallEffectConfig(at=(0, 7))]),
        ]
        kwargs["triggers"] = []
        with pytest.raises(ValidationError, match="open_wall"):
            SimulationConfig(**kwargs)

    def test_needs_at_least_one_agent(self):
        kwargs = _base_kwargs()
        kwargs["agents"] = []
        kwargs["triggers"] = []
        with pytest.raises(ValidationError):
            SimulationConfig(**kwargs)


# ---------------------------------------------------------------------------
# Learner & training fields
# ---------------------------------------------------------------------------

class TestLearnerConfig:
    def test_floor_above_start_rejected(self):
        with pytest.raises(ValidationError, match="eps_min"):
            LearnerConfig(eps0=0.1, eps_min=0.5)

    @pytest.mark.parametrize("field, value", [
        ("alpha", 1.5), ("gamma", -0.1), ("eps0", 2.0), ("warm", -1), ("optimistic", -1.0),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            LearnerConfig(**{field: value})

    def test_episode_budget_must_be_positive(self):
        with pytest.raises(ValidationError):
            TrainingConfig(episodes=0, step_limit=10)
        with pytest.raises(ValidationError):
            TrainingConfig(episodes=1, step_limit=0)

    def test_negative_seed_rejected(self):
        with pytest.raises(ValidationError):
            RunIdentity(seed=-1)


# ---------------------------------------------------------------------------
# Defaults & presets
# ---------------------------------------------------------------------------

class TestPresets:
    def test_default_config_is_valid(self):
        cfg = default_config()
        assert cfg.identity.name == "wall"
        assert [a.id for a in cfg.agents] == ["Opener", "Runner"]

    def test_presets_are_valid_and_seeded(self):
        presets = scenario_presets(seed=7)
        assert set(presets) == {"goal_5x5", "wall", "treasure_hunt", "four_agent_maze"}
        for cfg in presets.values():
            assert cfg.identity.seed == 7

    def test_preset_goals_are_not_walls(self):
        for name, cfg in scenario_presets().items():
            walls = cfg.grid.all_walls()
            for agent in cfg.agents:
                assert agent.start not in walls, name
                assert agent.goal not in walls, name
