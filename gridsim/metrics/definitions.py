"""Metric names and minimal schemas for training runs.

Defines three categories:
  - Episode metrics: one record per (logged) training episode
  - Summary metrics: one record for the whole run
  - Event types: semantic events (trigger fired, wall opened, episode completed)

All schemas are plain dicts describing expected keys and types,
used for documentation and optional runtime validation.
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Episode metric keys (one record per episode)
# ---------------------------------------------------------------------------

EPISODE_METRIC_KEYS: list[str] = [
    "episode",
    "steps",
    "reward",
    "completed",
    "termination_reason",
    "opened_walls",
    "epsilon",
]

EPISODE_METRIC_SCHEMA: dict[str, str] = {
    "episode": "int",
    "steps": "int",
    "reward": "float",
    "completed": "bool",
    "termination_reason": "str",
    "opened_walls": "list[list[int]]",
    "epsilon": "dict[str, float]",
}


# ---------------------------------------------------------------------------
# Run summary keys (one record per training run)
# ---------------------------------------------------------------------------

SUMMARY_METRIC_KEYS: list[str] = [
    "episodes",
    "total_reward",
    "completion_rate",
    "mean_steps_last_window",
    "mean_reward_last_window",
]


# ---------------------------------------------------------------------------
# Semantic event types
# ---------------------------------------------------------------------------

class EventType(Enum):
    """Semantic events emitted during a training run."""

    TRIGGER_FIRED = "trigger_fired"
    WALL_OPENED = "wall_opened"
    EPISODE_COMPLETED = "episode_completed"


EVENT_SCHEMAS: dict[str, dict[str, str]] = {
    EventType.TRIGGER_FIRED.value: {
        "event": "str",
        "episode": "int",
        "step": "int",
        "agent_id": "str",
        "at": "list[int]",
    },
    EventType.WALL_OPENED.value: {
        "event": "str",
        "episode": "int",
        "step": "int",
        "at": "list[int]",
    },
    EventType.EPISODE_COMPLETED.value: {
        "event": "str",
        "episode": "int",
        "step": "int",
    },
}
