"""Metrics collector for training runs.

Ingests step snapshots and finished episodes to produce:
  - structured per-episode metric dicts
  - semantic event records
  - a run-level summary

Respects InstrumentationConfig flags and episode_log_frequency.
"""

from __future__ import annotations

from collections import deque
from typing import Any

import numpy as np

from gridsim.config.schema import InstrumentationConfig
from gridsim.core.types import AgentID, Position
from gridsim.envs.grid.state import EpisodeSnapshot
from gridsim.metrics.definitions import EventType
from gridsim.runner.episode import EpisodeResult
from gridsim.world.model import OpenWall


def _cell(position: Position) -> list[int]:
    return [position.row, position.col]


class MetricsCollector:
    """Collects and structures metrics for a training run."""

    def __init__(self, config: InstrumentationConfig) -> None:
        self._config = config
        self._recent_events: deque[dict[str, Any]] = deque(maxlen=config.recent_events)
        self._pending_events: list[dict[str, Any]] = []
        self._episodes = 0
        self._completed = 0
        self._total_reward = 0.0
        self._recent_steps: deque[int] = deque(maxlen=config.summary_window)
        self._recent_rewards: deque[float] = deque(maxlen=config.summary_window)

    # ------------------------------------------------------------------
    # Step events
    # ------------------------------------------------------------------

    def observe_step(self, episode: int, snapshot: EpisodeSnapshot) -> None:
        """Turn the triggers fired in *snapshot* into semantic events."""
        if not self._config.enable_event_log:
            return
        for trigger in snapshot.fired:
            self._record({
                "event": EventType.TRIGGER_FIRED.value,
                "episode": episode,
                "step": snapshot.step,
                "agent_id": trigger.agent_id,
                "at": _cell(trigger.at),
            })
            for effect in trigger.effects:
                if isinstance(effect, OpenWall):
                    self._record({
                        "event": EventType.WALL_OPENED.value,
                        "episode": episode,
                        "step": snapshot.step,
                        "at": _cell(effect.at),
                    })

    def _record(self, event: dict[str, Any]) -> None:
        self._recent_events.append(event)
        self._pending_events.append(event)

    # ------------------------------------------------------------------
    # Episode metrics
    # ------------------------------------------------------------------

    def collect_episode(
        self,
        episode: int,
        result: EpisodeResult,
        epsilon: dict[AgentID, float],
    ) -> dict[str, Any] | None:
        """Accumulate totals and build the episode record.

        Returns None if episode metrics are disabled or this episode is
        skipped by episode_log_frequency.
        """
        self._episodes += 1
        self._total_reward += result.total_reward
        self._recent_steps.append(result.steps)
        self._recent_rewards.append(result.total_reward)
        if result.completed:
            self._completed += 1
            if self._config.enable_event_log:
                self._record({
                    "event": EventType.EPISODE_COMPLETED.value,
                    "episode": episode,
                    "step": result.steps,
                })

        if not self._config.enable_episode_metrics:
            return None
        if episode % self._config.episode_log_frequency != 0:
            return None

        return {
            "episode": episode,
            "steps": result.steps,
            "reward": result.total_reward,
            "completed": result.completed,
            "termination_reason": result.termination_reason.value,
            "opened_walls": sorted(_cell(p) for p in result.opened_walls),
            "epsilon": dict(epsilon),
        }

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @property
    def events(self) -> list[dict[str, Any]]:
        """The most recent ``recent_events`` events, oldest first."""
        return list(self._recent_events)

    def drain_events(self) -> list[dict[str, Any]]:
        """Events recorded since the last drain."""
        pending, self._pending_events = self._pending_events, []
        return pending

    # ------------------------------------------------------------------
    # Run summary
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        if self._episodes == 0:
            return {
                "episodes": 0,
                "total_reward": 0.0,
                "completion_rate": 0.0,
                "mean_steps_last_window": 0.0,
                "mean_reward_last_window": 0.0,
            }
        return {
            "episodes": self._episodes,
            "total_reward": self._total_reward,
            "completion_rate": self._completed / self._episodes,
            "mean_steps_last_window": float(np.mean(self._recent_steps)),
            "mean_reward_last_window": float(np.mean(self._recent_rewards)),
        }
