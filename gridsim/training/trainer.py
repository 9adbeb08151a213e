"""Training loop driver: runs a WorldSpec's episodes back to back.

Per episode:
  1. reset walls, triggers and agent positions
  2. run the episode to termination
  3. advance every learner's episode counter
  4. accumulate reward, metrics and (optionally) a progress line

All simulation logic lives in the EpisodeRunner; the trainer only keeps
an episode counter and running totals.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gridsim.core.types import AgentID
from gridsim.envs.grid.state import EpisodeSnapshot
from gridsim.metrics.collector import MetricsCollector
from gridsim.runner.episode import EpisodeResult, EpisodeRunner
from gridsim.runner.run_logger import RunLogger
from gridsim.world.model import WorldSpec

ProgressSink = Callable[[str], None]
TrainingObserver = Callable[[int, EpisodeSnapshot], None]


@dataclass(frozen=True, slots=True)
class TrainingSummary:
    """What a finished training run produced."""

    episodes: int
    total_reward: float
    completed_episodes: int
    final_epsilon: dict[AgentID, float]
    results: tuple[EpisodeResult, ...] = ()

    @property
    def completion_rate(self) -> float:
        return self.completed_episodes / self.episodes if self.episodes else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "episodes": self.episodes,
            "total_reward": self.total_reward,
            "completed_episodes": self.completed_episodes,
            "completion_rate": self.completion_rate,
            "final_epsilon": dict(self.final_epsilon),
        }


class Trainer:
    """Runs ``world.episodes`` episodes and reports progress.

    Parameters
    ----------
    world : WorldSpec
        Fully-resolved world, learners included. Learners keep what they
        learn across episodes and after ``run()`` returns.
    progress_every : int
        Emit ``"Episode N finished in S steps"`` every N episodes.
    progress : callable, optional
        Sink for progress lines. Defaults to ``print``; pass ``None`` to
        silence.
    collector : MetricsCollector, optional
        Receives every step snapshot and finished episode.
    run_logger : RunLogger, optional
        Receives episode records and events from ``collector``, plus the
        final summary.
    observer : callable, optional
        Called as ``observer(episode, snapshot)`` after every step, e.g.
        by a visualizer.
    keep_results : bool
        Keep every EpisodeResult on the returned summary.
    """

    def __init__(
        self,
        world: WorldSpec,
        *,
        progress_every: int = 1_000,
        progress: ProgressSink | None = print,
        collector: MetricsCollector | None = None,
        run_logger: RunLogger | None = None,
        observer: TrainingObserver | None = None,
        keep_results: bool = False,
    ) -> None:
        if progress_every < 1:
            raise ValueError(f"progress_every must be >= 1, got {progress_every}")
        self._world = world
        self._runner = EpisodeRunner(world)
        self._progress_every = progress_every
        self._progress = progress
        self._collector = collector
        self._run_logger = run_logger
        self._observer = observer
        self._keep_results = keep_results

        self._episode = 0
        self._total_reward = 0.0
        self._completed = 0
        self._results: list[EpisodeResult] = []
        self._pending_records: list[dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def world(self) -> WorldSpec:
        return self._world

    @property
    def runner(self) -> EpisodeRunner:
        return self._runner

    @property
    def episodes_run(self) -> int:
        return self._episode

    @property
    def total_reward(self) -> float:
        return self._total_reward

    def epsilon(self) -> dict[AgentID, float]:
        coordinator = self._runner.coordinator
        return {aid: coordinator.epsilon(aid) for aid in coordinator.agent_ids}

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def run(self) -> TrainingSummary:
        """Run every remaining episode of the world and return the summary."""
        while self._episode < self._world.episodes:
            self.run_episode()
        self._flush()
        summary = self.summary()
        if self._run_logger is not None:
            payload = summary.to_dict()
            if self._collector is not None:
                payload["metrics"] = self._collector.summary()
            self._run_logger.write_training_summary(payload)
        return summary

    def run_episode(self) -> EpisodeResult:
        """Run exactly one episode and advance the exploration schedules."""
        episode = self._episode + 1
        epsilon = self.epsilon()

        self._runner.reset()
        result = self._runner.run(on_step=lambda snap: self._on_step(episode, snap))
        self._runner.coordinator.increment_episode()

        self._episode = episode
        self._total_reward += result.total_reward
        if result.completed:
            self._completed += 1
        if self._keep_results:
            self._results.append(result)

        if self._collector is not None:
            record = self._collector.collect_episode(episode, result, epsilon)
            if record is not None:
                self._pending_records.append(record)

        if episode % self._progress_every == 0:
            if self._progress is not None:
                self._progress(f"Episode {episode} finished in {result.steps} steps")
            self._flush()
        return result

    def summary(self) -> TrainingSummary:
        return TrainingSummary(
            episodes=self._episode,
            total_reward=self._total_reward,
            completed_episodes=self._completed,
            final_epsilon=self.epsilon(),
            results=tuple(self._results),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_step(self, episode: int, snapshot: EpisodeSnapshot) -> None:
        if self._collector is not None:
            self._collector.observe_step(episode, snapshot)
        if self._observer is not None:
            self._observer(episode, snapshot)

    def _flush(self) -> None:
        records, self._pending_records = self._pending_records, []
        events = self._collector.drain_events() if self._collector is not None else []
        if self._run_logger is not None:
            self._run_logger.log_episode_metrics(records)
            self._run_logger.log_events(events)
