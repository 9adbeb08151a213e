"""Training artifact writer for one run directory, {base_dir}/{run_id}/.

Files:
  - config.json            validated SimulationConfig, as JSON
  - episodes.jsonl         one line per logged episode
  - events.jsonl           trigger, wall and completion events
  - training_summary.json  counters and metric summary, written last

Learned Q-values are not persisted here.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel

CONFIG_FILE = "config.json"
EPISODES_FILE = "episodes.jsonl"
EVENTS_FILE = "events.jsonl"
SUMMARY_FILE = "training_summary.json"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunLogger:
    """Writes the artifacts of a single training run."""

    def __init__(self, base_dir: str | Path, run_id: str) -> None:
        if not run_id or Path(run_id).name != run_id:
            raise ValueError(f"run_id must be a plain directory name, got {run_id!r}")
        self._run_id = run_id
        self._run_dir = Path(base_dir) / run_id
        self._run_dir.mkdir(parents=True, exist_ok=True)
        self._episode_lines = 0
        self._event_lines = 0

    @classmethod
    def for_scenario(
        cls, base_dir: str | Path, scenario: str, run_id: str | None = None
    ) -> RunLogger:
        """Open a run named ``run_id``, or ``{scenario}_{UTC timestamp}`` when omitted."""
        if run_id is None:
            run_id = f"{scenario}_{_utc_now().strftime('%Y%m%dT%H%M%SZ')}"
        return cls(base_dir, run_id)

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    @property
    def episode_lines(self) -> int:
        """Episode records appended so far."""
        return self._episode_lines

    @property
    def event_lines(self) -> int:
        return self._event_lines

    def artifacts(self) -> list[Path]:
        """Artifact files present in the run directory, in a fixed order."""
        names = (CONFIG_FILE, EPISODES_FILE, EVENTS_FILE, SUMMARY_FILE)
        return [self._run_dir / n for n in names if (self._run_dir / n).exists()]

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def write_config(self, config: BaseModel | dict[str, Any]) -> None:
        """Snapshot the run's configuration as config.json."""
        body = config.model_dump(mode="json") if isinstance(config, BaseModel) else dict(config)
        self._write_json(CONFIG_FILE, body)

    def log_episode_metrics(self, records: Iterable[dict[str, Any]]) -> None:
        self._episode_lines += self._append(EPISODES_FILE, records)

    def log_events(self, events: Iterable[dict[str, Any]]) -> None:
        self._event_lines += self._append(EVENTS_FILE, events)

    def write_training_summary(self, summary: dict[str, Any]) -> None:
        """Write training_summary.json; an empty summary writes nothing."""
        if summary:
            self._write_json(SUMMARY_FILE, summary)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write_json(self, name: str, body: dict[str, Any]) -> None:
        payload = {"run_id": self._run_id, "written_at": _utc_now().isoformat(), **body}
        (self._run_dir / name).write_text(
            json.dumps(payload, indent=2, default=str), encoding="utf-8"
        )

    def _append(self, name: str, rows: Iterable[dict[str, Any]]) -> int:
        lines = [json.dumps(row, default=str) for row in rows]
        if not lines:
            return 0
        with (self._run_dir / name).open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return len(lines)
