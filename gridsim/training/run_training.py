"""CLI entrypoint: python -m gridsim.training.run_training

Usage:
    python -m gridsim.training.run_training --scenario wall --episodes 2000
    python -m gridsim.training.run_training --config my_world.json --seed 7 --out-dir storage/runs
    python -m gridsim.training.run_training --scenario goal_5x5 --qtable A=generated.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from gridsim.config.builder import build_world
from gridsim.config.defaults import SCENARIOS
from gridsim.config.schema import SimulationConfig
from gridsim.learning.qtable_json import parse_qtable_json
from gridsim.metrics.collector import MetricsCollector
from gridsim.runner.run_logger import RunLogger
from gridsim.training.trainer import Trainer
from gridsim.world.model import WorldSpec

DEFAULT_SEED = 42


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Train tabular Q-learning agents in a multi-agent grid world."
    )
    parser.add_argument(
        "--scenario",
        default="wall",
        choices=sorted(SCENARIOS),
        help="Named scenario preset (ignored when --config is given).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a SimulationConfig JSON file.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help=f"Root seed override (presets default to {DEFAULT_SEED}).",
    )
    parser.add_argument(
        "--episodes",
        type=int,
        default=None,
        help="Override the number of training episodes.",
    )
    parser.add_argument(
        "--step-limit",
        type=int,
        default=None,
        help="Override the per-episode step limit.",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        default=None,
        help="Print a progress line every N episodes.",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="Write run artifacts to OUT_DIR/RUN_ID/ (nothing is written otherwise).",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Artifact directory name (defaults to scenario name + UTC timestamp).",
    )
    parser.add_argument(
        "--qtable",
        action="append",
        default=[],
        metavar="AGENT=PATH",
        help="Preload an agent's Q-table from JSON before training. Repeatable.",
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> SimulationConfig:
    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            raise FileNotFoundError(f"config not found: {config_path}")
        config = SimulationConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
        if args.seed is not None:
            config = config.model_copy(
                update={"identity": config.identity.model_copy(update={"seed": args.seed})}
            )
    else:
        seed = DEFAULT_SEED if args.seed is None else args.seed
        config = SCENARIOS[args.scenario](seed)

    overrides = {
        "episodes": args.episodes,
        "step_limit": args.step_limit,
        "progress_every": args.progress_every,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        # Re-validate so CLI overrides get the same bounds as file values.
        training = config.training.model_copy(update=overrides)
        config = SimulationConfig.model_validate(
            {**config.model_dump(), "training": training.model_dump()}
        )
    return config


def _preload_qtables(world: WorldSpec, entries: list[str]) -> None:
    for entry in entries:
        agent_id, sep, path = entry.partition("=")
        if not sep or not agent_id or not path:
            raise ValueError(f"--qtable expects AGENT=PATH, got {entry!r}")
        try:
            learner = world.agent(agent_id).learner
        except KeyError:
            raise ValueError(f"--qtable names unknown agent {agent_id!r}") from None
        values = parse_qtable_json(Path(path).read_text(encoding="utf-8"))
        learner.load_values(values)
        print(f"  Loaded {len(values)} Q-values for {agent_id} from {path}")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        config = _load_config(args)
        world = build_world(config)
        _preload_qtables(world, args.qtable)
        run_logger = None
        if args.out_dir is not None:
            run_logger = RunLogger.for_scenario(args.out_dir, config.identity.name, args.run_id)
            run_logger.write_config(config)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    print(
        f"Training {config.identity.name!r}: {len(world.agents)} agents, "
        f"{world.rows}x{world.cols} grid, {world.episodes} episodes "
        f"(seed={config.identity.seed}) ..."
    )
    trainer = Trainer(
        world,
        progress_every=config.training.progress_every,
        collector=MetricsCollector(config.instrumentation),
        run_logger=run_logger,
    )
    summary = trainer.run()

    print(
        f"Done: {summary.episodes} episodes, "
        f"{summary.completed_episodes} ended by an end_episode effect, "
        f"total reward {summary.total_reward:.1f}"
    )
    for agent_id, eps in summary.final_epsilon.items():
        print(f"  {agent_id}: epsilon={eps:.3f}")
    if run_logger is not None:
        print(f"Artifacts saved to: {run_logger.run_dir}")
        for path in run_logger.artifacts():
            print(f"  {path.name}")


if __name__ == "__main__":
    main()
