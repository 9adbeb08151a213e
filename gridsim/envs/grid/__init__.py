"""Grid world package: transitions, dynamic walls and triggers, episode state."""

from gridsim.envs.grid.env import GridEnvironment
from gridsim.envs.grid.state import EpisodeSnapshot, EpisodeState
from gridsim.envs.grid.walls import WallTriggerManager

__all__ = ["EpisodeSnapshot", "EpisodeState", "GridEnvironment", "WallTriggerManager"]
