"""Wall & trigger manager: the dynamic part of a world within one episode.

Owns the set of walls opened so far, the triggers still eligible to fire,
and the episode-done flag raised by ``EndEpisode``. Triggers fire at most
once per episode; ``reset()`` makes every trigger eligible again.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import assert_never

from gridsim.core.types import AgentID, Position
from gridsim.world.model import Effect, EndEpisode, OpenWall, Reward, Trigger


class WallTriggerManager:
    """Per-episode wall state and trigger firing."""

    def __init__(
        self,
        static_walls: Iterable[Position],
        triggers: Iterable[Trigger],
    ) -> None:
        self._static_walls = frozenset(static_walls)
        self._triggers = tuple(triggers)
        self._opened: set[Position] = set()
        self._eligible: list[Trigger] = list(self._triggers)
        self._done = False
        self._effective = self._static_walls
        self._last_fired: tuple[Trigger, ...] = ()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restore the full trigger list, close every opened wall, clear done."""
        self._opened.clear()
        self._eligible = list(self._triggers)
        self._done = False
        self._effective = self._static_walls
        self._last_fired = ()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def static_walls(self) -> frozenset[Position]:
        return self._static_walls

    @property
    def effective_walls(self) -> frozenset[Position]:
        """Static walls minus those opened this episode."""
        return self._effective

    @property
    def opened_walls(self) -> frozenset[Position]:
        return frozenset(self._opened)

    @property
    def eligible_triggers(self) -> tuple[Trigger, ...]:
        return tuple(self._eligible)

    @property
    def last_fired(self) -> tuple[Trigger, ...]:
        """Triggers fired by the most recent ``process_triggers`` call, in list order."""
        return self._last_fired

    def is_done(self) -> bool:
        return self._done

    # ------------------------------------------------------------------
    # Firing
    # ------------------------------------------------------------------

    def process_triggers(self, next_positions: Mapping[AgentID, Position]) -> dict[AgentID, float]:
        """Fire every eligible trigger whose agent now stands on its cell.

        Effects are applied trigger by trigger, in trigger-list order.
        Returns a bonus for every agent in *next_positions*; agents with no
        fired trigger get 0.0.
        """
        fired: list[Trigger] = []
        remaining: list[Trigger] = []
        for trigger in self._eligible:
            if next_positions.get(trigger.agent_id) == trigger.at:
                fired.append(trigger)
            else:
                remaining.append(trigger)
        self._eligible = remaining
        self._last_fired = tuple(fired)

        bonuses = {aid: 0.0 for aid in next_positions}
        for trigger in fired:
            bonuses[trigger.agent_id] = bonuses.get(trigger.agent_id, 0.0) + self._apply_effects(
                trigger.effects
            )
        return bonuses

    def _apply_effects(self, effects: Iterable[Effect]) -> float:
        bonus = 0.0
        opened_any = False
        for effect in effects:
            match effect:
                case OpenWall(at=at):
                    self._opened.add(at)
                    opened_any = True
                case Reward(delta=delta):
                    bonus += delta
                case EndEpisode():
                    self._done = True
                case _:
                    assert_never(effect)
        if opened_any:
            self._effective = self._static_walls - self._opened
        return bonus
