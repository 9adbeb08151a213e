"""Unit tests for the sparse Q-value table."""

import numpy as np
import pytest

from gridsim.core.seeding import make_rng
from gridsim.core.types import ALL_ACTIONS, Action, Position
from gridsim.learning.parameters import LearningParameters
from gridsim.learning.qtable import QTable


def _table(seed: int = 0, **params) -> QTable:
    return QTable(LearningParameters(**params), make_rng(seed))


S = Position(1, 1)
S2 = Position(1, 2)


class TestBestAction:
    def test_best_action_has_max_value(self):
        rng = np.random.default_rng(123)
        table = _table()
        for trial in range(200):
            state = Position(trial % 7, trial % 3)
            values = rng.normal(size=len(ALL_ACTIONS)).round(1)
            table.set_values({(state, a): float(v) for a, v in zip(ALL_ACTIONS, values)})
            best = table.best_action(state)
            assert table.value(state, best) == max(table.values(state))

    def test_ties_cover_every_tied_action(self):
        table = _table(seed=5)
        table.set_values({
            (S, Action.UP): 5.0,
            (S, Action.RIGHT): 5.0,
            (S, Action.DOWN): 1.0,
            (S, Action.LEFT): 1.0,
            (S, Action.STAY): 1.0,
        })
        chosen = {table.best_action(S) for _ in range(300)}
        assert chosen == {Action.UP, Action.RIGHT}

    def test_unvisited_state_ties_all_actions(self):
        table = _table(seed=9)
        chosen = {table.best_action(S) for _ in range(500)}
        assert chosen == set(ALL_ACTIONS)

    def test_best_actions_lists_all_maxima(self):
        table = _table()
        table.set_values({(S, Action.LEFT): 2.0, (S, Action.STAY): 2.0})
        assert table.best_actions(S) == [Action.LEFT, Action.STAY]


class TestUpdate:
    def test_optimistic_default(self):
        table = _table(optimistic=0.7)
        assert table.value(S, Action.UP) == 0.7
        assert not table.visited(S, Action.UP)
        assert len(table) == 0

    def test_backup_formula(self):
        table = _table(alpha=0.5, gamma=0.9)
        assert table.update(S, Action.RIGHT, -1.0, S2) == pytest.approx(-0.5)
        table.set_values({(S2, Action.RIGHT): 10.0})
        # 0.5 * -0.5 + 0.5 * (-1 + 0.9 * 10)
        assert table.update(S, Action.RIGHT, -1.0, S2) == pytest.approx(3.75)
        assert table.visited(S, Action.RIGHT)

    def test_reset_forgets(self):
        table = _table(optimistic=1.0)
        table.update(S, Action.UP, 5.0, S2)
        table.reset()
        assert len(table) == 0
        assert table.value(S, Action.UP) == 1.0


class TestSnapshot:
    def test_snapshot_is_isolated_from_later_updates(self):
        table = _table(alpha=0.5)
        table.update(S, Action.UP, 4.0, S2)
        snap = table.snapshot()
        before = snap[(S, Action.UP)]

        table.update(S, Action.UP, 100.0, S2)
        table.update(S2, Action.DOWN, 1.0, S)

        assert snap[(S, Action.UP)] == before
        assert (S2, Action.DOWN) not in snap

    def test_snapshot_is_read_only(self):
        table = _table()
        table.update(S, Action.UP, 1.0, S2)
        snap = table.snapshot()
        with pytest.raises(TypeError):
            snap[(S, Action.UP)] = 0.0  # type: ignore[index]


class TestToArray:
    def test_dense_export(self):
        table = _table(optimistic=0.5)
        table.set_values({(Position(1, 2), Action.RIGHT): 3.0, (Position(9, 9), Action.UP): 8.0})
        dense = table.to_array(2, 3)

        assert dense.shape == (2, 3, 5)
        assert dense[1, 2, ALL_ACTIONS.index(Action.RIGHT)] == 3.0
        assert dense[0, 0, 0] == 0.5
        assert np.count_nonzero(dense != 0.5) == 1
