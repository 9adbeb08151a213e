"""Unit tests for GridEnvironment transitions."""

import pytest

from gridsim.core.types import ALL_ACTIONS, Action, Position
from gridsim.envs.grid.env import GridEnvironment


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------

class TestDeterminism:
    def test_identical_inputs_identical_outputs(self):
        env = GridEnvironment(4, 5, walls=frozenset({Position(1, 1), Position(2, 3)}))
        for row in range(4):
            for col in range(5):
                for action in ALL_ACTIONS:
                    first = env.step(Position(row, col), action)
                    second = env.step(Position(row, col), action)
                    assert first == second

    def test_separate_instances_agree(self):
        walls = frozenset({Position(0, 1)})
        a = GridEnvironment(3, 3, -1.0, walls)
        b = GridEnvironment(3, 3, -1.0, walls)
        for action in ALL_ACTIONS:
            assert a.step(Position(1, 1), action) == b.step(Position(1, 1), action)


# ---------------------------------------------------------------------------
# Moves, walls, boundaries
# ---------------------------------------------------------------------------

class TestTransitions:
    @pytest.mark.parametrize("action, expected", [
        (Action.UP, Position(1, 2)),
        (Action.DOWN, Position(3, 2)),
        (Action.LEFT, Position(2, 1)),
        (Action.RIGHT, Position(2, 3)),
        (Action.STAY, Position(2, 2)),
    ])
    def test_open_moves(self, action, expected):
        env = GridEnvironment(5, 5)
        result = env.step(Position(2, 2), action)
        assert result.position == expected
        assert result.reward == -1.0

    def test_wall_blocks_but_still_costs(self):
        env = GridEnvironment(3, 3, step_penalty=-1.0, walls=frozenset({Position(1, 2)}))
        result = env.step(Position(1, 1), Action.RIGHT)
        assert result.position == Position(1, 1)
        assert result.reward == -1.0

    @pytest.mark.parametrize("start, action", [
        (Position(0, 0), Action.UP),
        (Position(0, 0), Action.LEFT),
        (Position(2, 2), Action.DOWN),
        (Position(2, 2), Action.RIGHT),
    ])
    def test_edges_clamp(self, start, action):
        env = GridEnvironment(3, 3)
        result = env.step(start, action)
        assert result.position == start
        assert result.reward == -1.0

    def test_custom_penalty(self):
        env = GridEnvironment(2, 2, step_penalty=-0.25)
        assert env.step(Position(0, 0), Action.RIGHT).reward == -0.25

    def test_with_walls(self):
        env = GridEnvironment(3, 3)
        walled = env.with_walls(frozenset({Position(0, 1)}))
        assert walled is not env
        assert env.step(Position(0, 0), Action.RIGHT).position == Position(0, 1)
        assert walled.step(Position(0, 0), Action.RIGHT).position == Position(0, 0)
        assert walled.with_walls(walled.walls) is walled

    def test_in_bounds(self):
        env = GridEnvironment(2, 3)
        assert env.in_bounds(Position(1, 2))
        assert not env.in_bounds(Position(2, 0))
        assert not env.in_bounds(Position(0, -1))
