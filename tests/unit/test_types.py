"""Tests for the shared core types: Position, Action, TerminationReason."""

import pytest

from gridsim.core.types import ALL_ACTIONS, Action, Position, TerminationReason


class TestPosition:
    def test_str_matches_cell_label(self):
        assert str(Position(3, 4)) == "(3, 4)"

    def test_offset(self):
        assert Position(2, 2).offset(-1, 1) == Position(1, 3)

    def test_hashable_and_ordered(self):
        cells = {Position(1, 1), Position(1, 1), Position(0, 5)}
        assert len(cells) == 2
        assert sorted(cells) == [Position(0, 5), Position(1, 1)]

    @pytest.mark.parametrize("row, col", [(1.0, 2), (1, "2"), (True, 0)])
    def test_rejects_non_int_components(self, row, col):
        with pytest.raises(TypeError, match="must be ints"):
            Position(row, col)


class TestAction:
    def test_declaration_order(self):
        assert ALL_ACTIONS == (Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT, Action.STAY)

    def test_deltas(self):
        assert Action.UP.delta == (-1, 0)
        assert Action.DOWN.delta == (1, 0)
        assert Action.LEFT.delta == (0, -1)
        assert Action.RIGHT.delta == (0, 1)
        assert Action.STAY.delta == (0, 0)

    @pytest.mark.parametrize("label", ["Up", "UP", "up", " up "])
    def test_from_label_is_case_insensitive(self, label):
        assert Action.from_label(label) is Action.UP

    def test_from_label_unknown(self):
        with pytest.raises(ValueError, match="Unknown action"):
            Action.from_label("Jump")


class TestTerminationReason:
    def test_values(self):
        assert TerminationReason.END_EPISODE.value == "end_episode"
        assert TerminationReason.STEP_LIMIT.value == "step_limit"
