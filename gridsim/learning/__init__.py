"""Tabular Q-learning: value table, exploration policy, per-agent learner."""

from gridsim.learning.exploration import ActionChoice, ExplorationPolicy
from gridsim.learning.learner import BaseLearner, QLearner
from gridsim.learning.parameters import LearningParameters
from gridsim.learning.qtable import QTable
from gridsim.learning.qtable_json import parse_qtable_json

__all__ = [
    "ActionChoice",
    "BaseLearner",
    "ExplorationPolicy",
    "LearningParameters",
    "QLearner",
    "QTable",
    "parse_qtable_json",
]
