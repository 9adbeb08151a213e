"""Tabular Q-learning hyper-parameters and the epsilon schedule."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LearningParameters:
    """Hyper-parameters for one agent's Q-learner.

    Parameters
    ----------
    alpha : float
        Learning rate in [0, 1].
    gamma : float
        Discount factor in [0, 1].
    eps0 : float
        Exploration rate held during the warm-up period.
    eps_min : float
        Floor the exploration rate decays to.
    warm : int
        Warm-up length in episodes; also the length of the linear decay.
    optimistic : float
        Value assumed for (state, action) pairs never updated.
    """

    alpha: float = 0.1
    gamma: float = 0.9
    eps0: float = 0.9
    eps_min: float = 0.15
    warm: int = 10_000
    optimistic: float = 0.0

    def epsilon(self, episode: int) -> float:
        """Exploration rate for a given episode number.

        Holds at ``eps0`` while ``episode < warm``, then decays linearly
        over another ``warm`` episodes and floors at ``eps_min``.
        """
        if episode < self.warm:
            return self.eps0
        if self.warm == 0:
            return self.eps_min
        decayed = self.eps0 - (self.eps0 - self.eps_min) * (episode - self.warm) / self.warm
        return max(self.eps_min, decayed)
