"""Immutable training configuration for a Hoeffding tree."""
from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Integral, Real

from .exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class HoeffdingConfig:
    """Parameters fixed for one training run.

    Parameters
    ----------
    delta : float, default=1e-4
        One minus the probability that the attribute chosen at a node is the
        one a batch learner would choose on infinite data.  Must lie in
        ``(0, 1)``.
    tie_confidence : float, default=0.05
        When the Hoeffding bound drops below this value the node is split on
        the current best attribute, even if the runner-up is indistinguishable.
    n_min : int, default=30
        A leaf is only evaluated for a split when its instance count is a
        multiple of ``n_min``.
    """

    delta: float = 1e-4
    tie_confidence: float = 0.05
    n_min: int = 30

    def __post_init__(self):
        if isinstance(self.delta, bool) or not isinstance(self.delta, Real):
            raise InvalidConfigurationError(f"delta must be a number, got {self.delta!r}")
        if not (0.0 < float(self.delta) < 1.0):
            raise InvalidConfigurationError(f"delta must lie in (0, 1), got {self.delta!r}")
        if isinstance(self.n_min, bool) or not isinstance(self.n_min, Integral):
            raise InvalidConfigurationError(f"n_min must be an integer, got {self.n_min!r}")
        if self.n_min <= 0:
            raise InvalidConfigurationError(f"n_min must be positive, got {self.n_min!r}")
        if isinstance(self.tie_confidence, bool) or not isinstance(self.tie_confidence, Real):
            raise InvalidConfigurationError(
                f"tie_confidence must be a number, got {self.tie_confidence!r}")
        if not (float(self.tie_confidence) >= 0.0):
            raise InvalidConfigurationError(
                f"tie_confidence must be non-negative, got {self.tie_confidence!r}")
        # normalise numpy scalars and ints to plain Python types
        object.__setattr__(self, "delta", float(self.delta))
        object.__setattr__(self, "tie_confidence", float(self.tie_confidence))
        object.__setattr__(self, "n_min", int(self.n_min))

    @property
    def ln_inv_delta(self) -> float:
        return math.log(1.0 / self.delta)
