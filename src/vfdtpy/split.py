# -*- coding: utf-8 -*-
"""
vfdtpy.split
============

Split decisions for Hoeffding tree leaves.

Given the statistics of a leaf, :class:`SplitEvaluator` computes the entropy
of the class distribution, the weighted conditional entropy obtained by
splitting on each candidate attribute, and the Hoeffding bound

.. math::

    \\epsilon = \\sqrt{\\frac{R^2 \\ln(1/\\delta)}{2n}},  \\qquad R = \\log_2 K

where ``K`` is the number of classes and ``n`` the number of instances seen
at the leaf.  A leaf is split on the attribute with the lowest conditional
entropy (highest information gain) when

* the runner-up is worse by more than ``epsilon`` (*confident*), or
* ``epsilon`` itself has fallen below the tie confidence (*tie*),

and in both cases only if that attribute actually lowers the entropy of the
leaf.  Entropies are recomputed from the counts at every evaluation.

Reference: Domingos, P. and Hulten, G. (2000). Mining high-speed data
streams. KDD '00, pp. 71-80.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .config import HoeffdingConfig
from .schema import Schema
from .stats import NodeStats


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def entropy(counts) -> float:
    """Shannon entropy (base 2) of a vector of class counts."""
    counts = np.asarray(counts, dtype=float)
    tot = counts.sum()
    if tot <= 0:
        return 0.0
    p = counts[counts > 0] / tot
    return float(-np.sum(p * np.log2(p)))


def conditional_entropy(stats: NodeStats, attr: int) -> float:
    """Class entropy after splitting on ``attr``, weighted by value frequency."""
    total = stats.total()
    if total <= 0:
        return 0.0
    joint = stats.joint_counts(attr)
    value_counts = stats.value_counts(attr)
    acc = 0.0
    for v in range(len(value_counts)):
        count = int(value_counts[v])
        if count > 0:
            acc += (count / total) * entropy(joint[v])
    return acc


def hoeffding_bound(num_classes: int, delta: float, n: int) -> float:
    """Hoeffding bound for information gain over ``num_classes`` classes."""
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    r = math.log2(num_classes)
    return math.sqrt((r * r * math.log(1.0 / delta)) / (2.0 * n))


# -----------------------------------------------------------------------------
# Decision
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SplitDecision:
    """Outcome of one split evaluation.

    ``reason`` is ``"confident"`` when the gap between the two best attributes
    exceeded the bound, ``"tie"`` when only the tie threshold fired, and
    ``None`` when no split happens.
    """

    should_split: bool
    best_attribute: int | None
    best_entropy: float
    second_entropy: float
    null_entropy: float
    epsilon: float
    reason: str | None = None

    @property
    def information_gain(self) -> float:
        return self.null_entropy - self.best_entropy


class SplitEvaluator:
    """Decide whether, and on which attribute, a leaf should split.

    Parameters
    ----------
    config : HoeffdingConfig
        Supplies ``delta`` and ``tie_confidence``.
    schema : Schema
        Fixes the candidate attributes and the number of classes.
    """

    def __init__(self, config: HoeffdingConfig, schema: Schema):
        self.config = config
        self.schema = schema
        self._features = schema.feature_indices()
        self._num_classes = schema.num_classes

    def epsilon(self, n: int) -> float:
        return hoeffding_bound(self._num_classes, self.config.delta, n)

    def rank_attributes(self, stats: NodeStats) -> tuple[int | None, float, float]:
        """Return ``(best_attribute, best_entropy, second_entropy)``.

        Attributes are scanned in ascending index order and only a strictly
        lower entropy displaces the current best or runner-up, so the first
        attribute seen wins every tie.  With a single candidate attribute the
        runner-up entropy stays at ``inf``.
        """
        best_attr = None
        best = math.inf
        second = math.inf
        for a in self._features:
            hw = conditional_entropy(stats, a)
            if hw < best:
                second = best
                best = hw
                best_attr = a
            elif hw < second:
                second = hw
        return best_attr, best, second

    def evaluate(self, stats: NodeStats) -> SplitDecision:
        n = stats.total()
        h0 = entropy(stats.class_counts())
        best_attr, best, second = self.rank_attributes(stats)
        eps = self.epsilon(n)

        confident = (second - best) > eps
        tie = eps < self.config.tie_confidence
        # never split when even the best attribute does not lower the entropy
        gains = h0 > best

        should_split = (confident or tie) and gains
        reason = None
        if should_split:
            reason = "confident" if confident else "tie"
        return SplitDecision(
            should_split=should_split,
            best_attribute=best_attr,
            best_entropy=best,
            second_entropy=second,
            null_entropy=h0,
            epsilon=eps,
            reason=reason,
        )
