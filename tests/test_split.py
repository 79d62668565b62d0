import math
import numpy as np
import pytest
from vfdtpy import HoeffdingConfig, Schema
from vfdtpy.split import SplitEvaluator, conditional_entropy, entropy, hoeffding_bound
from vfdtpy.stats import NodeStats


def _stats(rows, domains=([0, 1], [0, 1]), classes=(0, 1)):
    schema = Schema.from_domains(list(domains), list(classes))
    stats = NodeStats(schema)
    for r in rows:
        stats.increment(schema.make_instance(r))
    return stats


def test_entropy_pure_and_uniform():
    assert entropy([7, 0, 0]) == 0.0
    assert entropy([0, 0]) == 0.0
    assert entropy([5, 5]) == pytest.approx(1.0)
    assert entropy([3, 3, 3, 3]) == pytest.approx(math.log2(4))
    # any non-uniform distribution is below the maximum
    assert entropy([1, 2, 3, 4]) < math.log2(4)


def test_conditional_entropy_by_hand():
    # f0 separates the classes perfectly, f1 is independent of the class
    rows = [[0, 0, 0], [0, 1, 0], [1, 0, 1], [1, 1, 1]]
    stats = _stats(rows)
    assert conditional_entropy(stats, 0) == pytest.approx(0.0)
    assert conditional_entropy(stats, 1) == pytest.approx(1.0)


def test_conditional_entropy_skips_unseen_values():
    stats = _stats([[0, 0, 0], [0, 0, 1]], domains=([0, 1, 2], [0, 1]))
    # only value 0 of f0 was seen, with a 50/50 class split
    assert conditional_entropy(stats, 0) == pytest.approx(1.0)


def test_hoeffding_bound_strictly_decreasing():
    eps = [hoeffding_bound(3, 1e-4, n) for n in range(1, 500)]
    assert all(a > b for a, b in zip(eps, eps[1:]))


def test_hoeffding_bound_formula():
    n, delta = 60, 1e-4
    expected = math.sqrt(math.log2(2) ** 2 * math.log(1 / delta) / (2 * n))
    assert hoeffding_bound(2, delta, n) == pytest.approx(expected)
    assert hoeffding_bound(1, delta, n) == 0.0


def test_rank_prefers_first_attribute_on_ties():
    # f0 and f1 are identical copies, f2 is noise
    rows = [[v, v, w, v] for v, w in [(0, 0), (1, 1), (0, 1), (1, 0)]]
    schema = Schema.from_domains([[0, 1], [0, 1], [0, 1]], [0, 1])
    stats = NodeStats(schema)
    for r in rows:
        stats.increment(schema.make_instance(r))
    ev = SplitEvaluator(HoeffdingConfig(), schema)
    best_attr, best, second = ev.rank_attributes(stats)
    assert best_attr == 0
    assert best == second == 0.0


def test_single_attribute_runner_up_is_infinite():
    schema = Schema.from_domains([[0, 1]], [0, 1])
    stats = NodeStats(schema)
    for r in [[0, 0], [1, 1]] * 15:
        stats.increment(schema.make_instance(r))
    decision = SplitEvaluator(HoeffdingConfig(), schema).evaluate(stats)
    assert decision.second_entropy == math.inf
    assert decision.should_split
    assert decision.reason == "confident"


def test_confident_split_on_informative_attribute():
    rows = [[0, 0, 0], [0, 1, 0], [1, 0, 1], [1, 1, 1]] * 15
    stats = _stats(rows)
    decision = SplitEvaluator(HoeffdingConfig(), stats.schema).evaluate(stats)
    assert decision.should_split
    assert decision.best_attribute == 0
    assert decision.reason == "confident"
    assert decision.information_gain == pytest.approx(1.0)


def test_no_split_without_entropy_reduction():
    # a single surviving class: H0 == best == second == 0
    rows = [[0, 1, 1], [1, 0, 1]] * 3000
    stats = _stats(rows)
    ev = SplitEvaluator(HoeffdingConfig(), stats.schema)
    decision = ev.evaluate(stats)
    assert decision.null_entropy == 0.0
    assert decision.best_entropy == 0.0
    assert decision.epsilon < ev.config.tie_confidence
    assert not decision.should_split
    assert decision.reason is None


def test_no_split_while_gap_is_within_bound():
    # two identical informative attributes: gap 0, epsilon(30) still above the tie threshold
    rows = [[0, 0, 0], [1, 1, 1]] * 15
    stats = _stats(rows)
    decision = SplitEvaluator(HoeffdingConfig(), stats.schema).evaluate(stats)
    assert decision.second_entropy - decision.best_entropy == 0.0
    assert decision.epsilon > 0.05
    assert decision.null_entropy > decision.best_entropy
    assert not decision.should_split
    assert decision.reason is None
