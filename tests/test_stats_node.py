import numpy as np
import pytest
from vfdtpy import Attribute, Schema, Instance, StructuralError
from vfdtpy.node import Node
from vfdtpy.stats import NodeStats


def _schema():
    """Two features (arity 3 and 2) and a binary class, class last."""
    return Schema.from_domains([["a", "b", "c"], ["x", "y"]], ["no", "yes"],
                               feature_names=["A", "B"], class_name="C")


def _fill(stats, rows):
    schema = stats.schema
    for r in rows:
        stats.increment(schema.make_instance(r))


def test_increment_updates_all_tables():
    s = _schema()
    stats = NodeStats(s)
    _fill(stats, [["a", "x", "no"], ["a", "y", "yes"], ["c", "y", "yes"]])
    assert stats.total() == 3
    assert stats.class_count(0) == 1
    assert stats.class_count(1) == 2
    assert stats.value_count(0, 0) == 2
    assert stats.value_count(0, 1) == 0
    assert stats.value_count(1, 1) == 2
    assert stats.joint_count(0, 0, 1) == 1
    assert stats.joint_count(0, 2, 1) == 1
    assert stats.joint_count(1, 0, 0) == 1


def test_count_sums_are_consistent():
    s = _schema()
    stats = NodeStats(s)
    rng = np.random.default_rng(1)
    rows = [[s.attribute(0).values[rng.integers(3)],
             s.attribute(1).values[rng.integers(2)],
             s.attribute(2).values[rng.integers(2)]] for _ in range(200)]
    _fill(stats, rows)
    for a in s.feature_indices():
        arity = s.attribute(a).num_values
        assert sum(stats.value_count(a, v) for v in range(arity)) == stats.total()
        for v in range(arity):
            assert sum(stats.joint_count(a, v, c) for c in range(2)) == stats.value_count(a, v)
    assert stats.check_consistency()


def test_majority_class_ties_go_to_lowest_index():
    s = _schema()
    stats = NodeStats(s)
    assert stats.majority_class() == 0
    _fill(stats, [["a", "x", "yes"], ["b", "x", "no"]])
    assert stats.majority_class() == 0
    _fill(stats, [["b", "y", "yes"]])
    assert stats.majority_class() == 1


def test_read_views_are_read_only():
    s = _schema()
    stats = NodeStats(s)
    _fill(stats, [["a", "x", "yes"]])
    counts = stats.class_counts()
    with pytest.raises(ValueError):
        counts[0] = 10
    assert stats.joint_counts(0).shape == (3, 2)


def test_table_size_does_not_grow_with_stream():
    s = _schema()
    stats = NodeStats(s)
    _fill(stats, [["a", "x", "yes"]] * 10)
    shapes = [stats.joint_counts(a).shape for a in s.feature_indices()]
    _fill(stats, [["b", "y", "no"]] * 1000)
    assert [stats.joint_counts(a).shape for a in s.feature_indices()] == shapes


def test_split_creates_fresh_children():
    s = _schema()
    node = Node(s)
    assert node.is_leaf()
    assert node.split_attribute is None
    _fill(node.stats, [["a", "x", "yes"], ["b", "y", "no"]])
    node.split(0)
    assert not node.is_leaf()
    internal = node.as_internal()
    assert internal.attribute_index == 0
    assert node.split_attribute.name == "A"
    assert len(internal.children) == 3
    for v in range(3):
        child = node.child(v)
        assert child.is_leaf()
        assert child.stats.total() == 0
    # the distribution at split time is kept for inspection
    assert node.class_counts().tolist() == [1, 1]


def test_split_misuse_raises():
    s = _schema()
    node = Node(s)
    with pytest.raises(StructuralError):
        node.split(0)  # no instance seen yet
    _fill(node.stats, [["a", "x", "yes"]])
    with pytest.raises(StructuralError):
        node.split(s.class_index)
    node.split(1)
    with pytest.raises(StructuralError):
        node.split(0)
    with pytest.raises(StructuralError):
        node.child(2)
    with pytest.raises(StructuralError):
        node.child(-1)
    with pytest.raises(StructuralError):
        _ = node.stats


def test_leaf_has_no_internal_view():
    node = Node(_schema())
    with pytest.raises(StructuralError):
        node.as_internal()
    with pytest.raises(StructuralError):
        node.child(0)


def test_out_of_domain_values_are_rejected():
    s = _schema()
    with pytest.raises(StructuralError):
        s.make_instance(["d", "x", "yes"])
    with pytest.raises(StructuralError):
        Instance(s, (3, 0, 1))
    with pytest.raises(StructuralError):
        s.attribute(0).value(5)


def test_missing_values_are_encoded_as_none():
    s = _schema()
    inst = s.make_instance(["a", None, float("nan")])
    assert inst.values == (0, None, None)
    assert inst.has_missing_value()
    assert inst.has_missing_feature()
    inst = s.make_instance(["a", "x", None])
    assert inst.has_missing_value()
    assert not inst.has_missing_feature()


def test_schema_validation():
    with pytest.raises(ValueError):
        Schema([Attribute("C", [0, 1])])
    with pytest.raises(ValueError):
        Attribute("A", [])
    with pytest.raises(ValueError):
        Attribute("A", ["x", "x"])
    s = Schema([Attribute("C", [0, 1]), Attribute("A", ["p", "q"])], class_index=0)
    assert s.feature_indices() == (1,)
    assert s.num_classes == 2


@pytest.mark.parametrize("bad", [1.5, True, "1", 1.0])
def test_non_integer_value_index_is_rejected(bad):
    s = _schema()
    with pytest.raises(StructuralError):
        Instance(s, (0, bad, 1))


def test_numpy_integer_value_index_is_accepted():
    s = _schema()
    inst = Instance(s, (np.int64(2), 0, np.int32(1)))
    assert inst.value(0) == 2
