"""Per-node sufficient statistics for nominal attributes.

A :class:`NodeStats` table holds, for one leaf, the number of instances seen,
the class counts, and for every non-class attribute the marginal
``(attribute, value)`` counts and the joint ``(attribute, value, class)``
counts.  Its size depends only on the schema, never on how many instances
were counted.
"""
from __future__ import annotations

import numpy as np

from .schema import Instance, Schema


class NodeStats:
    """Running counts collected at a leaf.

    Parameters
    ----------
    schema : Schema
        Determines the shape of every count table.
    """

    __slots__ = ("schema", "_total", "_class_counts", "_value_counts", "_joint_counts")

    def __init__(self, schema: Schema):
        self.schema = schema
        k = schema.num_classes
        self._total = 0
        self._class_counts = np.zeros(k, dtype=np.int64)
        # indexed by attribute; the class attribute slot stays None
        self._value_counts: list[np.ndarray | None] = [None] * schema.num_attributes
        self._joint_counts: list[np.ndarray | None] = [None] * schema.num_attributes
        for a in schema.feature_indices():
            arity = schema.attribute(a).num_values
            self._value_counts[a] = np.zeros(arity, dtype=np.int64)
            self._joint_counts[a] = np.zeros((arity, k), dtype=np.int64)

    def increment(self, instance: Instance) -> None:
        """Count one fully valued instance."""
        c = instance.class_value
        values = instance.values
        self._total += 1
        self._class_counts[c] += 1
        for a in self.schema.feature_indices():
            v = values[a]
            self._value_counts[a][v] += 1
            self._joint_counts[a][v, c] += 1

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    def total(self) -> int:
        return self._total

    def class_count(self, c: int) -> int:
        return int(self._class_counts[c])

    def value_count(self, attr: int, v: int) -> int:
        return int(self._value_counts[attr][v])

    def joint_count(self, attr: int, v: int, c: int) -> int:
        return int(self._joint_counts[attr][v, c])

    def class_counts(self) -> np.ndarray:
        out = self._class_counts.copy()
        out.flags.writeable = False
        return out

    def value_counts(self, attr: int) -> np.ndarray:
        out = self._value_counts[attr].copy()
        out.flags.writeable = False
        return out

    def joint_counts(self, attr: int) -> np.ndarray:
        """Counts of shape ``(num_values, num_classes)`` for ``attr``."""
        out = self._joint_counts[attr].copy()
        out.flags.writeable = False
        return out

    def majority_class(self) -> int:
        # np.argmax returns the first maximum, i.e. the lowest class index on ties
        return int(np.argmax(self._class_counts))

    def check_consistency(self) -> bool:
        """Whether the marginal and joint tables agree with the totals."""
        if int(self._class_counts.sum()) != self._total:
            return False
        for a in self.schema.feature_indices():
            vc = self._value_counts[a]
            if int(vc.sum()) != self._total:
                return False
            if not np.array_equal(self._joint_counts[a].sum(axis=1), vc):
                return False
        return True

    def __repr__(self):
        return f"NodeStats(total={self._total}, class_counts={self._class_counts.tolist()})"
