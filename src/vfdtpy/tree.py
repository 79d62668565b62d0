# -*- coding: utf-8 -*-
"""
vfdtpy.tree
===========

Single-pass induction of a Hoeffding tree (VFDT) over a stream of nominal
instances.

Every instance is routed from the root to a leaf along the branches of its
attribute values, counted in that leaf's statistics and then dropped.  When a
leaf's count reaches a multiple of ``n_min`` the leaf is evaluated by a
:class:`~vfdtpy.split.SplitEvaluator` and possibly split.  Memory therefore
grows with the number of nodes only, never with the length of the stream.

Instances with missing values are skipped during training (a warning is
logged) and rejected during classification.
"""
from __future__ import annotations

import enum
import logging
from typing import Iterable, Iterator

from sklearn.exceptions import NotFittedError

from .config import HoeffdingConfig
from .exceptions import MissingValueError, StructuralError
from .node import Node
from .schema import Instance, Schema
from .split import SplitDecision, SplitEvaluator

logger = logging.getLogger(__name__)


class LearnResult(enum.Enum):
    """What happened to a single training instance."""

    SKIPPED_MISSING = "skipped_missing"
    UPDATED = "updated"
    SPLIT = "split"


class HoeffdingTree:
    """A decision tree grown incrementally from a stream of instances.

    Parameters
    ----------
    config : HoeffdingConfig or None, default=None
        Training parameters.  ``None`` uses the defaults
        (``delta=1e-4``, ``tie_confidence=0.05``, ``n_min=30``).

    Attributes
    ----------
    root : Node or None
        Root of the tree; ``None`` until the first valid instance is learned.
    schema : Schema or None
        Schema captured from the first valid instance.
    n_seen : int
        Number of instances offered to :meth:`learn_one`.
    n_skipped : int
        Number of instances skipped because of missing values.
    n_splits : int
        Number of leaves converted to internal nodes.

    Examples
    --------
    >>> tree = HoeffdingTree(HoeffdingConfig(n_min=50))
    >>> tree.train(instances)            # doctest: +SKIP
    >>> tree.classify(instance)          # doctest: +SKIP
    """

    def __init__(self, config: HoeffdingConfig | None = None):
        if config is None:
            config = HoeffdingConfig()
        if not isinstance(config, HoeffdingConfig):
            raise TypeError(f"config must be a HoeffdingConfig, got {type(config).__name__}")
        self.config = config
        self.root: Node | None = None
        self.schema: Schema | None = None
        self._evaluator: SplitEvaluator | None = None
        self.n_seen = 0
        self.n_skipped = 0
        self.n_splits = 0

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------
    def learn_one(self, instance: Instance) -> LearnResult:
        """Update the tree with one instance.

        Instances with a missing attribute or class value leave the tree
        untouched and return :attr:`LearnResult.SKIPPED_MISSING`.

        Raises
        ------
        StructuralError
            If ``instance`` belongs to a different schema than the one the
            tree was started with.
        """
        self.n_seen += 1
        if instance.has_missing_value():
            self.n_skipped += 1
            return LearnResult.SKIPPED_MISSING

        if self.root is None:
            self._start(instance.schema)
        elif instance.schema is not self.schema and instance.schema != self.schema:
            raise StructuralError("instance schema differs from the schema the tree was built with")

        leaf = self._leaf_for(instance)
        stats = leaf.stats
        stats.increment(instance)

        if stats.total() % self.config.n_min == 0:
            decision = self._evaluator.evaluate(stats)
            if decision.should_split:
                leaf.split(decision.best_attribute)
                self.n_splits += 1
                self._log_split(decision, stats.total())
                return LearnResult.SPLIT
        return LearnResult.UPDATED

    def train(self, instances: Iterable[Instance]) -> "HoeffdingTree":
        """Learn from every instance of ``instances`` in a single pass.

        ``instances`` may be any iterable, including a generator; it is read
        once and no instance is kept.
        """
        for instance in instances:
            result = self.learn_one(instance)
            if result is LearnResult.SKIPPED_MISSING:
                logger.warning(
                    f"Skipping instance #{self.n_seen}: missing attribute or class value")
        logger.info(
            f"Trained on {self.n_seen} instances ({self.n_skipped} skipped): "
            f"{self.n_nodes} nodes, {self.n_leaves} leaves, {self.n_splits} splits")
        return self

    def _start(self, schema: Schema):
        self.schema = schema
        self.root = Node(schema)
        self._evaluator = SplitEvaluator(self.config, schema)

    def _log_split(self, decision: SplitDecision, n: int):
        if logger.isEnabledFor(logging.DEBUG):
            name = self.schema.attribute(decision.best_attribute).name
            logger.debug(
                f"Split on {name!r} at n={n} ({decision.reason}): "
                f"gain={decision.information_gain:.6f} epsilon={decision.epsilon:.6f}")

    # ------------------------------------------------------------------
    # Traversal / classification
    # ------------------------------------------------------------------
    def _leaf_for(self, instance: Instance) -> Node:
        node = self.root
        while not node.is_leaf():
            internal = node.as_internal()
            node = node.child(instance.value(internal.attribute_index))
        return node

    def leaf_for(self, instance: Instance) -> Node:
        """Return the leaf ``instance`` is routed to.

        Only the non-class values are needed for routing, so the class value
        may be missing here.
        """
        self._check_fitted()
        if instance.has_missing_feature():
            raise MissingValueError("instances with missing attribute values cannot be routed")
        return self._leaf_for(instance)

    def classify(self, instance: Instance) -> int:
        """Return the majority class index of the leaf ``instance`` reaches.

        Raises
        ------
        MissingValueError
            If any value of ``instance`` is missing, class value included.
        NotFittedError
            If the tree has not learned from any instance yet.
        """
        self._check_fitted()
        if instance.has_missing_value():
            raise MissingValueError("Hoeffding tree: missing values not supported.")
        return self._leaf_for(instance).majority_class()

    def _check_fitted(self):
        if self.root is None:
            raise NotFittedError("Tree not trained. Call train(...) or learn_one(...) first.")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def iter_nodes(self) -> Iterator[Node]:
        """Yield every node, depth first, children in domain order."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf():
                stack.extend(reversed(node.children))

    @property
    def n_nodes(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def n_leaves(self) -> int:
        return sum(1 for n in self.iter_nodes() if n.is_leaf())

    @property
    def depth(self) -> int:
        if self.root is None:
            return 0
        best = 0
        stack = [(self.root, 0)]
        while stack:
            node, d = stack.pop()
            best = max(best, d)
            if not node.is_leaf():
                stack.extend((ch, d + 1) for ch in node.children)
        return best


def train(instances: Iterable[Instance], config: HoeffdingConfig | None = None) -> HoeffdingTree:
    """Build a :class:`HoeffdingTree` from ``instances`` in one pass."""
    return HoeffdingTree(config).train(instances)
