# -*- coding: utf-8 -*-
"""
vfdtpy.node
===========

Tree nodes of a Hoeffding tree.

A :class:`Node` is always in exactly one of two states:

* **leaf** -- owns a :class:`~vfdtpy.stats.NodeStats` table and keeps counting
  the instances routed to it;
* **internal** -- owns a split attribute and one child node per value of that
  attribute.  It no longer counts anything.

The state lives in a single private slot holding either a ``_LeafState`` or an
:class:`InternalView`, so a leaf with a split attribute cannot be represented.
A leaf becomes internal exactly once through :meth:`Node.split`; the change is
never undone and the children are owned by this node only.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .exceptions import StructuralError
from .schema import Attribute, Schema
from .stats import NodeStats


class _LeafState:
    __slots__ = ("stats",)

    def __init__(self, stats: NodeStats):
        self.stats = stats


@dataclass(frozen=True, eq=False)
class InternalView:
    """Split information of an internal node.

    Attributes
    ----------
    attribute_index : int
        Index of the split attribute in the schema.
    attribute : Attribute
        The split attribute itself.
    children : tuple of Node
        One child per domain value, in domain order.
    class_counts : ndarray
        Class counts the node had accumulated when it was split.  They are
        kept for inspection only and are never updated again.
    """

    attribute_index: int
    attribute: Attribute
    children: tuple
    class_counts: np.ndarray


class Node:
    """A node of a Hoeffding tree, created as an empty leaf."""

    __slots__ = ("schema", "_state")

    def __init__(self, schema: Schema):
        self.schema = schema
        self._state: _LeafState | InternalView = _LeafState(NodeStats(schema))

    def is_leaf(self) -> bool:
        return isinstance(self._state, _LeafState)

    def as_internal(self) -> InternalView:
        """Return the split information, or raise if this node is a leaf."""
        if isinstance(self._state, InternalView):
            return self._state
        raise StructuralError("node is a leaf and has no split")

    @property
    def stats(self) -> NodeStats:
        """Statistics of a leaf.  Internal nodes have none."""
        if isinstance(self._state, _LeafState):
            return self._state.stats
        raise StructuralError("an internal node keeps no statistics")

    @property
    def split_attribute(self) -> Attribute | None:
        if isinstance(self._state, InternalView):
            return self._state.attribute
        return None

    @property
    def children(self) -> tuple:
        return self.as_internal().children

    def child(self, value_index: int) -> "Node":
        """Return the child that instances with ``value_index`` are routed to."""
        internal = self.as_internal()
        if not (0 <= value_index < len(internal.children)):
            raise StructuralError(
                f"value index {value_index} out of range for split attribute "
                f"{internal.attribute.name!r} with {len(internal.children)} values")
        return internal.children[value_index]

    def class_counts(self) -> np.ndarray:
        if isinstance(self._state, _LeafState):
            return self._state.stats.class_counts()
        return self._state.class_counts

    def majority_class(self) -> int:
        """Class index with the highest count, lowest index on ties."""
        return int(np.argmax(self.class_counts()))

    def split(self, attribute_index: int) -> None:
        """Turn this leaf into an internal node splitting on ``attribute_index``.

        One fresh, empty child leaf is created per value of the attribute.
        The statistics of this node are not passed down to the children.

        Raises
        ------
        StructuralError
            If the node is already internal, has not counted any instance,
            or ``attribute_index`` is the class attribute.
        """
        if not isinstance(self._state, _LeafState):
            raise StructuralError("cannot split a node that is already internal")
        stats = self._state.stats
        if stats.total() <= 0:
            raise StructuralError("cannot split a leaf that has not seen any instance")
        if attribute_index == self.schema.class_index:
            raise StructuralError("cannot split on the class attribute")
        attribute = self.schema.attribute(attribute_index)
        children = tuple(Node(self.schema) for _ in range(attribute.num_values))
        self._state = InternalView(
            attribute_index=int(attribute_index),
            attribute=attribute,
            children=children,
            class_counts=stats.class_counts(),
        )

    def __repr__(self):
        if self.is_leaf():
            return f"Node(leaf, {self.stats!r})"
        return f"Node(split={self._state.attribute.name!r}, children={len(self._state.children)})"
