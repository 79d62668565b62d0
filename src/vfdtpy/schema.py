# -*- coding: utf-8 -*-
"""
vfdtpy.schema
=============

Nominal attributes, the schema that orders them, and the encoded instances
that flow through a Hoeffding tree.

An :class:`Instance` stores one value *index* per attribute (``None`` when the
value is missing) together with a reference to its :class:`Schema`.  The
schema is shared by every instance of a stream; the tree captures it from the
first instance it learns from.
"""
from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Any, Sequence

import numpy as np

from .exceptions import StructuralError


def _isnan_scalar(v) -> bool:
    return (v is None) or (isinstance(v, (float, np.floating)) and np.isnan(v))


# -----------------------------------------------------------------------------
# Attribute
# -----------------------------------------------------------------------------
class Attribute:
    """A nominal attribute with a fixed, ordered domain.

    Parameters
    ----------
    name : str
        Attribute name, used only for rendering.
    values : sequence
        Distinct domain values.  Their order defines the value indices and the
        order of the children created when a node splits on this attribute.
    """

    __slots__ = ("name", "values", "_index")

    def __init__(self, name: str, values: Sequence[Any]):
        self.name = str(name)
        self.values = tuple(values)
        if not self.values:
            raise ValueError(f"attribute {self.name!r} has an empty domain")
        self._index = {v: i for i, v in enumerate(self.values)}
        if len(self._index) != len(self.values):
            raise ValueError(f"attribute {self.name!r} has duplicate domain values")

    @property
    def num_values(self) -> int:
        return len(self.values)

    def index_of(self, value) -> int:
        try:
            return self._index[value]
        except (KeyError, TypeError):
            raise StructuralError(
                f"value {value!r} is not in the domain of attribute {self.name!r}") from None

    def value(self, index: int):
        if not (0 <= index < len(self.values)):
            raise StructuralError(
                f"value index {index} out of range for attribute {self.name!r} "
                f"with {len(self.values)} values")
        return self.values[index]

    def __eq__(self, other):
        if not isinstance(other, Attribute):
            return NotImplemented
        return self.name == other.name and self.values == other.values

    def __hash__(self):
        return hash((self.name, self.values))

    def __repr__(self):
        return f"Attribute({self.name!r}, {list(self.values)!r})"


# -----------------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------------
class Schema:
    """Ordered nominal attributes with one designated class attribute.

    Only nominal attributes are supported, and at least one non-class
    attribute is required.
    """

    __slots__ = ("attributes", "class_index", "_feature_indices")

    def __init__(self, attributes: Sequence[Attribute], class_index: int = -1):
        self.attributes = tuple(attributes)
        n = len(self.attributes)
        if n < 2:
            raise ValueError("a schema needs at least one attribute besides the class")
        if class_index < 0:
            class_index += n
        if not (0 <= class_index < n):
            raise ValueError(f"class_index {class_index} out of range for {n} attributes")
        for a in self.attributes:
            if not isinstance(a, Attribute):
                raise ValueError(f"only nominal attributes are supported, got {a!r}")
        self.class_index = int(class_index)
        self._feature_indices = tuple(i for i in range(n) if i != self.class_index)

    @classmethod
    def from_domains(cls, feature_domains: Sequence[Sequence[Any]], classes: Sequence[Any],
                     feature_names: Sequence[str] | None = None,
                     class_name: str = "class") -> "Schema":
        """Build a schema whose class attribute comes last."""
        if feature_names is None:
            feature_names = [f"f{i}" for i in range(len(feature_domains))]
        if len(feature_names) != len(feature_domains):
            raise ValueError("feature_names length must match the number of feature domains")
        attrs = [Attribute(n, d) for n, d in zip(feature_names, feature_domains)]
        attrs.append(Attribute(class_name, classes))
        return cls(attrs, class_index=len(attrs) - 1)

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def class_attribute(self) -> Attribute:
        return self.attributes[self.class_index]

    @property
    def num_classes(self) -> int:
        return self.class_attribute.num_values

    def attribute(self, index: int) -> Attribute:
        return self.attributes[index]

    def feature_indices(self) -> tuple[int, ...]:
        """Non-class attribute indices in ascending order."""
        return self._feature_indices

    def make_instance(self, raw_values: Sequence[Any]) -> "Instance":
        """Encode raw domain values (class value included) into an instance.

        ``None`` and ``NaN`` are treated as missing.  Any other value outside
        its attribute's domain raises :class:`StructuralError`.
        """
        if len(raw_values) != len(self.attributes):
            raise ValueError(
                f"expected {len(self.attributes)} values, got {len(raw_values)}")
        encoded = tuple(
            None if _isnan_scalar(v) else a.index_of(v)
            for a, v in zip(self.attributes, raw_values)
        )
        return Instance(self, encoded)

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return self.class_index == other.class_index and self.attributes == other.attributes

    def __hash__(self):
        return hash((self.attributes, self.class_index))

    def __repr__(self):
        return f"Schema({list(self.attributes)!r}, class_index={self.class_index})"


# -----------------------------------------------------------------------------
# Instance
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Instance:
    """One encoded observation: a value index (or ``None``) per attribute."""

    schema: Schema
    values: tuple

    def __post_init__(self):
        if len(self.values) != self.schema.num_attributes:
            raise ValueError(
                f"expected {self.schema.num_attributes} values, got {len(self.values)}")
        for attr, v in zip(self.schema.attributes, self.values):
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, Integral):
                raise StructuralError(
                    f"value index {v!r} for attribute {attr.name!r} is not an integer")
            if not (0 <= v < attr.num_values):
                raise StructuralError(
                    f"value index {v} out of range for attribute {attr.name!r} "
                    f"with {attr.num_values} values")

    def has_missing_value(self) -> bool:
        return any(v is None for v in self.values)

    def has_missing_feature(self) -> bool:
        """Whether any non-class value is missing.  The class value is ignored."""
        return any(self.values[i] is None for i in self.schema.feature_indices())

    def value(self, attr_index: int) -> int | None:
        return self.values[attr_index]

    @property
    def class_value(self) -> int | None:
        return self.values[self.schema.class_index]
