"""Exception types raised by vfdtpy."""
from __future__ import annotations


class MissingValueError(ValueError):
    """An instance with a missing attribute or class value was given to
    classification, which cannot produce a result for it."""


class InvalidConfigurationError(ValueError):
    """A tree configuration parameter is outside its valid range."""


class StructuralError(RuntimeError):
    """The tree structure or an attribute domain was used incorrectly.

    Raised for splitting an already split node, asking a leaf for its
    children, or looking up a value outside an attribute's domain.
    """
