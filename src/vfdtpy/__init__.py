# vfdtpy/__init__.py
"""
vfdtpy: Very Fast Decision Trees (Hoeffding trees) for nominal data streams.

Exports:
    - VFDTClassifier (scikit-learn style estimator)
    - HoeffdingTree, train
    - HoeffdingConfig
    - Attribute, Schema, Instance
"""
from .config import HoeffdingConfig
from .schema import Attribute, Schema, Instance
from .tree import HoeffdingTree, LearnResult, train
from .classifier import VFDTClassifier
from .exceptions import MissingValueError, InvalidConfigurationError, StructuralError

__all__ = [
    "VFDTClassifier",
    "HoeffdingTree",
    "LearnResult",
    "train",
    "HoeffdingConfig",
    "Attribute",
    "Schema",
    "Instance",
    "MissingValueError",
    "InvalidConfigurationError",
    "StructuralError",
]
__version__ = "0.1.0"
