# -*- coding: utf-8 -*-
"""
vfdtpy.classifier
=================

scikit-learn style estimator around :class:`~vfdtpy.tree.HoeffdingTree`.

:class:`VFDTClassifier` accepts a 2-D array of nominal values (strings,
integers, any hashable labels) and a label vector, derives the attribute
domains, and then feeds the rows to the tree one at a time, so the tree sees
exactly the stream it would see from an unbounded source.  ``partial_fit``
continues the same stream across calls.
"""
from __future__ import annotations

import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.exceptions import NotFittedError

from . import export
from .config import HoeffdingConfig
from .exceptions import MissingValueError
from .schema import Schema, _isnan_scalar
from .tree import HoeffdingTree


def _domain(values) -> list:
    # distinct values in first-seen order, kept as they are (no dtype coercion)
    distinct = list(dict.fromkeys(v for v in values if not _isnan_scalar(v)))
    try:
        return sorted(distinct)
    except TypeError:
        # mixed, mutually unorderable types (e.g. 1 and 'a')
        return distinct


class VFDTClassifier(BaseEstimator, ClassifierMixin):
    """
    Very Fast Decision Tree classifier for nominal features.

    The tree is grown from a single pass over the training rows using the
    Hoeffding bound to decide when a leaf has seen enough instances to be
    split.  No pruning is performed.

    Parameters
    ----------
    delta : float, default=1e-4
        One minus the probability of choosing the correct split attribute at
        any given node.  Must lie in ``(0, 1)``.
    tie_confidence : float, default=0.05
        If the Hoeffding bound falls below this value the leaf is split on the
        current best attribute, which keeps two nearly equivalent attributes
        from stalling a leaf indefinitely.
    n_min : int, default=30
        Leaves are only re-checked for splits every ``n_min`` instances.
    feature_names : list[str] or None, default=None
        Optional feature names used for rule and text exports.
    categories : list[sequence] or None, default=None
        Domain of every feature.  When omitted each domain is the sorted set
        of distinct non-missing values seen in the first ``fit`` or
        ``partial_fit`` call.  Values outside a domain are rejected.

    Attributes
    ----------
    tree_ : HoeffdingTree
        The fitted tree.
    classes_ : ndarray
        Class labels, in the order used by :meth:`predict_proba`.
    schema_ : Schema
        Attribute domains the tree was built with.
    n_features_in_ : int
        Number of features seen during fit.

    Notes
    -----
    Training rows with a missing feature or label (``None`` or ``NaN``) are
    skipped with a logged warning.  Rows with missing features cannot be
    classified and raise :class:`~vfdtpy.exceptions.MissingValueError`.
    """

    def __init__(
        self,
        *,
        delta: float = 1e-4,
        tie_confidence: float = 0.05,
        n_min: int = 30,
        feature_names: list[str] | None = None,
        categories: list | None = None,
    ):
        self.delta = delta
        self.tie_confidence = tie_confidence
        self.n_min = n_min
        self.feature_names = feature_names
        self.categories = categories

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------
    def fit(self, X, y):
        """Build a new tree from ``X`` and ``y`` in a single pass."""
        X, y = self._validate_xy(X, y)
        config = self._make_config()
        known_y = [v for v in y if not _isnan_scalar(v)]
        if not known_y:
            raise ValueError("y contains no labelled rows")
        classes = np.unique(np.asarray(known_y))
        self._init_schema(X, classes)
        self.tree_ = HoeffdingTree(config)
        self.tree_.train(self._iter_instances(X, y))
        return self

    def partial_fit(self, X, y, classes=None):
        """Continue training on another batch of the stream.

        The first call fixes the schema: ``classes`` lists every class label
        that can appear (inferred from ``y`` when omitted) and feature domains
        come from ``categories`` or from this first batch.
        """
        X, y = self._validate_xy(X, y)
        if getattr(self, "tree_", None) is None:
            if classes is None:
                known_y = [v for v in y if not _isnan_scalar(v)]
                if not known_y:
                    raise ValueError("classes must be given when the first batch has no labels")
                classes = np.unique(np.asarray(known_y))
            self._init_schema(X, np.asarray(classes))
            self.tree_ = HoeffdingTree(self._make_config())
        elif X.shape[1] != self.n_features_in_:
            raise ValueError(
                f"X has {X.shape[1]} features, but the classifier was fitted with "
                f"{self.n_features_in_}")
        self.tree_.train(self._iter_instances(X, y))
        return self

    def _make_config(self) -> HoeffdingConfig:
        return HoeffdingConfig(delta=self.delta, tie_confidence=self.tie_confidence,
                               n_min=self.n_min)

    def _validate_xy(self, X, y):
        X = np.asarray(X, dtype=object)
        y = np.asarray(y, dtype=object)
        if X.ndim != 2:
            raise ValueError(f"X must be 2-dimensional, got shape {X.shape}")
        if len(y) != X.shape[0]:
            raise ValueError("X and y must have the same number of rows")
        return X, y

    def _init_schema(self, X, classes):
        n_features = X.shape[1]
        if self.feature_names is not None:
            if len(self.feature_names) != n_features:
                raise ValueError("feature_names length must match X.shape[1]")
            names = list(self.feature_names)
        else:
            names = [f"f{i}" for i in range(n_features)]
        if self.categories is not None:
            if len(self.categories) != n_features:
                raise ValueError("categories length must match X.shape[1]")
            domains = [list(c) for c in self.categories]
        else:
            domains = [_domain(X[:, j]) for j in range(n_features)]
        for name, d in zip(names, domains):
            if not d:
                raise ValueError(f"feature {name!r} has no observed values")
        self.classes_ = np.asarray(classes)
        self.n_features_in_ = n_features
        self.feature_names_ = names
        self.schema_ = Schema.from_domains(domains, self.classes_.tolist(), names)

    def _iter_instances(self, X, y):
        # rows are encoded lazily; the tree never holds on to them
        schema = self.schema_
        for row, label in zip(X, y):
            yield schema.make_instance(list(row) + [label])

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------
    def _check_fitted(self):
        if getattr(self, "tree_", None) is None or self.tree_.root is None:
            raise NotFittedError("Estimator not fitted. Call fit(...) first.")

    def _leaves(self, X):
        self._check_fitted()
        X = np.asarray(X, dtype=object)
        if X.ndim != 2 or X.shape[1] != self.n_features_in_:
            raise ValueError(
                f"X must have shape (n_samples, {self.n_features_in_}), got {X.shape}")
        for i, row in enumerate(X):
            if any(_isnan_scalar(v) for v in row):
                raise MissingValueError(f"row {i} has a missing value; cannot classify")
            instance = self.schema_.make_instance(list(row) + [None])
            yield self.tree_.leaf_for(instance)

    def predict(self, X):
        """
        Predict class labels for the provided samples.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input samples.  Missing values are not allowed.

        Returns
        -------
        ndarray of shape (n_samples,)
            Majority class of the leaf each sample reaches.

        Raises
        ------
        NotFittedError
            If the estimator has not been fitted.
        MissingValueError
            If a sample has a missing value.
        """
        idx = [leaf.majority_class() for leaf in self._leaves(X)]
        return self.classes_[np.asarray(idx, dtype=int)]

    def predict_proba(self, X):
        """
        Class distribution of the leaf each sample reaches.

        A leaf that has not counted any instance yet (a fresh child of a
        recent split) yields a uniform distribution.

        Returns
        -------
        ndarray of shape (n_samples, n_classes)
        """
        k = len(self.classes_) if getattr(self, "classes_", None) is not None else 0
        rows = []
        for leaf in self._leaves(X):
            counts = leaf.class_counts().astype(float)
            tot = counts.sum()
            if tot <= 0:
                rows.append(np.full(k, 1.0 / k))
            else:
                rows.append(counts / tot)
        return np.asarray(rows, dtype=float).reshape(-1, k)

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------
    def export_text(self, *, feature_names=None, class_names=None) -> str:
        self._check_fitted()
        return export.export_text(self.tree_, feature_names=feature_names,
                                  class_names=class_names)

    def export_rules(self, *, feature_names=None, class_names=None) -> list[str]:
        """
        Export all decision rules as ``<antecedent> => <class>`` strings.

        Parameters
        ----------
        feature_names : list[str], optional
            Names for the input features.  Defaults to the fitted names.
        class_names : list[str], optional
            Names for the classes, ordered like :attr:`classes_`.
        """
        self._check_fitted()
        return export.export_rules(self.tree_, feature_names=feature_names,
                                   class_names=class_names)

    def export_graphviz(self, filename: str | None = None, *, feature_names=None,
                        class_names=None, format: str = "png") -> str:
        self._check_fitted()
        return export.export_graphviz(self.tree_, filename, feature_names=feature_names,
                                      class_names=class_names, format=format)

    def print_tree(self, feature_names=None, class_names=None):
        """Pretty-print the tree to ``stdout``."""
        print("VFDT\n" + self.export_text(feature_names=feature_names,
                                          class_names=class_names))
