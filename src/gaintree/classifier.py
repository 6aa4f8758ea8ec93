# -*- coding: utf-8 -*-
"""
gaintree.classifier
===================

A scikit-learn style classifier around a single information-gain tree.

Splits are only ever placed at values present in the training data, numeric
columns split on ``>=`` and every other column on equality, and each leaf
keeps the histogram of the training labels that reached it.  Prediction on
observations with missing fields (``None`` or ``numpy.nan``) weights both
branches of the affected node by their training mass.  Optional post-pruning
merges leaf pairs whose separation gains less than ``min_gain`` entropy.
"""

from __future__ import annotations

import numpy as np
from sklearn.base import ClassifierMixin

from .base import BaseGainTree


class GainTreeClassifier(ClassifierMixin, BaseGainTree):
    """
    Decision tree classifier grown by greedy information gain.

    Parameters
    ----------
    criterion : {"entropy", "gini"} or callable, default="entropy"
        Impurity measure used to score candidate splits.  A callable receives
        a list of rows (outcome last) and returns a float.
    min_gain : float or None, default=None
        If given, the tree is pruned after fitting: sibling leaves are merged
        when keeping them apart gains less than ``min_gain`` entropy.
    n_jobs : int or None, default=None
        Worker threads used to search split candidates.  Does not change the
        fitted tree.
    feature_names : list[str] or None, default=None
        Names used in rule, text and Graphviz exports.

    Attributes
    ----------
    tree_ : TreeNode
        Root of the fitted tree.
    classes_ : ndarray
        Sorted class labels seen during ``fit``.
    n_features_in_ : int
        Number of predictor columns.
    feature_names_ : list[str]
        Feature names used by the exports.

    Examples
    --------
    >>> X = [["a", 1], ["a", 2], ["b", 1], ["b", 2]]
    >>> y = ["yes", "no", "yes", "yes"]
    >>> clf = GainTreeClassifier().fit(X, y)
    >>> print(clf.predict([["a", 2]])[0])
    no
    """

    def __init__(
        self,
        *,
        criterion="entropy",
        min_gain: float | None = None,
        n_jobs: int | None = None,
        feature_names: list[str] | None = None,
    ):
        self.criterion = criterion
        self.min_gain = min_gain
        self.n_jobs = n_jobs
        self.feature_names = feature_names

    def fit(self, X, y, cancel_event=None):
        """
        Build the tree from training samples.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training samples.  Columns may mix numbers and strings.
        y : array-like of shape (n_samples,)
            Class labels.
        cancel_event : object with ``is_set()``, optional
            Aborts the build with ``BuildCancelledError`` once set.

        Returns
        -------
        self
        """
        y = np.asarray(y)
        if y.ndim != 1:
            raise ValueError("y must be one-dimensional")
        self.classes_ = np.unique(y)
        return self._fit_tree(X, y.tolist(), cancel_event=cancel_event)

    def predict_proba(self, X):
        """
        Class probabilities from the histogram each sample reaches.

        Returns
        -------
        ndarray of shape (n_samples, n_classes)
            Rows sum to one; a sample reaching no training mass gets a uniform
            distribution.
        """
        counts = self.predict_counts(X)
        k = len(self.classes_)
        proba = np.empty((len(counts), k), dtype=float)
        for i, dist in enumerate(counts):
            vec = np.array([dist.get(c, 0.0) for c in self.classes_], dtype=float)
            tot = vec.sum()
            proba[i] = vec / tot if tot > 0 else np.full(k, 1.0 / k)
        return proba

    def predict(self, X):
        """Predict the most frequent class of the histogram each sample reaches."""
        proba = self.predict_proba(X)
        return self.classes_[np.argmax(proba, axis=1)]
