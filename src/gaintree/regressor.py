"""Information-gain regression tree with a scikit-learn style API.

The tree is grown exactly like ``GainTreeClassifier`` but scores splits by the
variance of the numeric outcome.  Leaves keep the histogram of outcome values,
and a prediction is the count-weighted mean of the histogram reached.
"""
from __future__ import annotations

import numpy as np
from sklearn.base import RegressorMixin

from .base import BaseGainTree


def _weighted_mean(dist: dict) -> float:
    total = float(sum(dist.values()))
    if total <= 0.0:
        return 0.0
    return float(sum(float(v) * w for v, w in dist.items()) / total)


class GainTreeRegressor(RegressorMixin, BaseGainTree):
    r"""
    Regression tree over numeric outcomes.

    Parameters
    ----------
    criterion : str or callable, default="variance"
        Impurity measure.  ``"variance"`` is the natural choice for numeric
        outcomes.
    min_gain : float or None, default=None
        Post-pruning threshold, see ``GainTreeClassifier``.  The merge test
        treats distinct outcome values as labels.
    n_jobs : int or None, default=None
        Worker threads for the split search.
    feature_names : list[str] or None, default=None
        Names used in exports.

    Attributes
    ----------
    tree_ : TreeNode
        Root of the fitted tree; leaf histograms map outcome values to counts.
    n_features_in_ : int
        Number of predictor columns.
    """

    def __init__(
        self,
        *,
        criterion="variance",
        min_gain: float | None = None,
        n_jobs: int | None = None,
        feature_names: list[str] | None = None,
    ):
        self.criterion = criterion
        self.min_gain = min_gain
        self.n_jobs = n_jobs
        self.feature_names = feature_names

    def fit(self, X, y, cancel_event=None):
        y = np.asarray(y, dtype=float)
        if y.ndim != 1:
            raise ValueError("y must be one-dimensional")
        return self._fit_tree(X, y.tolist(), cancel_event=cancel_event)

    def predict(self, X):
        """
        Predict the mean outcome of the histogram each sample reaches.

        Samples with missing fields blend both branches of the affected nodes.
        A histogram with no mass predicts 0.0.
        """
        return np.array([_weighted_mean(d) for d in self.predict_counts(X)], dtype=float)
