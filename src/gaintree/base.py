"""Shared fitting, inspection and export plumbing for the gaintree estimators."""

from __future__ import annotations

import numpy as np
from sklearn.base import BaseEstimator
from sklearn.exceptions import NotFittedError

from .export import export_rules, format_tree, to_dot, to_graphviz
from .tree import TreeNode, build_tree, md_classify, prune


class BaseGainTree(BaseEstimator):
    """
    Base class for estimators wrapping a single ``TreeNode`` tree.

    Subclasses declare the constructor parameters ``criterion``, ``min_gain``,
    ``n_jobs`` and ``feature_names`` and turn leaf histograms into predictions.
    """

    tree_: TreeNode | None = None

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------
    def _fit_tree(self, X, labels, cancel_event=None):
        X = self._as_matrix(X)
        n_samples, n_features = X.shape
        if len(labels) != n_samples:
            raise ValueError("X and y must have the same number of samples")
        if self.feature_names is not None:
            if len(self.feature_names) != n_features:
                raise ValueError("feature_names length must match X.shape[1]")
            self.feature_names_ = list(self.feature_names)
        else:
            self.feature_names_ = [f"f{i}" for i in range(n_features)]
        self.n_features_in_ = n_features

        rows = [list(x) + [label] for x, label in zip(X, labels)]
        self.tree_ = build_tree(rows, self.criterion, n_jobs=self.n_jobs, cancel_event=cancel_event)
        if self.min_gain is not None:
            prune(self.tree_, self.min_gain)
        return self

    @staticmethod
    def _as_matrix(X) -> np.ndarray:
        X = np.asarray(X, dtype=object)
        if X.ndim != 2:
            raise ValueError(f"Expected a 2-D array of observations, got {X.ndim} dimension(s)")
        return X

    def _check_fitted(self):
        if getattr(self, "tree_", None) is None:
            raise NotFittedError("Estimator not fitted. Call fit(...) first.")

    def _check_X(self, X) -> np.ndarray:
        self._check_fitted()
        X = self._as_matrix(X)
        if X.shape[1] != self.n_features_in_:
            raise ValueError(
                f"X has {X.shape[1]} features, but the estimator was fitted with {self.n_features_in_}"
            )
        return X

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def predict_counts(self, X) -> list[dict]:
        """
        Return the (possibly fractional) label histogram reached by each sample.

        Missing fields (``None`` or ``numpy.nan``) are handled by weighting both
        branches of the node that tests them by their training mass.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input samples.

        Returns
        -------
        list[dict]
            One histogram per sample.
        """
        X = self._check_X(X)
        return [md_classify(self.tree_, x) for x in X]

    def prune(self, min_gain: float):
        """
        Merge leaf pairs whose separation gains less than ``min_gain`` entropy.

        Parameters
        ----------
        min_gain : float
            Merge threshold; ``float("inf")`` collapses the tree to one leaf.

        Returns
        -------
        self
        """
        self._check_fitted()
        prune(self.tree_, min_gain)
        return self

    def get_depth(self) -> int:
        self._check_fitted()
        return self.tree_.depth

    def get_n_leaves(self) -> int:
        self._check_fitted()
        return self.tree_.n_leaves

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def _maybe_feature_names(self, feature_names=None):
        return feature_names if feature_names is not None else getattr(self, "feature_names_", None)

    def export_rules(self, feature_names=None) -> list[str]:
        """
        Export every root-to-leaf path as ``"<antecedent> => <histogram>"``.

        Parameters
        ----------
        feature_names : list[str], optional
            Names for the input features.  Defaults to those seen in ``fit``.

        Returns
        -------
        list[str]
            One rule per leaf.
        """
        self._check_fitted()
        return export_rules(self.tree_, self._maybe_feature_names(feature_names))

    def export_dot(self) -> str:
        """Return the tree as ``digraph decision_tree { ... }`` text."""
        self._check_fitted()
        return to_dot(self.tree_)

    def export_graphviz(self, filename: str | None = None, *, feature_names=None,
                        format: str = "png") -> str:
        """
        Export the tree through the ``graphviz`` package.

        Parameters
        ----------
        filename : str or None, default=None
            Basename of the output file.  If None, the DOT source is returned
            and no file is written.
        feature_names : list[str], optional
            Names for the input features.
        format : str, default="png"
            Output format.  ``'dot'`` writes the DOT source without calling the
            external ``dot`` binary.

        Returns
        -------
        str
            Path to the written file, or the DOT source if ``filename`` is None.

        Raises
        ------
        RuntimeError
            If the ``graphviz`` package is not installed.
        """
        self._check_fitted()
        dot = to_graphviz(self.tree_, self._maybe_feature_names(feature_names), format=format)
        if filename is None:
            return dot.source
        if format.lower() == "dot":
            path = f"{filename}.dot"
            dot.save(path)
            return path
        try:
            return dot.render(filename, cleanup=True)
        except RuntimeError:
            # graphviz.ExecutableNotFound: no dot binary on PATH
            fallback_path = f"{filename}.dot"
            dot.save(fallback_path)
            return fallback_path

    def print_tree(self, feature_names=None):
        """Pretty-print the tree to ``stdout``."""
        self._check_fitted()
        print(format_tree(self.tree_, self._maybe_feature_names(feature_names)))
