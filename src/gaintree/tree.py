# -*- coding: utf-8 -*-
"""
gaintree.tree
=============

Greedy binary decision-tree induction and inference.

A tree is grown from rows whose last field is the outcome label.  At every
node each predictor column is tried against each value it actually takes in
the data; numeric pivots split on ``value >= pivot`` and every other pivot on
``value == pivot``.  The candidate with the highest information gain under a
pluggable impurity measure wins, and growth stops when no candidate gains
anything.  Leaves keep the histogram of the training labels that reached
them.

Besides building (``build_tree``) the module provides exact classification
(``classify``), classification of observations with missing fields
(``md_classify``) and in-place entropy-gain pruning (``prune``).
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from joblib import Parallel, delayed
from loguru import logger

from .exceptions import (
    BuildCancelledError,
    InconsistentTreeError,
    MalformedDatasetError,
    MissingFieldError,
    OutOfRangeColumnError,
)
from .impurity import Criterion, entropy, expand, resolve_criterion, unique_counts


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _isnan_scalar(v) -> bool:
    return (v is None) or (isinstance(v, (float, np.floating)) and bool(np.isnan(v)))


def is_missing(value) -> bool:
    """True for the missing-field markers ``None`` and NaN."""
    return _isnan_scalar(value)


def _is_numeric(v) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, (bool, np.bool_))


def _matches(value, pivot) -> bool:
    # comparison mode follows the pivot, never the observed value
    if _is_numeric(pivot):
        return _is_numeric(value) and not _isnan_scalar(value) and value >= pivot
    return value == pivot


def check_rows(rows: Sequence[Sequence[Any]]) -> int:
    """Return the common arity of ``rows``; raise ``MalformedDatasetError`` otherwise."""
    arity = None
    for i, row in enumerate(rows):
        n = len(row)
        if arity is None:
            arity = n
        if n == 0 or n != arity:
            raise MalformedDatasetError(row_index=i, expected_arity=arity, actual_arity=n)
    return arity or 0


# -----------------------------------------------------------------------------
# Node
# -----------------------------------------------------------------------------
@dataclass
class TreeNode:
    """
    A node of a binary decision tree.

    A leaf carries ``results``, the histogram of training labels that reached
    it (possibly empty).  An internal node carries ``column_index``, ``pivot``
    and its two exclusively owned branches: ``true_branch`` for rows matching
    the pivot and ``false_branch`` for the rest.

    Attributes
    ----------
    column_index : int or None
        Predictor column tested at this node; ``None`` for leaves.
    pivot : object
        Value the column is compared against; ``None`` for leaves.
    true_branch, false_branch : TreeNode or None
        Children of an internal node.
    results : dict or None
        Label histogram of a leaf; ``None`` for internal nodes.
    """

    column_index: int | None = None
    pivot: Any = None
    true_branch: TreeNode | None = None
    false_branch: TreeNode | None = None
    results: dict | None = None

    @property
    def is_leaf(self) -> bool:
        return self.results is not None

    @property
    def n_leaves(self) -> int:
        if self.is_leaf:
            return 1
        return sum(ch.n_leaves for ch in self.branches())

    @property
    def depth(self) -> int:
        if self.is_leaf:
            return 0
        return 1 + max(ch.depth for ch in self.branches())

    @property
    def n_samples(self) -> float:
        """Leaf mass, or the total mass of the leaves below an internal node."""
        if self.is_leaf:
            return sum(self.results.values())
        return sum(ch.n_samples for ch in self.branches())

    def branches(self) -> tuple[TreeNode, TreeNode]:
        if self.true_branch is None or self.false_branch is None:
            raise InconsistentTreeError(
                f"Internal node {self.column_index}:{self.pivot!r} is missing a branch"
            )
        return self.true_branch, self.false_branch

    def branch_for(self, value) -> TreeNode:
        """Child followed by an observation whose tested field equals ``value``."""
        t_node, f_node = self.branches()
        return t_node if _matches(value, self.pivot) else f_node

    def collapse(self, results: dict) -> None:
        """Turn this node into a leaf holding ``results``."""
        self.results = results
        self.true_branch = None
        self.false_branch = None
        self.column_index = None
        self.pivot = None


# -----------------------------------------------------------------------------
# Partitioning
# -----------------------------------------------------------------------------
def divide(rows, column: int, pivot) -> tuple[list, list]:
    """
    Split ``rows`` on ``column`` using ``pivot``.

    A numeric pivot matches cells that are numeric and ``>= pivot``; any other
    pivot matches cells equal to it.  Missing cells never match a numeric
    pivot.

    Parameters
    ----------
    rows : sequence of rows
        Rows to split.
    column : int
        Index of the column to test.
    pivot : object
        Value to compare against.

    Returns
    -------
    (list, list)
        Matching and non-matching rows, each in input order.
    """
    matched, unmatched = [], []
    for row in rows:
        (matched if _matches(row[column], pivot) else unmatched).append(row)
    return matched, unmatched


# -----------------------------------------------------------------------------
# Tree construction
# -----------------------------------------------------------------------------
class TreeBuilder:
    """
    Recursive greedy induction of a ``TreeNode`` tree.

    Parameters
    ----------
    criterion : str or callable, default="entropy"
        ``"entropy"``, ``"gini"``, ``"variance"`` or any callable scoring a row
        set.
    n_jobs : int or None, default=None
        Number of worker threads for the per-column split search.  ``None``
        and ``1`` search sequentially; ``-1`` uses all cores.  The chosen split
        does not depend on this value.
    cancel_event : object with ``is_set()``, optional
        Checked before every node expansion; once set the build aborts with
        ``BuildCancelledError``.
    """

    def __init__(self, criterion: str | Criterion = "entropy", *,
                 n_jobs: int | None = None, cancel_event=None):
        self.criterion = criterion
        self.score = resolve_criterion(criterion)
        self.n_jobs = n_jobs
        self.cancel_event = cancel_event
        self._parallel: Parallel | None = None

    def build(self, rows) -> TreeNode:
        rows = list(rows)
        arity = check_rows(rows)
        logger.debug("Building tree from {} rows with {} predictor columns", len(rows), max(arity - 1, 0))
        if self.n_jobs in (None, 1):
            tree = self._grow(rows)
        else:
            with Parallel(n_jobs=self.n_jobs, prefer="threads") as parallel:
                self._parallel = parallel
                try:
                    tree = self._grow(rows)
                finally:
                    self._parallel = None
        logger.debug("Built tree with {} leaves, depth {}", tree.n_leaves, tree.depth)
        return tree

    def _grow(self, rows: list) -> TreeNode:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise BuildCancelledError("Tree build cancelled")
        if not rows:
            return TreeNode(results={})

        current_score = self.score(rows)
        n_columns = len(rows[0]) - 1
        if self._parallel is None or n_columns < 2:
            per_column = [_best_split_in_column(rows, col, current_score, self.score)
                          for col in range(n_columns)]
        else:
            per_column = self._parallel(
                delayed(_best_split_in_column)(rows, col, current_score, self.score)
                for col in range(n_columns)
            )

        # columns are reduced in ascending order so ties go to the earliest column
        best = None
        for cand in per_column:
            if cand is not None and (best is None or cand[0] > best[0]):
                best = cand

        if best is None:
            results = unique_counts(rows)
            logger.trace("Leaf {} from {} rows", results, len(rows))
            return TreeNode(results=results)

        gain, col, pivot, set1, set2 = best
        logger.debug("Split on column {} at {!r}: gain={:.4f} ({} / {} rows)",
                     col, pivot, gain, len(set1), len(set2))
        return TreeNode(
            column_index=col,
            pivot=pivot,
            true_branch=self._grow(set1),
            false_branch=self._grow(set2),
        )


def _best_split_in_column(rows: list, col: int, current_score: float, score: Criterion):
    """Best ``(gain, col, pivot, set1, set2)`` for one column, or ``None`` if nothing gains."""
    best_gain, best = 0.0, None
    n = float(len(rows))
    # dict keeps first-encountered order
    for value in dict.fromkeys(row[col] for row in rows):
        if _isnan_scalar(value):
            continue
        set1, set2 = divide(rows, col, value)
        if not set1 or not set2:
            continue
        p = len(set1) / n
        gain = current_score - p * score(set1) - (1 - p) * score(set2)
        if gain > best_gain:
            best_gain, best = gain, (gain, col, value, set1, set2)
    return best


def build_tree(rows, criterion: str | Criterion = "entropy", *,
               n_jobs: int | None = None, cancel_event=None) -> TreeNode:
    """
    Build a decision tree from ``rows``.

    Parameters
    ----------
    rows : sequence of rows
        Training rows of equal arity; the last field of each row is its
        outcome label.
    criterion : str or callable, default="entropy"
        Impurity measure, see ``TreeBuilder``.
    n_jobs : int or None, default=None
        Worker threads for the split search.
    cancel_event : object with ``is_set()``, optional
        Cooperative cancellation flag.

    Returns
    -------
    TreeNode
        Root of the tree; an empty leaf when ``rows`` is empty.

    Raises
    ------
    MalformedDatasetError
        If the rows do not all have the same, non-zero arity.
    BuildCancelledError
        If ``cancel_event`` is set before the build completes.
    """
    return TreeBuilder(criterion, n_jobs=n_jobs, cancel_event=cancel_event).build(rows)


# -----------------------------------------------------------------------------
# Prediction
# -----------------------------------------------------------------------------
def classify(tree: TreeNode, observation) -> dict:
    """
    Return the label histogram of the leaf ``observation`` falls into.

    Numeric pivots send the observation to the true branch when its field is
    ``>= pivot``; other pivots when it is ``== pivot``.

    Raises
    ------
    OutOfRangeColumnError
        If a visited node tests a column the observation does not have.
    MissingFieldError
        If a visited node tests a field that is ``None`` or NaN.
    InconsistentTreeError
        If an internal node lacks a branch.
    """
    node = tree
    while not node.is_leaf:
        col = node.column_index
        if col >= len(observation):
            raise OutOfRangeColumnError(col, len(observation))
        v = observation[col]
        if _isnan_scalar(v):
            raise MissingFieldError(col)
        node = node.branch_for(v)
    return dict(node.results)


def md_classify(tree: TreeNode, observation) -> dict:
    """
    Classify an observation whose fields may be missing.

    Where the tested field is present the observation follows one branch as
    in ``classify``.  Where it is missing (``None``, NaN, or beyond the end of
    the observation) both branches are evaluated and their histograms merged,
    each weighted by its share of the two branches' total mass.

    Returns
    -------
    dict
        Label to (possibly fractional) weight.
    """
    if tree.is_leaf:
        return dict(tree.results)
    col = tree.column_index
    v = observation[col] if col < len(observation) else None
    if not _isnan_scalar(v):
        return md_classify(tree.branch_for(v), observation)

    t_node, f_node = tree.branches()
    tr = md_classify(t_node, observation)
    fr = md_classify(f_node, observation)
    tcount = sum(tr.values())
    fcount = sum(fr.values())
    total = tcount + fcount
    if total == 0:
        tw = fw = 0.0
    else:
        tw, fw = tcount / total, fcount / total
    return {k: tw * tr.get(k, 0) + fw * fr.get(k, 0) for k in dict.fromkeys([*tr, *fr])}


# -----------------------------------------------------------------------------
# Pruning
# -----------------------------------------------------------------------------
def _check_consistency(node: TreeNode) -> None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_leaf:
            continue
        stack.extend(current.branches())


def _merge_counts(a: dict, b: dict) -> dict:
    merged = dict(a)
    for label, count in b.items():
        merged[label] = merged.get(label, 0) + count
    return merged


def prune(tree: TreeNode, min_gain: float) -> int:
    """
    Merge sibling leaves whose separation gains less than ``min_gain``.

    Works bottom-up and in place.  When both children of a node are leaves the
    node's entropy increase from merging them is

        entropy(t + f) - (entropy(t) + entropy(f)) / 2

    and the node becomes a leaf with the summed histogram if that is below
    ``min_gain``.  ``prune(tree, math.inf)`` reduces the tree to one leaf.

    Parameters
    ----------
    tree : TreeNode
        Root of the tree to prune.
    min_gain : float
        Threshold below which leaf pairs are merged.

    Returns
    -------
    int
        Number of internal nodes collapsed into leaves.

    Raises
    ------
    InconsistentTreeError
        If any internal node lacks a branch.  The tree is checked before any
        node is touched, so it is left unchanged.
    """
    _check_consistency(tree)
    return _prune_node(tree, float(min_gain))


def _prune_node(node: TreeNode, min_gain: float) -> int:
    if node.is_leaf:
        return 0
    collapsed = _prune_node(node.true_branch, min_gain) + _prune_node(node.false_branch, min_gain)
    t_node, f_node = node.true_branch, node.false_branch
    if t_node.is_leaf and f_node.is_leaf:
        combined = _merge_counts(t_node.results, f_node.results)
        delta = entropy(expand(combined)) - (entropy(expand(t_node.results)) + entropy(expand(f_node.results))) / 2.0
        if delta < min_gain:
            logger.debug("Pruning {}:{!r} (delta={:.4f}) into {}", node.column_index, node.pivot, delta, combined)
            node.collapse(combined)
            collapsed += 1
    return collapsed

