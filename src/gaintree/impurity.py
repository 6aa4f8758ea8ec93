"""
gaintree.impurity
=================

Scoring functions measuring how mixed the outcome labels of a row set are.
Every function takes a sequence of rows whose last element is the outcome and
returns a non-negative float; lower means more homogeneous.  The functions
are pure and never fail on well-formed input: an empty row set scores 0.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Sequence

import numpy as np

Row = Sequence[Any]
Criterion = Callable[[Sequence[Row]], float]


def unique_counts(rows: Sequence[Row]) -> dict:
    """Histogram of outcome labels, keyed in first-seen order."""
    counts: dict = {}
    for row in rows:
        label = row[-1]
        counts[label] = counts.get(label, 0) + 1
    return counts


def expand(counts: dict[Hashable, int]) -> list[list]:
    """Turn a label histogram back into single-field label rows."""
    rows: list[list] = []
    for label, count in counts.items():
        rows.extend([label] for _ in range(int(count)))
    return rows


def _probabilities(rows: Sequence[Row]) -> np.ndarray:
    counts = np.fromiter(unique_counts(rows).values(), dtype=float)
    return counts / len(rows)


def entropy(rows: Sequence[Row]) -> float:
    """
    Shannon entropy (base 2) of the outcome labels.

    Parameters
    ----------
    rows : sequence of rows
        Rows whose last field is the outcome label.

    Returns
    -------
    float
        ``-sum(p * log2(p))`` over the label frequencies; 0 for an empty or
        single-label set.
    """
    if len(rows) == 0:
        return 0.0
    p = _probabilities(rows)
    return float(-np.sum(p * np.log2(p)))


def gini_impurity(rows: Sequence[Row]) -> float:
    """
    Probability that two rows drawn with replacement carry different labels.

    Equal to ``sum_{i != j} p_i * p_j``, computed as ``1 - sum(p ** 2)``.
    Returns 0 for an empty or uniform set.
    """
    if len(rows) == 0:
        return 0.0
    p = _probabilities(rows)
    return float(1.0 - np.sum(p * p))


def variance(rows: Sequence[Row]) -> float:
    """
    Mean squared deviation of numeric outcomes.

    Use instead of ``entropy`` or ``gini_impurity`` when the outcome is a
    number: values further apart score higher.
    """
    if len(rows) == 0:
        return 0.0
    data = np.array([row[-1] for row in rows], dtype=float)
    return float(np.mean((data - data.mean()) ** 2))


CRITERIA: dict[str, Criterion] = {
    "entropy": entropy,
    "gini": gini_impurity,
    "variance": variance,
}


def resolve_criterion(criterion: str | Criterion) -> Criterion:
    """Return the scoring function for a registry name or pass a callable through."""
    if callable(criterion):
        return criterion
    try:
        return CRITERIA[criterion]
    except KeyError:
        raise ValueError(
            f"Unknown criterion {criterion!r}; expected one of {sorted(CRITERIA)} or a callable"
        ) from None
