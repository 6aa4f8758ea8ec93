import threading

import pytest
from gaintree import (
    BuildCancelledError,
    GainTreeError,
    MalformedDatasetError,
    TreeBuilder,
    build_tree,
    unique_counts,
)


class _CancelAfter:
    """Cancel flag that trips after ``n`` checks."""

    def __init__(self, n):
        self.n = n
        self.calls = 0

    def is_set(self):
        self.calls += 1
        return self.calls > self.n


def _misclassification(rows):
    if not rows:
        return 0.0
    return 1.0 - max(unique_counts(rows).values()) / len(rows)


# -----------------------------------------------------------------------------
# Parallel search
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("n_jobs", [2, 4, -1])
def test_parallel_build_matches_sequential(signup_rows, n_jobs):
    assert build_tree(signup_rows, n_jobs=n_jobs) == build_tree(signup_rows)


def test_parallel_build_matches_sequential_gini(signup_rows):
    assert build_tree(signup_rows, "gini", n_jobs=2) == build_tree(signup_rows, "gini")


def test_parallel_build_single_predictor():
    rows = [[1, "a"], [2, "a"], [3, "b"]]
    assert build_tree(rows, n_jobs=2) == build_tree(rows)


# -----------------------------------------------------------------------------
# Cancellation
# -----------------------------------------------------------------------------
def test_cancel_before_start(signup_rows):
    event = threading.Event()
    event.set()
    with pytest.raises(BuildCancelledError):
        build_tree(signup_rows, cancel_event=event)


def test_cancel_midway(signup_rows):
    flag = _CancelAfter(3)
    with pytest.raises(BuildCancelledError):
        build_tree(signup_rows, cancel_event=flag)
    assert flag.calls == 4


def test_cancel_midway_parallel(signup_rows):
    with pytest.raises(BuildCancelledError):
        build_tree(signup_rows, n_jobs=2, cancel_event=_CancelAfter(2))


def test_unset_event_does_not_interfere(signup_rows):
    assert build_tree(signup_rows, cancel_event=threading.Event()) == build_tree(signup_rows)


def test_cancelled_is_a_gaintree_error():
    event = threading.Event()
    event.set()
    with pytest.raises(GainTreeError):
        build_tree([[1, "a"]], cancel_event=event)


# -----------------------------------------------------------------------------
# Input validation
# -----------------------------------------------------------------------------
def test_rows_of_unequal_arity():
    with pytest.raises(MalformedDatasetError) as info:
        build_tree([[1, "a"], [2], [3, "b"]])
    err = info.value
    assert (err.row_index, err.expected_arity, err.actual_arity) == (1, 2, 1)
    assert isinstance(err, ValueError)


def test_empty_row_is_malformed():
    with pytest.raises(MalformedDatasetError, match="empty"):
        build_tree([[]])


# -----------------------------------------------------------------------------
# Criteria
# -----------------------------------------------------------------------------
def test_custom_criterion(small_rows):
    # no split lowers the misclassification rate, so the root stays a leaf
    tree = build_tree(small_rows, _misclassification)
    assert tree.results == {"yes": 3, "no": 1}


def test_unknown_criterion():
    with pytest.raises(ValueError, match="Unknown criterion"):
        TreeBuilder("misclassification")


def test_variance_criterion_splits_numeric_outcomes():
    rows = [[1, 1.0], [2, 1.0], [3, 5.0], [4, 5.0]]
    tree = build_tree(rows, "variance")
    assert (tree.column_index, tree.pivot) == (0, 3)
    assert tree.true_branch.results == {5.0: 2}
    assert tree.false_branch.results == {1.0: 2}
