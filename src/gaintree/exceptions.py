"""Custom exceptions for gaintree.

Every exception raised by the tree engine derives from ``GainTreeError`` and
also from the builtin that best describes the failure, so callers can catch
either:

- MalformedDatasetError (ValueError): rows of differing arity passed to a build.
- OutOfRangeColumnError (IndexError): a split column lies beyond an observation.
- MissingFieldError (ValueError): ``classify`` met a missing value.
- InconsistentTreeError (RuntimeError): an internal node lacks a branch.
- BuildCancelledError (RuntimeError): a build was aborted through its cancel event.
"""

from __future__ import annotations


class GainTreeError(Exception):
    """Base exception for all gaintree errors."""


class MalformedDatasetError(GainTreeError, ValueError):
    """Raised when a dataset's rows do not share one arity.

    Attributes:
        row_index (int): Position of the first offending row.
        expected_arity (int): Arity of the first row of the dataset.
        actual_arity (int): Arity of the offending row.

    Examples:
        >>> err = MalformedDatasetError(row_index=3, expected_arity=4, actual_arity=2)
        >>> err.row_index
        3
    """

    row_index: int
    expected_arity: int
    actual_arity: int

    def __init__(self, row_index: int, expected_arity: int, actual_arity: int) -> None:
        if actual_arity == 0:
            msg = f"Row {row_index} is empty; every row needs at least an outcome label"
        else:
            msg = f"Row {row_index} has {actual_arity} fields, expected {expected_arity}"
        super().__init__(msg)
        self.row_index = row_index
        self.expected_arity = expected_arity
        self.actual_arity = actual_arity


class OutOfRangeColumnError(GainTreeError, IndexError):
    """Raised when a tree node tests a column the observation does not have.

    Attributes:
        column_index (int): Column tested by the node.
        arity (int): Number of fields in the observation.
    """

    column_index: int
    arity: int

    def __init__(self, column_index: int, arity: int) -> None:
        super().__init__(f"Column {column_index} is out of range for an observation with {arity} fields")
        self.column_index = column_index
        self.arity = arity


class MissingFieldError(GainTreeError, ValueError):
    """Raised when ``classify`` needs a field that is marked missing.

    Use ``md_classify`` for observations with absent fields.

    Attributes:
        column_index (int): Column holding the missing value.
    """

    column_index: int

    def __init__(self, column_index: int) -> None:
        super().__init__(f"Observation is missing column {column_index}; use md_classify for incomplete observations")
        self.column_index = column_index


class InconsistentTreeError(GainTreeError, RuntimeError):
    """Raised when an internal node does not own both of its branches."""


class BuildCancelledError(GainTreeError, RuntimeError):
    """Raised when a build is aborted by its cancel event.

    A partially grown tree has no defined semantics, so nothing is returned.
    """
