# gaintree/__init__.py
"""
gaintree: information-gain decision trees for mixed categorical and numeric data.

Exports:
    - build_tree, classify, md_classify, prune, divide
    - entropy, gini_impurity, variance
    - GainTreeClassifier
    - GainTreeRegressor
"""
from loguru import logger

from .classifier import GainTreeClassifier
from .exceptions import (
    BuildCancelledError,
    GainTreeError,
    InconsistentTreeError,
    MalformedDatasetError,
    MissingFieldError,
    OutOfRangeColumnError,
)
from .export import export_rules, format_tree, to_dot, to_graphviz
from .impurity import entropy, gini_impurity, unique_counts, variance
from .logging import PACKAGE_NAME, enable_logging
from .regressor import GainTreeRegressor
from .tree import TreeBuilder, TreeNode, build_tree, classify, divide, md_classify, prune

logger.disable(PACKAGE_NAME)

__all__ = [
    "BuildCancelledError",
    "GainTreeClassifier",
    "GainTreeError",
    "GainTreeRegressor",
    "InconsistentTreeError",
    "MalformedDatasetError",
    "MissingFieldError",
    "OutOfRangeColumnError",
    "TreeBuilder",
    "TreeNode",
    "build_tree",
    "classify",
    "divide",
    "enable_logging",
    "entropy",
    "export_rules",
    "format_tree",
    "gini_impurity",
    "md_classify",
    "prune",
    "to_dot",
    "to_graphviz",
    "unique_counts",
    "variance",
]
__version__ = "0.1.0"
