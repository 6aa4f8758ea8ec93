"""Textual and Graphviz renderings of a ``TreeNode`` tree."""

from __future__ import annotations

from typing import Iterator

from .tree import TreeNode, _is_numeric


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _feature_name(index: int, fn=None) -> str:
    return fn[index] if (fn is not None and 0 <= index < len(fn)) else f"X[{index}]"


def _conditions(node: TreeNode, fn=None) -> tuple[str, str]:
    name = _feature_name(node.column_index, fn)
    if _is_numeric(node.pivot):
        return f"{name} >= {node.pivot}", f"{name} < {node.pivot}"
    return f"{name} == {node.pivot}", f"{name} != {node.pivot}"


def node_name(node: TreeNode) -> str:
    """``"<label>:<count>"`` for the first label of a leaf, ``"<column>:<pivot>"`` otherwise."""
    if node.is_leaf:
        if not node.results:
            return "<empty>"
        label, count = next(iter(node.results.items()))
        return f"{label}:{count}"
    return f"{node.column_index}:{node.pivot}"


def node_ids() -> Iterator[str]:
    """Yield A, B, ..., Z, AA, AB, ... (bijective base 26)."""
    n = 0
    while True:
        n += 1
        k, s = n, ""
        while k > 0:
            k, r = divmod(k - 1, 26)
            s = chr(ord("A") + r) + s
        yield s


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


# -----------------------------------------------------------------------------
# Dot text
# -----------------------------------------------------------------------------
def to_dot(tree: TreeNode) -> str:
    """
    Describe ``tree`` as a Graphviz directed graph.

    Every node gets a sequential identifier in pre-order and one declaration
    line labelled with ``node_name``; the edge from a parent is written after
    the child's own subtree.

    Examples
    --------
    >>> print(to_dot(TreeNode(results={"yes": 2})))
    digraph decision_tree {
      node[label="yes:2"] A;
    }
    """
    lines = ["digraph decision_tree {"]
    _dot_lines(tree, None, node_ids(), lines)
    lines.append("}")
    return "\n".join(lines)


def _dot_lines(node: TreeNode, parent_id, ids: Iterator[str], lines: list[str]) -> None:
    my_id = next(ids)
    lines.append(f'  node[label="{_quote(node_name(node))}"] {my_id};')
    if not node.is_leaf:
        for child in node.branches():
            _dot_lines(child, my_id, ids, lines)
    if parent_id is not None:
        lines.append(f"  {parent_id} -> {my_id}")


def to_graphviz(tree: TreeNode, feature_names=None, format: str = "png"):
    """
    Build a ``graphviz.Digraph`` of ``tree``.

    Internal nodes show their test, leaves their label histogram; edges are
    labelled ``True`` and ``False``.

    Raises
    ------
    RuntimeError
        If the ``graphviz`` Python package is not installed.
    """
    try:
        import graphviz
    except ImportError as e:
        raise RuntimeError("Graphviz is required for graph export but not installed.") from e
    dot = graphviz.Digraph(comment="decision_tree", format=format)
    _add_graph_nodes(dot, tree, node_ids(), feature_names)
    return dot


def _add_graph_nodes(dot, node: TreeNode, ids: Iterator[str], fn) -> str:
    name = next(ids)
    if node.is_leaf:
        dot.node(name, f"{dict(node.results)}", shape="box", style="filled", color="lightgrey")
        return name
    label, _ = _conditions(node, fn)
    dot.node(name, label, shape="ellipse", style="filled", color="lightblue")
    t_node, f_node = node.branches()
    t_id = _add_graph_nodes(dot, t_node, ids, fn)
    f_id = _add_graph_nodes(dot, f_node, ids, fn)
    dot.edge(name, t_id, label="True")
    dot.edge(name, f_id, label="False")
    return name


# -----------------------------------------------------------------------------
# Rules / printing
# -----------------------------------------------------------------------------
def export_rules(tree: TreeNode, feature_names=None) -> list[str]:
    """One ``"<antecedent> => <histogram>"`` string per leaf, true branches first."""
    rules: list[str] = []
    _collect_rules(tree, [], rules, feature_names)
    return rules


def _collect_rules(node: TreeNode, parts, rules, fn) -> None:
    if node.is_leaf:
        body = " AND ".join(parts) if parts else "<root>"
        rules.append(f"{body} => {dict(node.results)}")
        return
    left, right = _conditions(node, fn)
    t_node, f_node = node.branches()
    _collect_rules(t_node, parts + [left], rules, fn)
    _collect_rules(f_node, parts + [right], rules, fn)


def format_tree(tree: TreeNode, feature_names=None, indent: str = "") -> str:
    """Indented if/else rendering of ``tree``."""
    lines: list[str] = []
    _format_node(tree, indent, feature_names, lines)
    return "\n".join(lines)


def _format_node(node: TreeNode, indent, fn, lines) -> None:
    if node.is_leaf:
        lines.append(f"{indent}Predict {dict(node.results)}")
        return
    cond, _ = _conditions(node, fn)
    t_node, f_node = node.branches()
    lines.append(f"{indent}if {cond}:")
    _format_node(t_node, indent + "  ", fn, lines)
    lines.append(f"{indent}else:")
    _format_node(f_node, indent + "  ", fn, lines)
