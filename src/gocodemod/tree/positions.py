"""
Position stripping for synthesized sub-trees.

Fragments are parsed inside throwaway scaffolding; their coordinates mean
nothing in the file they get spliced into, so they are cleared before use.
"""

from typing import Optional, Set

from gocodemod.exceptions import RecursionLimitError
from .node import Node

# Stays below the interpreter recursion limit
DEFAULT_MAX_DEPTH = 500


def clear_positions(
    node: Node,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
    _visited: Optional[Set[int]] = None,
) -> Node:
    """
    Recursively drop start/end positions from ``node`` and its descendants.

    Args:
        node: Sub-tree root
        max_depth: Deepest level the walk may reach

    Returns:
        The same node, for chaining

    Raises:
        RecursionLimitError: If the tree is deeper than ``max_depth``
    """
    if _depth > max_depth:
        raise RecursionLimitError(max_depth)
    if _visited is None:
        _visited = set()
    # Shared sub-trees are cleared once
    if id(node) in _visited:
        return node
    _visited.add(id(node))

    node.start = None
    node.end = None
    for child in node.children:
        clear_positions(child, max_depth, _depth + 1, _visited)
    return node
