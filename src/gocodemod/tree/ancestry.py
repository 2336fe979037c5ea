"""
Located: a node paired with the chain of its ancestors.

Chains are built fresh by every traversal and are never used to mutate
upwards; mutations go through the statement container found on the chain.
"""

from typing import Iterator, Optional

from .node import Node


class Located:
    """A node plus a link to its parent's Located (None at the file root)."""

    __slots__ = ("node", "parent")

    def __init__(self, node: Node, parent: Optional["Located"] = None):
        self.node = node
        self.parent = parent

    @property
    def depth(self) -> int:
        """Number of links between this node and the root."""
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = current.parent
        return depth

    @property
    def root(self) -> "Located":
        current = self
        while current.parent is not None:
            current = current.parent
        return current

    def ancestors(self) -> Iterator["Located"]:
        """Yield parent, grandparent, ... up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def find_ancestor(self, *types: str, include_self: bool = False) -> Optional["Located"]:
        """Nearest ancestor whose node type is one of ``types``."""
        current = self if include_self else self.parent
        while current is not None:
            if current.node.type in types:
                return current
            current = current.parent
        return None

    def child(self, node: Node) -> "Located":
        """Extend the chain by one level."""
        return Located(node, self)

    def __repr__(self) -> str:
        return f"Located({self.node.type!r}, depth={self.depth})"
