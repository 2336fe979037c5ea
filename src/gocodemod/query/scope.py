"""
Scope: the function or method declaration a query match was found under.
"""

from typing import Optional

from gocodemod.logging_config import logger
from gocodemod.mutation.statements import FunctionCall
from gocodemod.printer import source_code
from gocodemod.tree.ancestry import Located
from gocodemod.tree.node import Node


class Scope:
    """
    Enclosing function declaration of a match, or the top level.

    Two scopes are equal when they wrap the same declaration node, so
    scopes from separate queries over the same tree can be used as the
    same dictionary key.
    """

    __slots__ = ("function",)

    def __init__(self, function: Optional[Located] = None):
        self.function = function

    @property
    def is_top_level(self) -> bool:
        return self.function is None

    @property
    def node(self) -> Optional[Node]:
        return self.function.node if self.function is not None else None

    @property
    def name(self) -> str:
        """Function or method name; empty for the top level."""
        if self.function is None:
            return ""
        name = self.function.node.child("name")
        return name.text if name is not None else ""

    def find_call(self, name: str) -> Optional[FunctionCall]:
        """
        First call inside this function whose callee renders as ``name``.

        Args:
            name: Callee text, e.g. "errors.Wrapf" or "helper"

        Returns:
            The call, or None when absent or for the top-level scope
        """
        if self.function is None:
            logger.debug(f"find_call({name!r}) on the top-level scope")
            return None

        stack = [self.function]
        while stack:
            located = stack.pop()
            node = located.node
            if node.type == "call_expression":
                callee = node.child("function")
                if callee is not None and source_code(callee) == name:
                    return FunctionCall(located)
            for child in reversed(node.children):
                stack.append(located.child(child))
        return None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.node is other.node

    def __hash__(self) -> int:
        return id(self.node) if self.node is not None else 0

    def __repr__(self) -> str:
        if self.function is None:
            return "Scope(<top level>)"
        return f"Scope({self.name!r})"
