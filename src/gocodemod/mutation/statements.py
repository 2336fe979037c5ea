"""
Handles for statement-shaped query matches.

FunctionCall, Assignment, IfStmt and SwitchStmt wrap a located node and
expose the insert/remove/replace primitives anchored on the statement
that holds it, plus accessors for the fields codemods usually rewrite.
"""

from typing import Callable, Iterator, List, Optional, Union

from gocodemod.exceptions import InvalidNodeError
from gocodemod.fragments import parse_expression
from gocodemod.logging_config import logger
from gocodemod.printer import source_code
from gocodemod.tree.ancestry import Located
from gocodemod.tree.kinds import STATEMENT_TYPES
from gocodemod.tree.node import Node
from . import primitives
from .literals import StructLiteral

NodeOrText = Union[Node, str]


def _expression(value: NodeOrText) -> Node:
    if isinstance(value, str):
        return parse_expression(value)
    return value


class StatementHandle:
    """Common mutations for a match anchored on a statement."""

    def __init__(self, located: Located):
        self.located = located

    @property
    def node(self) -> Node:
        return self.located.node

    def _anchor(self) -> Optional[Located]:
        if primitives.is_statement(self.located):
            return self.located
        return None

    def _anchor_for(self, action: str) -> Optional[Located]:
        anchor = self._anchor()
        if anchor is None:
            logger.debug(f"{action} skipped: {self.node.type} is not in a statement list")
        return anchor

    def insert_before(self, nodes: primitives.Nodes) -> bool:
        anchor = self._anchor_for("insert_before")
        return anchor is not None and primitives.insert_before(anchor, nodes)

    def insert_after(self, nodes: primitives.Nodes) -> bool:
        anchor = self._anchor_for("insert_after")
        return anchor is not None and primitives.insert_after(anchor, nodes)

    def remove(self, structural: Optional[bool] = None) -> int:
        """
        Remove the statement.

        Args:
            structural: Remove every structurally identical statement of the
                same list instead of only this one (defaults to config)

        Returns:
            Number of statements removed; 0 outside a statement list
        """
        anchor = self._anchor_for("remove")
        if anchor is None:
            return 0
        return primitives.remove(anchor, structural)

    def replace(self, nodes: primitives.Nodes, structural: Optional[bool] = None) -> int:
        """Replace the statement with one or more statements."""
        anchor = self._anchor_for("replace")
        if anchor is None:
            return 0
        return primitives.replace(anchor, nodes, structural)

    def source(self) -> str:
        return source_code(self.node)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source()!r})"


class CallArguments:
    """Positional view of a call's argument list."""

    def __init__(self, call: Node):
        self.call = call

    @property
    def node(self) -> Node:
        arguments = self.call.child("arguments")
        if arguments is None:
            arguments = Node("argument_list")
            self.call.set_child("arguments", arguments)
        return arguments

    @property
    def args(self) -> List[Node]:
        return self.node.named()

    def __len__(self) -> int:
        return len(self.args)

    def __getitem__(self, index: int) -> Node:
        return self.args[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.args)

    def swap(self, i: int, j: int) -> None:
        args = self.args
        self.node.swap_children(args[i], args[j])

    def move_to_front(self, selector: Union[int, Callable[[Node], bool]]) -> bool:
        """
        Move one argument to position 0, keeping the others in order.

        Args:
            selector: Argument index, or a predicate picking the first match

        Returns:
            True if an argument was moved
        """
        args = self.args
        if callable(selector):
            index = next((i for i, arg in enumerate(args) if selector(arg)), None)
            if index is None:
                return False
        else:
            index = selector
        moved = args[index]
        if moved is args[0]:
            return False
        container = self.node
        container.remove_child(moved)
        container.insert_child(container.index_of(args[0]), moved)
        return True

    def set(self, index: int, value: NodeOrText) -> None:
        self.node.replace_child(self.args[index], _expression(value))

    def append(self, value: NodeOrText) -> None:
        node = _expression(value)
        node.field = None
        self.node.children.append(node)

    def remove(self, index: int) -> None:
        self.node.remove_child(self.args[index])


class FunctionCall(StatementHandle):
    """
    A call expression.

    Mutations act on the statement holding the call: its expression
    statement, or the assignment, return, go or defer statement whose
    expression list contains it. Calls nested in other expressions have no
    such statement and their mutations are no-ops.
    """

    def _anchor(self) -> Optional[Located]:
        return primitives.call_statement(self.located)

    @property
    def function(self) -> Node:
        return self.node.child("function")

    @property
    def function_name(self) -> str:
        """Callee as written, e.g. "errors.Wrapf"."""
        return source_code(self.function)

    def set_function(self, callee: NodeOrText) -> None:
        self.node.set_child("function", _expression(callee))

    @property
    def arguments(self) -> CallArguments:
        return CallArguments(self.node)

    @property
    def args(self) -> List[Node]:
        return self.arguments.args

    def replace(self, nodes: primitives.Nodes, structural: Optional[bool] = None) -> int:
        """
        Replace the call.

        A statement (or list of nodes) replaces the whole statement holding
        the call; a single expression replaces just the call.
        """
        anchor = self._anchor_for("replace")
        if anchor is None:
            return 0
        if isinstance(nodes, Node) and nodes.type not in STATEMENT_TYPES:
            return primitives.replace_expression(anchor, self.located, nodes, structural)
        return primitives.replace(anchor, nodes, structural)


class Assignment(StatementHandle):
    """An ``=``, ``op=`` or ``:=`` statement sitting in a statement list."""

    @property
    def operator(self) -> str:
        if self.node.type == "short_var_declaration":
            return ":="
        return self.node.operator or "="

    @property
    def left(self) -> Optional[Node]:
        return self.node.child("left")

    @property
    def right(self) -> Optional[Node]:
        return self.node.child("right")

    @property
    def targets(self) -> List[Node]:
        return _items(self.left)

    @property
    def values(self) -> List[Node]:
        return _items(self.right)

    def struct(self) -> StructLiteral:
        """
        The struct literal assigned by this statement.

        Raises:
            InvalidNodeError: If the first value is not a composite literal
        """
        values = self.values
        if not values or values[0].type != "composite_literal":
            raise InvalidNodeError(f"{self.source()!r} does not assign a composite literal")
        return StructLiteral(values[0])


class IfStmt(StatementHandle):

    @property
    def condition(self) -> Optional[Node]:
        return self.node.child("condition")

    @property
    def consequence(self) -> Optional[Node]:
        return self.node.child("consequence")

    @property
    def alternative(self) -> Optional[Node]:
        return self.node.child("alternative")

    def set_condition(self, condition: NodeOrText) -> None:
        self.node.set_child("condition", _expression(condition))

    def remove_condition(self) -> bool:
        """
        Replace the if statement with the statements of its body.

        The else branch, if any, is dropped.
        """
        anchor = self._anchor_for("remove_condition")
        if anchor is None:
            return False
        body = self.consequence
        statements = [c for c in body.children] if body is not None else []
        container = anchor.parent.node
        index = container.index_of(self.node)
        if index < 0:
            return False
        for statement in statements:
            statement.field = None
        container.children[index:index + 1] = statements
        logger.debug(f"Unwrapped if statement into {len(statements)} statement(s)")
        return True


class SwitchStmt(StatementHandle):
    """An expression switch or a type switch."""

    @property
    def is_type_switch(self) -> bool:
        return self.node.type == "type_switch_statement"

    @property
    def value(self) -> Optional[Node]:
        return self.node.child("value")

    def cases(self) -> List[Node]:
        return [c for c in self.node.children if c.field is None and not c.is_comment]


def _items(node: Optional[Node]) -> List[Node]:
    if node is None:
        return []
    if node.type == "expression_list":
        return node.named()
    return [node]
