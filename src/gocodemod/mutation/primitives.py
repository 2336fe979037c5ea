"""
Statement-level mutation primitives.

Every primitive takes a located statement (a node sitting directly in a
block or case clause) and rewrites that statement list in place. Handles
that cannot be mapped to such a statement turn their mutations into
logged no-ops.
"""

from typing import List, Optional, Sequence, Union

from gocodemod.exceptions import InvalidNodeError
from gocodemod.logging_config import logger
from gocodemod.tree.ancestry import Located
from gocodemod.tree.kinds import EXPRESSION_TYPES, STATEMENT_CONTAINERS, STATEMENT_TYPES
from gocodemod.tree.node import Node
from .config import get_mutation_config

Nodes = Union[Node, Sequence[Node]]


def _structural(structural: Optional[bool]) -> bool:
    if structural is None:
        return bool(get_mutation_config()["structural_matching"])
    return structural


def is_statement(located: Optional[Located]) -> bool:
    """True when ``located`` sits directly in a statement list."""
    return (
        located is not None
        and located.parent is not None
        and located.parent.node.type in STATEMENT_CONTAINERS
        and located.node.field is None
        and not located.node.is_comment
    )


def call_statement(call: Located) -> Optional[Located]:
    """
    Statement that directly holds a call expression.

    Expression lists between the call and the statement are skipped, so
    ``x := f()`` and ``return a, f()`` resolve to the assignment and the
    return. A call nested inside another expression has no statement.
    """
    current = call.parent
    while current is not None and current.node.type == "expression_list":
        current = current.parent
    if is_statement(current):
        return current
    return None


def as_statements(nodes: Nodes, wrap_expressions: Optional[bool] = None) -> List[Node]:
    """
    Normalize insertion input to a list of statement nodes.

    Args:
        nodes: A node or a sequence of nodes
        wrap_expressions: Wrap bare expressions in expression statements
            (defaults to the mutation config)

    Returns:
        Statement nodes, field cleared

    Raises:
        InvalidNodeError: For nodes that cannot stand in a statement list
    """
    if isinstance(nodes, Node):
        nodes = [nodes]
    if wrap_expressions is None:
        wrap_expressions = get_mutation_config()["wrap_expressions"]

    statements = []
    for node in nodes:
        if node.type in STATEMENT_TYPES or node.is_comment:
            statement = node
        elif node.type in EXPRESSION_TYPES and wrap_expressions:
            statement = Node("expression_statement", [node])
            node.field = None
        else:
            raise InvalidNodeError(f"{node.type} cannot be used as a statement")
        statement.field = None
        statements.append(statement)
    return statements


def _anchor_index(anchor: Located) -> int:
    return anchor.parent.node.index_of(anchor.node)


def trailing_comment(container: Node, statement: Node) -> Optional[Node]:
    """
    The comment sharing the last row of ``statement`` in ``container``.

    Such a comment belongs to its statement: it moves and disappears with
    it, and nothing is inserted between the two.
    """
    index = container.index_of(statement)
    if index < 0 or index + 1 >= len(container.children):
        return None
    following = container.children[index + 1]
    if (
        following.is_comment
        and statement.end is not None
        and following.start is not None
        and following.start.row == statement.end.row
    ):
        return following
    return None


def insert_before(anchor: Located, nodes: Nodes) -> bool:
    """Insert ``nodes`` immediately before the anchor statement."""
    statements = as_statements(nodes)
    index = _anchor_index(anchor)
    if index < 0:
        logger.warning(f"{anchor.node.type} is no longer in its statement list, nothing inserted")
        return False
    container = anchor.parent.node
    container.children[index:index] = statements
    logger.debug(f"Inserted {len(statements)} statement(s) before {anchor.node.type}")
    return True


def insert_after(anchor: Located, nodes: Nodes) -> bool:
    """Insert ``nodes`` after the anchor statement and its trailing comment."""
    statements = as_statements(nodes)
    index = _anchor_index(anchor)
    if index < 0:
        logger.warning(f"{anchor.node.type} is no longer in its statement list, nothing inserted")
        return False
    container = anchor.parent.node
    if trailing_comment(container, anchor.node) is not None:
        index += 1
    container.children[index + 1:index + 1] = statements
    logger.debug(f"Inserted {len(statements)} statement(s) after {anchor.node.type}")
    return True


def matching_statements(anchor: Located, structural: Optional[bool] = None) -> List[Node]:
    """
    Statements of the anchor's list that a Remove/Replace would touch.

    By identity this is the anchor alone; structurally it is every
    statement deeply equal to it.
    """
    container = anchor.parent.node
    if not _structural(structural):
        return [anchor.node] if container.index_of(anchor.node) >= 0 else []
    return [
        child for child in container.children
        if child.field is None and child.structurally_equal(anchor.node)
    ]


def remove(anchor: Located, structural: Optional[bool] = None) -> int:
    """
    Remove the anchor statement, with its trailing comment, from its list.

    Returns:
        Number of statements removed
    """
    container = anchor.parent.node
    targets = matching_statements(anchor, structural)
    for target in targets:
        comment = trailing_comment(container, target)
        if comment is not None:
            container.remove_child(comment)
        container.remove_child(target)
    logger.debug(f"Removed {len(targets)} {anchor.node.type} statement(s)")
    return len(targets)


def replace(anchor: Located, nodes: Nodes, structural: Optional[bool] = None) -> int:
    """
    Replace the anchor statement with ``nodes``.

    A trailing comment of the replaced statement stays on the line of the
    last replacement statement.

    Returns:
        Number of statements replaced
    """
    statements = as_statements(nodes)
    container = anchor.parent.node
    targets = matching_statements(anchor, structural)
    pristine = [s.copy() for s in statements] if len(targets) > 1 else []
    for i, target in enumerate(targets):
        # Later matches get their own copies so no node is shared
        replacement = statements if i == 0 else [s.copy() for s in pristine]
        if replacement and trailing_comment(container, target) is not None:
            _take_row(replacement[-1], target)
        index = container.index_of(target)
        container.children[index:index + 1] = replacement
    logger.debug(f"Replaced {len(targets)} {anchor.node.type} statement(s)")
    return len(targets)


def _take_row(statement: Node, replaced: Node) -> None:
    # The printer keeps a comment on the row where the previous item ends
    if statement.start is None:
        statement.end = replaced.end


def replace_expression(anchor: Located, expression: Located, new: Node,
                       structural: Optional[bool] = None) -> int:
    """
    Replace an expression that belongs to the anchor statement.

    Structural matching substitutes the expression of every expression
    statement equal to it, and every equal result of a return statement,
    in the anchor's statement list.

    Returns:
        Number of expressions replaced
    """
    if not _structural(structural):
        parent = expression.parent.node
        if not parent.replace_child(expression.node, new):
            logger.warning(f"{expression.node.type} is no longer in the tree, nothing replaced")
            return 0
        return 1

    target = expression.node
    count = 0
    for statement in anchor.parent.node.children:
        if statement.type == "expression_statement":
            slots = [statement]
        elif statement.type == "return_statement":
            slots = [c for c in statement.children if c.type == "expression_list"] or [statement]
        else:
            continue
        for slot in slots:
            for child in list(slot.children):
                if child.is_comment or not child.structurally_equal(target):
                    continue
                slot.replace_child(child, new if count == 0 else new.copy())
                count += 1
    logger.debug(f"Replaced {count} matching {target.type} expression(s)")
    return count
