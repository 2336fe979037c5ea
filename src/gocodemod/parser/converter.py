"""
Converter: tree-sitter tree -> mutable Node tree.

tree-sitter trees are immutable, so the parse is copied once into Node
objects that the query and mutation layers can rewrite in place.
"""

from typing import Iterator, List, Optional, Tuple

from gocodemod.tree.node import ATOMIC_TYPES, Node, Position

# Wrappers whose children are hoisted into the parent
SPLICED_TYPES = frozenset({"statement_list", "var_spec_list"})

# Single-child wrappers replaced by their child, which inherits the field
UNWRAPPED_TYPES = frozenset({"literal_element"})

_WHITESPACE = b" \t\r\n"


def _span(ts_node, source: bytes) -> Tuple[Position, Position, int]:
    """
    Start, end and end byte of a node, with trailing whitespace excluded.

    Statement terminators are newline tokens, so a node closing a statement
    list can end at column 0 of the following row.
    """
    start = Position(ts_node.start_point[0], ts_node.start_point[1])
    end_byte = ts_node.end_byte
    trimmed = end_byte
    while trimmed > ts_node.start_byte and source[trimmed - 1] in _WHITESPACE:
        trimmed -= 1
    if trimmed == end_byte:
        return start, Position(ts_node.end_point[0], ts_node.end_point[1]), end_byte
    row = ts_node.end_point[0] - source.count(b"\n", trimmed, end_byte)
    column = trimmed - (source.rfind(b"\n", 0, trimmed) + 1)
    return start, Position(row, column), trimmed


def _new_node(ts_node, source: bytes) -> Node:
    start, end, end_byte = _span(ts_node, source)
    if ts_node.child_count == 0 or ts_node.type in ATOMIC_TYPES:
        text = source[ts_node.start_byte:end_byte].decode("utf-8", errors="replace")
        return Node(ts_node.type, text=text, start=start, end=end)
    return Node(ts_node.type, start=start, end=end)


def _children(ts_node) -> Iterator[Tuple[object, Optional[str]]]:
    cursor = ts_node.walk()
    if not cursor.goto_first_child():
        return
    while True:
        yield cursor.node, cursor.field_name
        if not cursor.goto_next_sibling():
            return


def convert(ts_node, source: bytes) -> Node:
    """
    Convert a tree-sitter node (and its subtree) into a Node.

    The walk keeps its own stack, so arbitrarily deep trees (long operator
    chains) convert without hitting the interpreter recursion limit.

    Args:
        ts_node: tree-sitter Node
        source: The exact bytes that were parsed

    Returns:
        Root of the converted tree
    """
    root = _new_node(ts_node, source)
    if root.is_leaf:
        return root

    # (remaining children, node being filled, field it fills in its parent)
    stack = [(_children(ts_node), root, None)]
    while stack:
        children, node, field = stack[-1]
        entry = next(children, None)
        if entry is None:
            stack.pop()
            _mark_blank_lines(node)
            if stack:
                _attach(stack[-1][1], node, field)
            continue

        child, child_field = entry
        if not child.is_named:
            node.tokens.append(child.type)
            if child_field == "operator":
                node.operator = child.type
            continue

        converted = _new_node(child, source)
        if converted.is_leaf:
            _attach(node, converted, child_field)
        else:
            stack.append((_children(child), converted, child_field))
    return root


def _mark_blank_lines(node: Node) -> None:
    for prev, child in zip(node.children, node.children[1:]):
        child.blank_before = child.start.row - prev.end.row > 1


def _attach(parent: Node, child: Node, field) -> None:
    if child.type in SPLICED_TYPES:
        parent.tokens.extend(child.tokens)
        parent.children.extend(child.children)
        return

    if child.type in UNWRAPPED_TYPES:
        inner: List[Node] = child.children
        for grandchild in inner:
            if grandchild.type != "comment":
                grandchild.field = field
            parent.children.append(grandchild)
        return

    child.field = field
    parent.children.append(child)
