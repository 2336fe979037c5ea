"""
Build new nodes from snippets of Go source.

Snippets are wrapped in a synthetic package (and function, for
statements), parsed, and the wanted sub-tree is returned with its
positions cleared so it prints compactly wherever it is inserted.
"""

import re
from typing import List

from gocodemod.exceptions import InvalidNodeError, ParseError
from gocodemod.parser import parse_source
from gocodemod.tree.node import Node
from gocodemod.tree.positions import clear_positions

FRAGMENT_PACKAGE = "package fragment\n\n"
FRAGMENT_LABEL = "<fragment>"

# "func Name(" or "func (r T) Name(" starts a declaration; "func(" is a literal
_FUNC_DECLARATION = re.compile(r"^func\s*(\([^)]*\)\s*)?[A-Za-z_]\w*\s*[\[(]")
_PACKAGE_CLAUSE = re.compile(r"^package\s+\w+")


def _detach(node: Node) -> Node:
    clear_positions(node)
    node.field = None
    return node


def _parse_wrapped(source: str) -> Node:
    try:
        return parse_source(source, file_path=FRAGMENT_LABEL)
    except ParseError as e:
        raise ParseError(FRAGMENT_LABEL, f"{e.message}\n--- fragment source ---\n{source}") from e


def _is_declaration(text: str) -> bool:
    return bool(_FUNC_DECLARATION.match(text)) or text.startswith("import")


def parse_declarations(text: str) -> List[Node]:
    """Parse one or more top-level declarations."""
    root = _parse_wrapped(FRAGMENT_PACKAGE + text)
    return [_detach(c) for c in root.children if c.type != "package_clause"]


def parse_statements(text: str) -> List[Node]:
    """Parse the statements of a function body."""
    root = _parse_wrapped(f"{FRAGMENT_PACKAGE}func _fragment() {{\n{text}\n}}\n")
    function = next(c for c in root.children if c.type == "function_declaration")
    body = function.child("body")
    return [_detach(c) for c in body.children if c.type != "empty_statement"]


def parse_expression(text: str) -> Node:
    """Parse a single expression, e.g. ``fmt.Errorf("x: %w", err)``."""
    root = _parse_wrapped(f"{FRAGMENT_PACKAGE}var _ = {text}\n")
    spec = _single_var_spec(root)
    value = spec.child("value")
    values = value.named() if value is not None and value.type == "expression_list" else [value]
    if len(values) != 1 or values[0] is None:
        raise InvalidNodeError(f"expected a single expression: {text!r}")
    return _detach(values[0])


def parse_type(text: str) -> Node:
    """Parse a type expression, e.g. ``map[string]string``."""
    root = _parse_wrapped(f"{FRAGMENT_PACKAGE}var _ {text}\n")
    type_node = _single_var_spec(root).child("type")
    if type_node is None:
        raise InvalidNodeError(f"expected a type: {text!r}")
    return _detach(type_node)


def _single_var_spec(root: Node) -> Node:
    declaration = next(c for c in root.children if c.type == "var_declaration")
    return next(c for c in declaration.children if c.type == "var_spec")


def parse_fragment(text: str) -> Node:
    """
    Parse a snippet of Go source into a detached node.

    Args:
        text: A whole file, a top-level func or import declaration, or
            one or more statements

    Returns:
        The file root, the declaration, the single statement, or a block
        holding several statements

    Raises:
        ParseError: If the snippet is not valid Go in any of those shapes
        InvalidNodeError: If a declaration snippet holds more than one
            declaration
    """
    stripped = text.strip()

    if _PACKAGE_CLAUSE.match(stripped):
        return _detach(_parse_wrapped(text))

    # type, var and const declarations are statements too and parse as such
    if _is_declaration(stripped):
        declarations = parse_declarations(text)
        if len(declarations) != 1:
            raise InvalidNodeError(f"expected one declaration, got {len(declarations)}; use parse_declarations")
        return declarations[0]

    statements = parse_statements(text)
    if len(statements) == 1:
        return statements[0]
    return Node("block", statements)
