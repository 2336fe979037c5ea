"""
Parser facade: Go source text in, validated Node tree out.
"""

from typing import List, Optional, Tuple, Union

from gocodemod.exceptions import ParseError
from gocodemod.logging_config import logger
from gocodemod.tree.node import Node
from .converter import convert
from .language_manager import get_parser

# Top-level items a Go file may contain besides comments
TOP_LEVEL_TYPES = frozenset({
    "package_clause",
    "import_declaration",
    "function_declaration",
    "method_declaration",
    "const_declaration",
    "var_declaration",
    "type_declaration",
})


def _to_bytes(source: Union[str, bytes]) -> bytes:
    if isinstance(source, bytes):
        return source
    return source.encode("utf-8")


def find_syntax_errors(ts_root) -> List[str]:
    """
    Collect ERROR and MISSING nodes from a tree-sitter tree.

    Args:
        ts_root: Root tree-sitter node

    Returns:
        Human readable messages, empty when the tree is clean
    """
    errors = []
    if not ts_root.has_error:
        return errors

    stack = [ts_root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            line = node.start_point[0] + 1
            col = node.start_point[1] + 1
            if node.is_missing:
                errors.append(f"Missing '{node.type}' at line {line}, column {col}")
            else:
                errors.append(f"Syntax error at line {line}, column {col}")
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return errors


def parse_source(source: Union[str, bytes], file_path: Optional[str] = None) -> Node:
    """
    Parse a complete Go file.

    Args:
        source: Go source text
        file_path: Only used in error messages and logs

    Returns:
        The converted ``source_file`` node

    Raises:
        ParseError: On syntax errors, a missing package clause, or
            statements at the top level
    """
    label = file_path or "<source>"
    data = _to_bytes(source)
    tree = get_parser().parse(data)

    errors = find_syntax_errors(tree.root_node)
    if errors:
        logger.debug(f"Rejecting {label}: {errors[0]}")
        raise ParseError(label, "; ".join(errors[:5]))

    root = convert(tree.root_node, data)

    items = root.named()
    if not items or items[0].type != "package_clause":
        raise ParseError(label, "expected 'package' clause before any declaration")

    for item in items[1:]:
        if item.type not in TOP_LEVEL_TYPES:
            row = item.start.row + 1 if item.start else "?"
            raise ParseError(label, f"non-declaration statement outside function body at line {row}")
        if item.type == "package_clause":
            raise ParseError(label, "more than one package clause")

    logger.debug(f"Parsed {label}: {len(items)} top-level items")
    return root


def validate_syntax(source: Union[str, bytes]) -> Tuple[bool, List[str]]:
    """
    Validate syntax by parsing and checking for ERROR nodes.

    Args:
        source: Go source text

    Returns:
        (is_valid, error_messages)
    """
    try:
        parse_source(source)
    except ParseError as e:
        return False, [e.message]
    return True, []
