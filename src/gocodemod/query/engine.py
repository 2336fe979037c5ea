"""
QueryIndex: one depth-first pass that classifies every node of interest.

Each match is recorded with the Scope (enclosing function or method
declaration) it was found under and its full ancestry chain, in the order
the traversal meets it.
"""

from typing import Dict, Iterable, Iterator, List, Tuple, TypeVar

from gocodemod.logging_config import logger
from gocodemod.tree.ancestry import Located
from gocodemod.tree.kinds import (
    ASSIGNMENT_TYPES,
    FUNCTION_TYPES,
    STATEMENT_CONTAINERS,
    SWITCH_TYPES,
    TYPE_SPEC_TYPES,
)
from gocodemod.tree.node import Node
from .scope import Scope

T = TypeVar("T")


def walk_located(start: Located) -> Iterator[Located]:
    """Pre-order, source-ordered walk that extends ``start``'s ancestry chain."""
    stack = [start]
    while stack:
        located = stack.pop()
        yield located
        for child in reversed(located.node.children):
            stack.append(located.child(child))


def group_by_scope(matches: Iterable[Tuple[Scope, T]]) -> Dict[Scope, List[T]]:
    """Group (scope, match) pairs; scopes and matches keep encounter order."""
    grouped: Dict[Scope, List[T]] = {}
    for scope, match in matches:
        grouped.setdefault(scope, []).append(match)
    return grouped


class QueryIndex:
    """
    Every queryable construct of a file, collected in a single traversal.

    The index is a snapshot: build a new one after mutating the tree.

    Attributes:
        calls: (scope, located call_expression)
        functions: located function and method declarations
        assignments: (scope, located assignment) for assignments sitting
            directly in a statement list
        type_specs: located top-level type_spec / type_alias nodes
        if_statements: (scope, located if_statement)
        switch_statements: (scope, located expression or type switch)
        composite_literals: (scope, located composite_literal)
        import_specs: located import_spec nodes
    """

    def __init__(self, root: Node):
        self.root = root
        self.calls: List[Tuple[Scope, Located]] = []
        self.functions: List[Located] = []
        self.assignments: List[Tuple[Scope, Located]] = []
        self.type_specs: List[Located] = []
        self.if_statements: List[Tuple[Scope, Located]] = []
        self.switch_statements: List[Tuple[Scope, Located]] = []
        self.composite_literals: List[Tuple[Scope, Located]] = []
        self.import_specs: List[Located] = []
        self._build()

    def _build(self) -> None:
        top_level = Scope()
        stack: List[Tuple[Located, Scope]] = [(Located(self.root), top_level)]
        visited = 0

        while stack:
            located, scope = stack.pop()
            node = located.node
            kind = node.type
            visited += 1

            if kind in FUNCTION_TYPES:
                self.functions.append(located)
                scope = Scope(located)
            elif kind == "call_expression":
                self.calls.append((scope, located))
            elif kind == "if_statement":
                self.if_statements.append((scope, located))
            elif kind in SWITCH_TYPES:
                self.switch_statements.append((scope, located))
            elif kind == "composite_literal":
                self.composite_literals.append((scope, located))
            elif kind == "import_spec":
                self.import_specs.append(located)
            elif kind in TYPE_SPEC_TYPES and self._is_top_level_type(located):
                self.type_specs.append(located)

            if kind in STATEMENT_CONTAINERS:
                for child in node.children:
                    if child.type in ASSIGNMENT_TYPES and child.field is None:
                        self.assignments.append((scope, located.child(child)))

            for child in reversed(node.children):
                stack.append((located.child(child), scope))

        logger.debug(
            f"Indexed {visited} nodes: {len(self.calls)} calls, "
            f"{len(self.functions)} functions, {len(self.assignments)} assignments"
        )

    @staticmethod
    def _is_top_level_type(located: Located) -> bool:
        declaration = located.parent
        return (
            declaration is not None
            and declaration.node.type == "type_declaration"
            and declaration.parent is not None
            and declaration.parent.node.type == "source_file"
        )
