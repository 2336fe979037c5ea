"""
SourceFile: one parsed Go file with its query and mutation entry points.
"""

from typing import Callable, Dict, List, Optional, Tuple, Union

from gocodemod.exceptions import InvalidNodeError
from gocodemod.fragments import parse_type
from gocodemod.logging_config import logger
from gocodemod.mutation import (
    Assignment,
    Function,
    FunctionCall,
    IfStmt,
    Imports,
    MapLiteral,
    Package,
    SwitchStmt,
    TypeDeclaration,
)
from gocodemod.parser import parse_source
from gocodemod.printer import GoPrinter, source_code
from gocodemod.query import QueryIndex, Scope, group_by_scope, walk_located
from gocodemod.text import normalize_source, unquote
from gocodemod.tree.ancestry import Located
from gocodemod.tree.node import Node


class SourceFile:
    """
    A parsed Go file.

    Queries take a fresh single-pass snapshot of the tree each time they
    are called, so they always see earlier mutations. Access is not
    synchronized: one SourceFile belongs to one thread at a time.
    """

    def __init__(
        self,
        root: Node,
        file_path: Optional[str] = None,
        project_root: Optional[str] = None,
        printer: Optional[GoPrinter] = None,
    ):
        self.root = root
        self.file_path = file_path
        self.project_root = project_root
        self.printer = printer or GoPrinter(project_root=project_root)

    @classmethod
    def parse(
        cls,
        source: Union[str, bytes],
        file_path: Optional[str] = None,
        project_root: Optional[str] = None,
    ) -> "SourceFile":
        """
        Parse Go source text.

        Args:
            source: File content
            file_path: Label for errors and logs; not read from disk
            project_root: Root of the project the file belongs to

        Raises:
            ParseError: If the text is not a valid Go file
        """
        return cls(parse_source(source, file_path), file_path, project_root)

    # ------------------------------------------------------------------
    # Printing
    # ------------------------------------------------------------------

    def print(self) -> str:
        """Render the file in gofmt style. Does not modify the tree."""
        return self.printer.print_file(self.root)

    def to_bytes(self) -> bytes:
        return self.print().encode("utf-8")

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def traverse(self, callback: Callable[[Located], None]) -> None:
        """Call ``callback`` for every node, pre-order, with its ancestry chain."""
        for located in walk_located(Located(self.root)):
            callback(located)

    def _index(self) -> QueryIndex:
        return QueryIndex(self.root)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def package(self) -> Package:
        return Package(self.root)

    def imports(self) -> Imports:
        return Imports(self.root)

    def import_paths(self) -> List[str]:
        return [unquote(located.node.child("path").text) for located in self._index().import_specs]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def function_calls(self, name: Optional[str] = None) -> Dict[Scope, List[FunctionCall]]:
        """
        Calls grouped by enclosing function.

        Args:
            name: Only calls whose callee renders exactly as ``name``,
                e.g. "errors.Wrapf"
        """
        matches = []
        for scope, located in self._index().calls:
            call = FunctionCall(located)
            if name is None or call.function_name == name:
                matches.append((scope, call))
        return group_by_scope(matches)

    def functions(self) -> List[Function]:
        """Function and method declarations in source order."""
        return [Function(located) for located in self._index().functions]

    def assignments(self) -> Dict[Scope, List[Assignment]]:
        return group_by_scope(
            (scope, Assignment(located)) for scope, located in self._index().assignments
        )

    def find_assignments(self, target: str) -> Dict[Scope, List[Assignment]]:
        """
        Assignments to ``target``.

        An assignment matches when its whole text equals ``target``
        (whitespace ignored) or one of its left-hand sides does: an
        identifier by name, a selector by text, an index expression by its
        own text or by the text of the indexed operand.
        """
        wanted = normalize_source(target)
        matches = []
        for scope, located in self._index().assignments:
            assignment = Assignment(located)
            if self._assigns_to(assignment, target, wanted):
                matches.append((scope, assignment))
        return group_by_scope(matches)

    @staticmethod
    def _assigns_to(assignment: Assignment, target: str, wanted: str) -> bool:
        if normalize_source(assignment.source()) == wanted:
            return True
        for expr in assignment.targets:
            if expr.type == "identifier" and expr.text == target:
                return True
            if expr.type == "selector_expression" and normalize_source(source_code(expr)) == wanted:
                return True
            if expr.type == "index_expression":
                operand = expr.child("operand")
                if normalize_source(source_code(expr)) == wanted:
                    return True
                if operand is not None and normalize_source(source_code(operand)) == wanted:
                    return True
        return False

    def type_declarations(self) -> List[TypeDeclaration]:
        """Top-level type specs (grouped ones included) in source order."""
        return [TypeDeclaration(located) for located in self._index().type_specs]

    def if_statements(self) -> Dict[Scope, List[IfStmt]]:
        return group_by_scope(
            (scope, IfStmt(located)) for scope, located in self._index().if_statements
        )

    def switch_statements(self) -> Dict[Scope, List[SwitchStmt]]:
        return group_by_scope(
            (scope, SwitchStmt(located)) for scope, located in self._index().switch_statements
        )

    def map_literals(self, map_type: str) -> Dict[Scope, List[MapLiteral]]:
        """
        Composite literals of the given map type.

        Args:
            map_type: e.g. "map[string]string"; key and value types are
                compared by their rendered text

        Raises:
            InvalidNodeError: If ``map_type`` is not a map type
        """
        wanted = parse_type(map_type)
        if wanted.type != "map_type":
            raise InvalidNodeError(f"invalid map type: {map_type}")
        key = normalize_source(source_code(wanted.child("key")))
        value = normalize_source(source_code(wanted.child("value")))

        matches = []
        for scope, located in self._index().composite_literals:
            literal_type = located.node.child("type")
            if literal_type is None or literal_type.type != "map_type":
                continue
            if (normalize_source(source_code(literal_type.child("key"))) == key
                    and normalize_source(source_code(literal_type.child("value"))) == value):
                matches.append((scope, MapLiteral(located)))
        logger.debug(f"Found {len(matches)} {map_type} literal(s) in {self.file_path or '<source>'}")
        return group_by_scope(matches)

    def find_map_literal(self, map_type: str) -> Optional[Tuple[Scope, MapLiteral]]:
        """First literal of ``map_type`` in source order, or None."""
        for scope, literals in self.map_literals(map_type).items():
            return scope, literals[0]
        return None

    def __repr__(self) -> str:
        return f"SourceFile({self.file_path or '<source>'!r})"


def parse(
    source: Union[str, bytes],
    file_path: Optional[str] = None,
    project_root: Optional[str] = None,
) -> SourceFile:
    """Parse Go source into a SourceFile; see SourceFile.parse."""
    return SourceFile.parse(source, file_path, project_root)
