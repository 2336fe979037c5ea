"""
Import set and package clause accessors.
"""

from typing import List, Optional

from gocodemod.exceptions import InvalidNodeError
from gocodemod.logging_config import logger
from gocodemod.text import quote, unquote
from gocodemod.tree.node import Node


def _spec_path(spec: Node) -> str:
    path = spec.child("path")
    return unquote(path.text) if path is not None else ""


class Imports:
    """
    Import specs of a file, across all of its import declarations.

    ``add`` is idempotent per path and appends to the first declaration,
    turning a single ``import "x"`` into a parenthesized group. ``remove``
    drops every spec with the path and deletes declarations left empty.
    """

    def __init__(self, root: Node):
        if root.type != "source_file":
            raise InvalidNodeError(f"expected a source_file, got {root.type}")
        self.root = root

    def declarations(self) -> List[Node]:
        return [c for c in self.root.children if c.type == "import_declaration"]

    @staticmethod
    def _specs_of(declaration: Node) -> List[Node]:
        specs = []
        for child in declaration.children:
            if child.type == "import_spec":
                specs.append(child)
            elif child.type == "import_spec_list":
                specs.extend(c for c in child.children if c.type == "import_spec")
        return specs

    def specs(self) -> List[Node]:
        specs = []
        for declaration in self.declarations():
            specs.extend(self._specs_of(declaration))
        return specs

    def paths(self) -> List[str]:
        return [_spec_path(spec) for spec in self.specs()]

    def contains(self, path: str) -> bool:
        return path in self.paths()

    def add(self, path: str, name: Optional[str] = None) -> bool:
        """
        Import ``path`` unless it is already imported.

        Args:
            path: Import path without quotes
            name: Optional package name ("_", "." or an alias)

        Returns:
            True if a spec was added
        """
        if self.contains(path):
            return False

        spec = Node("import_spec", [Node.leaf("interpreted_string_literal", quote(path), field="path")])
        if name:
            spec.children.insert(0, Node.leaf("package_identifier", name, field="name"))

        declarations = self.declarations()
        if not declarations:
            declaration = Node("import_declaration", [spec], tokens=["import"])
            index = next((i for i, c in enumerate(self.root.children) if c.type == "package_clause"), -1)
            self.root.insert_child(index + 1, declaration)
            logger.debug(f"Created import declaration for {path}")
            return True

        declaration = declarations[0]
        group = next((c for c in declaration.children if c.type == "import_spec_list"), None)
        if group is None:
            existing = [c for c in declaration.children if c.type == "import_spec"]
            group = Node("import_spec_list", existing + [spec], tokens=["(", ")"])
            declaration.children = [c for c in declaration.children if c.type != "import_spec"]
            declaration.children.append(group)
            declaration.tokens = ["import"]
        else:
            group.children.append(spec)
        logger.debug(f"Added import {path}")
        return True

    def remove(self, path: str) -> int:
        """
        Remove every spec importing ``path``; absent paths are a no-op.

        Returns:
            Number of specs removed
        """
        removed = 0
        for declaration in self.declarations():
            for container in [declaration] + [c for c in declaration.children if c.type == "import_spec_list"]:
                for spec in [c for c in container.children if c.type == "import_spec"]:
                    if _spec_path(spec) == path:
                        container.remove_child(spec)
                        removed += 1
            if not self._specs_of(declaration):
                self.root.remove_child(declaration)
        if removed:
            logger.debug(f"Removed {removed} import(s) of {path}")
        return removed

    def __repr__(self) -> str:
        return f"Imports({self.paths()!r})"


class Package:
    """The file's package clause."""

    def __init__(self, root: Node):
        clause = next((c for c in root.children if c.type == "package_clause"), None)
        if clause is None:
            raise InvalidNodeError("file has no package clause")
        self.clause = clause

    @property
    def identifier(self) -> Node:
        return self.clause.positional()[0]

    @property
    def name(self) -> str:
        return self.identifier.text

    def set_name(self, name: str) -> None:
        self.identifier.text = name

    def __repr__(self) -> str:
        return f"Package({self.name!r})"
