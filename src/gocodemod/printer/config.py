"""
Configuration for the Go printer.
"""

from pathlib import Path
from typing import Optional, Union

from gocodemod.user_config import get_user_config

PRINTER_CONFIG = {
    "indent": "\t",         # gofmt indents with tabs
    "tab_padding": 1,       # Spaces between aligned columns
    "sort_imports": True,   # Sort specs inside each blank-line separated group
    "max_blank_lines": 1,   # Consecutive blank lines kept from the source
}


def get_printer_config(project_root: Optional[Union[str, Path]] = None):
    """
    Printer defaults overridden by the "printer" section of the user's config
    files, for ``project_root`` or the project of the enclosing scope.
    """
    root = Path(project_root) if project_root is not None else None
    return {**PRINTER_CONFIG, **get_user_config(root).section("printer")}


# Go binary operator precedence levels
BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3, "!=": 3, "<": 3, "<=": 3, ">": 3, ">=": 3,
    "+": 4, "-": 4, "|": 4, "^": 4,
    "*": 5, "/": 5, "%": 5, "<<": 5, ">>": 5, "&": 5, "&^": 5,
}

# Top-level keyword for each declaration node; a change of keyword forces a blank line
DECLARATION_KEYWORDS = {
    "package_clause": "package",
    "import_declaration": "import",
    "const_declaration": "const",
    "var_declaration": "var",
    "type_declaration": "type",
    "function_declaration": "func",
    "method_declaration": "func",
}
