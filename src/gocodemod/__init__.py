"""
gocodemod - Go source-to-source transformation toolkit

Parse a Go file, query and mutate its syntax tree, print it back in gofmt
style, and run such codemods over a local project.
"""

__version__ = "0.1.0"

# Core exports
from gocodemod.source_file import SourceFile, parse
from gocodemod.fragments import (
    parse_declarations,
    parse_expression,
    parse_fragment,
    parse_statements,
    parse_type,
)
from gocodemod.printer import source_code
from gocodemod.query import Scope
from gocodemod.text import normalize_source, quote, unquote
from gocodemod.tree import Located, Node, clear_positions
from gocodemod.user_config import project_root_scope
from gocodemod.exceptions import (
    ApplyError,
    CodemodError,
    FieldNotFoundError,
    InvalidNodeError,
    ParseError,
)

# Local runner
from gocodemod.runner import Codemod, Project, apply_locally

__all__ = [
    "__version__",
    "SourceFile",
    "parse",
    "parse_fragment",
    "parse_statements",
    "parse_declarations",
    "parse_expression",
    "parse_type",
    "source_code",
    "Scope",
    "quote",
    "unquote",
    "normalize_source",
    "Node",
    "Located",
    "clear_positions",
    "project_root_scope",
    "CodemodError",
    "ParseError",
    "FieldNotFoundError",
    "InvalidNodeError",
    "ApplyError",
    "Codemod",
    "Project",
    "apply_locally",
]
