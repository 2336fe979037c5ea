"""Go parsing on top of tree-sitter."""

from .facade import find_syntax_errors, parse_source, validate_syntax
from .language_manager import get_language, get_parser

__all__ = [
    "find_syntax_errors",
    "parse_source",
    "validate_syntax",
    "get_language",
    "get_parser",
]
