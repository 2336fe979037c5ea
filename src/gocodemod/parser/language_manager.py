import threading
from typing import Optional

try:
    from tree_sitter import Language, Parser
    import tree_sitter_go as tsgo
    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False

from gocodemod.exceptions import GrammarNotFoundError
from gocodemod.logging_config import logger

GRAMMAR_PACKAGE = "tree-sitter-go"

# Loaded once; Language objects are immutable and shareable across threads
_language: Optional["Language"] = None
_language_lock = threading.Lock()

# Parser instances carry mutable state, so each worker thread gets its own
_local = threading.local()


def get_language() -> "Language":
    """
    Load the tree-sitter Go language.

    Caches the loaded language object for efficiency.

    Raises:
        GrammarNotFoundError: If tree-sitter or the Go grammar is not installed
    """
    global _language

    if not TREE_SITTER_AVAILABLE:
        logger.error("tree-sitter Go grammar not available")
        raise GrammarNotFoundError("go", f"pip install tree-sitter {GRAMMAR_PACKAGE}")

    if _language is None:
        with _language_lock:
            if _language is None:
                _language = Language(tsgo.language())
                logger.debug("Successfully loaded language 'go'")
    return _language


def get_parser() -> "Parser":
    """Return this thread's Go parser, creating it on first use."""
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = Parser(get_language())
        _local.parser = parser
        logger.debug(f"Created Go parser for thread {threading.current_thread().name}")
    return parser
