"""
Local codemod runner: walk a directory and rewrite its Go files.
"""

from .apply import Codemod, Project, apply_locally, apply_to_source
from .config import DEFAULT_IGNORE_PATTERNS, RUNNER_CONFIG, get_runner_config
from .scanner import find_files

__all__ = [
    "Codemod",
    "Project",
    "apply_locally",
    "apply_to_source",
    "find_files",
    "DEFAULT_IGNORE_PATTERNS",
    "RUNNER_CONFIG",
    "get_runner_config",
]
