"""
Configuration for the mutation primitives and handles.
"""

from pathlib import Path
from typing import Optional, Union

from gocodemod.user_config import get_user_config


def get_mutation_config(project_root: Optional[Union[str, Path]] = None):
    """
    Get mutation configuration merged with the user's config files.

    Resolved on every call: ``project_root`` when given, else the project of
    the enclosing project_root_scope, else the current directory.
    """
    root = Path(project_root) if project_root is not None else None
    settings = get_user_config(root).section("mutation")
    return {
        # False: Remove/Replace touch only the captured statement.
        # True: every structurally identical statement in the same list.
        "structural_matching": settings.get("structural_matching", False),
        # Inserting a bare expression wraps it in an expression statement
        "wrap_expressions": settings.get("wrap_expressions", True),
    }
