from pathlib import Path
from typing import List, Optional

from gocodemod.exceptions import ConfigError
from gocodemod.user_config import get_user_config

# Never walked into, in addition to the project's .gitignore
DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    ".gocodemod/",
    "vendor/",
    "node_modules/",
]


def get_runner_config(project_root: Optional[Path] = None):
    """
    Runner settings merged with the user's config files.

    Args:
        project_root: Read that project's .gocodemod/config.json instead of
            the current directory's
    """
    settings = get_user_config(project_root).section("runner")
    return {
        "max_workers": settings.get("max_workers", 4),
        "backup_enabled": settings.get("backup_enabled", False),
        "extensions": settings.get("extensions", [".go"]),
        "respect_gitignore": settings.get("respect_gitignore", True),
        "ignore_patterns": settings.get("ignore_patterns", []),
    }


RUNNER_CONFIG = get_runner_config()


def validate_ignore_patterns(patterns: List[str]) -> None:
    """
    Check the extra ignore patterns given in runner.ignore_patterns.

    Raises:
        ConfigError: Unless ``patterns`` is a list of non-blank strings
    """
    if not isinstance(patterns, list):
        raise ConfigError(f"runner.ignore_patterns must be a list, got {type(patterns).__name__}")
    bad = [p for p in patterns if not isinstance(p, str) or not p.strip()]
    if bad:
        raise ConfigError(f"runner.ignore_patterns holds blank or non-string entries: {bad!r}")
