"""
gocodemod User Configuration

Settings are layered, later layers winning key by key:
- Built-in DEFAULT_CONFIG
- Global: ~/.gocodemod/config.json (every project on the machine)
- Local: <project>/.gocodemod/config.json

Config structure:
{
  "mutation": {
    "structural_matching": false,   // Remove/Replace every structurally equal statement
    "wrap_expressions": true        // Inserting an expression wraps it in a statement
  },
  "printer": {
    "sort_imports": true
  },
  "runner": {
    "max_workers": 4,
    "backup_enabled": false,
    "extensions": [".go"],
    "respect_gitignore": true,
    "ignore_patterns": []
  }
}
"""

import copy
import json
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from gocodemod.logging_config import logger
from gocodemod.paths import CodemodPaths


DEFAULT_CONFIG = {
    "mutation": {
        "structural_matching": False,
        "wrap_expressions": True,
    },
    "printer": {
        "sort_imports": True,
    },
    "runner": {
        "max_workers": 4,
        "backup_enabled": False,
        "extensions": [".go"],
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested sections merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _read_layer(path: Path) -> Dict[str, Any]:
    """One config file as a dict; missing or unreadable files count as empty."""
    if not path.is_file():
        return {}
    try:
        layer = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring config file {path}: {e}")
        return {}
    if not isinstance(layer, dict):
        logger.warning(f"Ignoring config file {path}: top level is not an object")
        return {}
    logger.debug(f"Loaded config layer {path}")
    return layer


class UserConfig:
    """
    The merged settings of one project.

    Values are read once, at construction; ``set_local`` writes the project
    file and re-reads every layer.
    """

    def __init__(self, project_root: Optional[Path] = None):
        paths = CodemodPaths(project_root)
        self.project_root = paths.project_root
        self.global_config_path = paths.global_config
        self.local_config_path = paths.local_config
        self._config = self._load()

    def _load(self) -> Dict[str, Any]:
        config = DEFAULT_CONFIG
        for path in (self.global_config_path, self.local_config_path):
            config = merge_config(config, _read_layer(path))
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dot-separated key such as "runner.max_workers".

        Returns:
            The value, or ``default`` when any part of the key is missing
        """
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def section(self, name: str) -> Dict[str, Any]:
        """A copy of one top-level section (empty if missing)."""
        value = self._config.get(name)
        return copy.deepcopy(value) if isinstance(value, dict) else {}

    def set_local(self, key: str, value: Any) -> bool:
        """
        Store a dot-separated key in the project's config file.

        Args:
            key: e.g. "mutation.structural_matching"
            value: Any JSON-serialisable value

        Returns:
            True if the file was written
        """
        path = self.local_config_path
        if path.exists():
            try:
                stored = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Not overwriting unreadable config {path}: {e}")
                return False
        else:
            stored = {}

        *sections, leaf = key.split(".")
        target = stored
        for section in sections:
            target = target.setdefault(section, {})
        target[leaf] = value

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(stored, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save config to {path}: {e}")
            return False

        self._config = self._load()
        logger.info(f"Saved local config: {key}={value!r}")
        return True


_config: Optional[UserConfig] = None

# Project whose codemods run in the current thread; see project_root_scope
_active_project_root: ContextVar[Optional[Path]] = ContextVar("gocodemod_project_root", default=None)


@contextmanager
def project_root_scope(project_root: Optional[Union[str, Path]]) -> Iterator[None]:
    """
    Read settings from ``project_root`` while the block runs.

    Inside the block, config lookups that name no root (mutation defaults,
    printers created without a config) use that project's
    .gocodemod/config.json instead of the current directory's. The scope is
    per thread, so concurrent workers can serve different projects.
    ``None`` keeps the enclosing scope's project.
    """
    root = Path(project_root) if project_root is not None else _active_project_root.get()
    token = _active_project_root.set(root)
    try:
        yield
    finally:
        _active_project_root.reset(token)


def active_project_root() -> Optional[Path]:
    return _active_project_root.get()


def get_user_config(project_root: Optional[Path] = None) -> UserConfig:
    """
    The configuration of ``project_root``, else of the enclosing
    project_root_scope, else the cached one of the current directory.
    """
    global _config
    if project_root is None:
        project_root = active_project_root()
    if project_root is not None:
        return UserConfig(project_root)
    if _config is None:
        _config = UserConfig()
    return _config


def reset_user_config() -> None:
    """Drop the cached configuration (for testing)."""
    global _config
    _config = None
