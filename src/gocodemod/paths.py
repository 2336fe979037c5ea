"""
Where gocodemod keeps its files.

Everything lives in a ``.gocodemod/`` directory at the root of the Go
project being rewritten (the runner's target, or the current directory),
plus one machine-wide config file:

<project>/.gocodemod/
├── config.json          # Project settings, see user_config
├── backups/             # Copies of files the runner overwrote
└── logs/                # gocodemod.log, when file logging is on

~/.gocodemod/config.json # Settings shared by every project
"""

from pathlib import Path
from typing import Optional


class CodemodPaths:
    """
    Paths of one project's ``.gocodemod`` directory.

    Nothing is created on construction; call ``ensure_dirs`` before writing.
    Without an explicit root the current directory is used, resolved at
    access time.
    """

    DATA_DIR = ".gocodemod"
    CONFIG_NAME = "config.json"
    GLOBAL_DIR = Path.home() / DATA_DIR

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = Path(project_root) if project_root is not None else None

    @property
    def project_root(self) -> Path:
        return self._project_root if self._project_root is not None else Path.cwd()

    @property
    def data_dir(self) -> Path:
        return self.project_root / self.DATA_DIR

    @property
    def local_config(self) -> Path:
        return self.data_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        return self.GLOBAL_DIR / self.CONFIG_NAME

    @property
    def backups_dir(self) -> Path:
        return self.data_dir / "backups"

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    def ensure_dirs(self) -> None:
        for directory in (self.backups_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)


_default_paths: Optional[CodemodPaths] = None


def get_paths(project_root: Optional[Path] = None) -> CodemodPaths:
    """
    Paths for ``project_root``, or the shared instance for the current
    directory when no root is given.
    """
    global _default_paths
    if project_root is not None:
        return CodemodPaths(project_root)
    if _default_paths is None:
        _default_paths = CodemodPaths()
    return _default_paths


def reset_paths() -> None:
    """Forget the shared instance (for testing)."""
    global _default_paths
    _default_paths = None
