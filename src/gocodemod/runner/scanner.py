"""
File discovery for the runner.

Walks a project the way ``git ls-files --others --cached`` would see it:
DEFAULT_IGNORE_PATTERNS and any extra patterns apply from the root, and
each .gitignore applies to the directory holding it and everything below.
"""

import os
from pathlib import Path, PurePosixPath
from typing import List, Optional, Tuple

import pathspec

from gocodemod.logging_config import logger
from .config import DEFAULT_IGNORE_PATTERNS, validate_ignore_patterns

# (directory relative to the walk root, patterns of its .gitignore)
_Rules = List[Tuple[PurePosixPath, pathspec.PathSpec]]


def _read_gitignore(directory: Path) -> Optional[pathspec.PathSpec]:
    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return None
    try:
        lines = gitignore.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read '{gitignore}': {e}")
        return None
    logger.debug(f"Loaded {len(lines)} patterns from '{gitignore}'")
    return pathspec.GitIgnoreSpec.from_lines(lines)


def _ignored(rules: _Rules, relative: PurePosixPath, is_dir: bool) -> bool:
    for base, spec in rules:
        try:
            below = relative.relative_to(base)
        except ValueError:
            continue
        if spec.match_file(f"{below}/" if is_dir else str(below)):
            return True
    return False


def find_files(
    directory: Path,
    respect_gitignore: bool = True,
    extra_patterns: Optional[List[str]] = None,
) -> List[Path]:
    """
    Every file under ``directory`` that the ignore rules let through.

    Args:
        directory: Root of the walk
        respect_gitignore: Apply .gitignore files found during the walk
        extra_patterns: More gitignore-style patterns, relative to the root

    Returns:
        Paths under ``directory``, sorted

    Raises:
        ConfigError: If ``extra_patterns`` is malformed
    """
    directory = Path(directory)
    patterns = list(DEFAULT_IGNORE_PATTERNS)
    if extra_patterns:
        validate_ignore_patterns(extra_patterns)
        patterns.extend(extra_patterns)
    root_rules: _Rules = [(PurePosixPath("."), pathspec.GitIgnoreSpec.from_lines(patterns))]

    found: List[Path] = []
    rules_by_dir = {directory: root_rules}
    for current, dirs, files in os.walk(directory):
        current_path = Path(current)
        relative_dir = PurePosixPath(current_path.relative_to(directory).as_posix())
        rules = rules_by_dir.pop(current_path)
        if respect_gitignore:
            spec = _read_gitignore(current_path)
            if spec is not None:
                rules = rules + [(relative_dir, spec)]

        # Pruning dirs in place stops os.walk from descending
        kept = []
        for name in sorted(dirs):
            if _ignored(rules, relative_dir / name, is_dir=True):
                logger.debug(f"Ignoring directory '{relative_dir / name}'")
                continue
            kept.append(name)
            rules_by_dir[current_path / name] = rules
        dirs[:] = kept

        for name in files:
            if _ignored(rules, relative_dir / name, is_dir=False):
                continue
            found.append(current_path / name)

    found.sort()
    logger.debug(f"Found {len(found)} files under '{directory}'")
    return found
