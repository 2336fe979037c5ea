"""
FileEditor: puts codemod output back on disk.

A file is only rewritten if it still holds the text the codemods started
from. The new text replaces it atomically, keeps the file's permission
bits and its CRLF/LF convention, and can be copied aside first.
"""

import difflib
import hashlib
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from gocodemod.exceptions import StaleFileError
from gocodemod.logging_config import logger
from gocodemod.paths import get_paths


class FileEditor:
    """
    Rewrites files for the runner. One instance is shared by all workers;
    it holds no per-file state.
    """

    def __init__(self, backup_enabled: bool = False, backup_dir: Optional[str] = None):
        """
        Args:
            backup_enabled: Copy each file aside before overwriting it
            backup_dir: Where the copies go (defaults to .gocodemod/backups)
        """
        self.backup_enabled = backup_enabled
        self.backup_dir = Path(backup_dir) if backup_dir else get_paths().backups_dir
        if self.backup_enabled:
            self.backup_dir.mkdir(parents=True, exist_ok=True)

    def write(self, file_path: str, original_content: str, modified_content: str) -> Tuple[bool, Optional[str]]:
        """
        Replace the content of ``file_path`` with ``modified_content``.

        Args:
            file_path: File to rewrite
            original_content: Text the codemods were run on; the file must still hold it
            modified_content: Codemod output, LF line endings

        Returns:
            (written, backup_path)
        """
        try:
            self._ensure_unchanged(file_path, original_content)
        except StaleFileError as e:
            logger.error(str(e))
            return False, None

        backup_path = None
        if self.backup_enabled:
            backup_path = self.create_backup(file_path)
            if backup_path is None:
                logger.error(f"Not writing {file_path}: no backup could be made")
                return False, None

        content = self._normalize_line_endings(modified_content, self._detect_line_ending(original_content))
        if not self._atomic_write(file_path, content):
            return False, backup_path
        logger.info(f"Wrote {file_path}")
        return True, backup_path

    def create_backup(self, file_path: str) -> Optional[str]:
        """
        Copy ``file_path`` into the backup directory.

        Backup names carry a digest of the full path, so files sharing a
        name in different packages never overwrite each other's copy.

        Returns:
            Path of the copy, or None if it could not be made
        """
        source = Path(file_path)
        digest = hashlib.sha1(str(source.resolve()).encode("utf-8")).hexdigest()[:10]
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        target = self.backup_dir / f"{source.name}.{digest}.{stamp}.backup"
        try:
            shutil.copy2(source, target)
        except OSError as e:
            logger.error(f"Failed to back up {file_path}: {e}")
            return None
        logger.debug(f"Backed up {file_path} to {target}")
        return str(target)

    def _atomic_write(self, file_path: str, content: str) -> bool:
        """Write to a sibling temp file, then rename it over ``file_path``."""
        target = Path(file_path)
        try:
            fd, temp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        except OSError as e:
            logger.error(f"Cannot create a temp file next to {file_path}: {e}")
            return False

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            # mkstemp creates the file 0600
            if target.exists():
                shutil.copymode(target, temp_name)
            os.replace(temp_name, target)
        except OSError as e:
            logger.error(f"Failed to write {file_path}: {e}")
            Path(temp_name).unlink(missing_ok=True)
            return False
        return True

    @staticmethod
    def _detect_line_ending(content: str) -> str:
        return "\r\n" if "\r\n" in content else "\n"

    @staticmethod
    def _normalize_line_endings(content: str, line_ending: str) -> str:
        lines = content.replace("\r\n", "\n")
        return lines if line_ending == "\n" else lines.replace("\n", line_ending)

    @staticmethod
    def _ensure_unchanged(file_path: str, expected: str) -> None:
        """
        Raises:
            StaleFileError: If the file can't be read or no longer holds ``expected``
        """
        try:
            current = Path(file_path).read_bytes()
        except OSError as e:
            raise StaleFileError(file_path, f"cannot re-read it: {e}") from e
        if current != expected.encode("utf-8"):
            raise StaleFileError(file_path, "it changed on disk while the codemods ran")


def generate_unified_diff(file_path: str, original_content: str, modified_content: str,
                          max_diff_lines: int = 400) -> str:
    """
    Unified diff of one file's codemod run, ``a/``/``b/`` prefixed like git.

    Diffs longer than ``max_diff_lines`` are cut short with a marker line.
    Equal contents give an empty string.
    """
    lines = list(difflib.unified_diff(
        original_content.splitlines(keepends=True),
        modified_content.splitlines(keepends=True),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
    ))
    if len(lines) > max_diff_lines:
        lines = lines[:max_diff_lines] + [f"... ({len(lines) - max_diff_lines} more diff lines)\n"]
    return "".join(lines)
