"""
apply_locally: run codemods over every Go file of a local directory.
"""

import re
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple, Union

from gocodemod.exceptions import ApplyError, ConfigError
from gocodemod.logging_config import logger
from gocodemod.mutation.editor import FileEditor, generate_unified_diff
from gocodemod.parser import validate_syntax
from gocodemod.paths import get_paths
from gocodemod.schemas import ApplyResult, FileResult
from gocodemod.source_file import SourceFile
from gocodemod.user_config import project_root_scope
from .config import get_runner_config
from .scanner import find_files


@dataclass
class Project:
    """The directory a codemod run operates on."""
    project_root: Path

    def path(self, *parts: str) -> Path:
        return self.project_root.joinpath(*parts)


@dataclass
class Codemod:
    """
    A named transformation.

    Attributes:
        description: Human readable summary, reported per file
        transform: Called once per Go file with its parsed SourceFile
        project_transform: Called once per run, before any file is touched
    """
    description: str
    transform: Optional[Callable[[SourceFile], None]] = None
    project_transform: Optional[Callable[[Project], None]] = None


Replacements = Dict[str, str]
_Compiled = List[Tuple[Pattern, str]]


def _compile_replacements(replacements: Optional[Replacements]) -> _Compiled:
    compiled = []
    for pattern, replacement in (replacements or {}).items():
        try:
            compiled.append((re.compile(pattern), replacement))
        except re.error as e:
            raise ConfigError(f"Invalid replacement pattern {pattern!r}: {e}") from e
    return compiled


def apply_to_source(source: str, codemods: Sequence[Codemod], file_path: Optional[str] = None,
                    project_root: Optional[str] = None) -> Tuple[str, List[str]]:
    """
    Run the file transforms of ``codemods`` over one Go source text.

    Each codemod gets a fresh parse of the previous codemod's output. A
    codemod that leaves the tree as it found it leaves the text untouched
    too, so files nothing applies to are never reformatted. Transforms run
    inside project_root_scope, reading the settings of ``project_root``.

    Returns:
        (new source, descriptions of the codemods that ran)

    Raises:
        ParseError: If the input, or a codemod's output, is not valid Go
    """
    applied = []
    with project_root_scope(project_root):
        for codemod in codemods:
            if codemod.transform is None:
                continue
            source_file = SourceFile.parse(source, file_path=file_path, project_root=project_root)
            before = source_file.root.copy()
            codemod.transform(source_file)
            applied.append(codemod.description)
            if source_file.root.structurally_equal(before, layout=True):
                logger.debug(f"{codemod.description}: no change to {file_path or '<source>'}")
                continue
            source = source_file.print()
    return source, applied


def _process_file(
    path: Path,
    directory: Path,
    replacements: _Compiled,
    codemods: Sequence[Codemod],
    extensions: List[str],
    editor: FileEditor,
    dry_run: bool,
) -> FileResult:
    relative = str(path.relative_to(directory))
    result = FileResult(path=relative)

    try:
        original = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError:
        logger.debug(f"Skipping non UTF-8 file '{relative}'")
        result.skipped = True
        return result
    except OSError as e:
        result.error = f"Failed to read: {e}"
        return result

    content = original
    for pattern, replacement in replacements:
        content, count = pattern.subn(replacement, content)
        result.replacements_applied += count

    if codemods and path.suffix in extensions:
        try:
            content, result.codemods_applied = apply_to_source(
                content, codemods, file_path=relative, project_root=str(directory)
            )
        except Exception as e:
            logger.error(f"Codemod failed on '{relative}': {e}")
            result.error = str(e)
            return result

        ok, errors = validate_syntax(content)
        if not ok:
            result.error = f"Transformed output is not valid Go: {'; '.join(errors)}"
            logger.error(f"Refusing to write '{relative}': {result.error}")
            return result

    if content == original:
        return result

    result.changed = True
    result.diff = generate_unified_diff(relative, original, content)
    if dry_run:
        logger.info(f"[dry-run] Would update '{relative}'")
        return result

    written, backup_path = editor.write(str(path), original, content)
    result.written = written
    result.backup_path = backup_path
    if not written:
        result.error = "Failed to write changes"
    return result


def apply_locally(
    codemods: Sequence[Codemod],
    directory: Union[str, Path],
    replacements: Optional[Replacements] = None,
    max_workers: Optional[int] = None,
    dry_run: bool = False,
    strict: bool = True,
    backup: Optional[bool] = None,
) -> ApplyResult:
    """
    Apply codemods to a local directory tree.

    Project transforms run first. Then every file (honouring .gitignore and
    skipping vendor/) gets the regex replacements, and every Go file gets
    the file transforms, each codemod re-parsing the previous one's output.
    Changed files are syntax-checked and written atomically. Files are
    processed concurrently; each file is handled by exactly one worker.

    Args:
        codemods: Codemods to run, in order
        directory: Root of the Go project
        replacements: Regex pattern -> replacement (Python ``re.sub`` syntax)
        max_workers: Worker threads (defaults to runner.max_workers)
        dry_run: Compute results and diffs without writing
        strict: Raise ApplyError when any file failed
        backup: Back up files before overwriting (defaults to config)

    Returns:
        Per-file results

    Raises:
        ApplyError: If ``directory`` is not a directory, or in strict mode
            when any file failed
        ConfigError: If a replacement pattern does not compile
    """
    start_time = time.time()
    root = Path(directory).resolve()
    if not root.is_dir():
        raise ApplyError(f"Not a directory: {root}")

    config = get_runner_config(root)
    workers = max_workers or config["max_workers"]
    compiled = _compile_replacements(replacements)
    result = ApplyResult(directory=str(root), dry_run=dry_run)

    for codemod in codemods:
        if codemod.project_transform is not None:
            logger.info(f"Running project codemod: {codemod.description}")
            codemod.project_transform(Project(root))
            result.project_codemods.append(codemod.description)

    file_codemods = [c for c in codemods if c.transform is not None]
    if not file_codemods and not compiled:
        logger.info("No file codemods or replacements, skipping the file walk")
        result.elapsed_seconds = time.time() - start_time
        return result

    files = find_files(
        root,
        respect_gitignore=config["respect_gitignore"],
        extra_patterns=config["ignore_patterns"],
    )
    result.files_scanned = len(files)
    editor = FileEditor(
        backup_enabled=config["backup_enabled"] if backup is None else backup,
        backup_dir=str(get_paths(root).backups_dir),
    )
    logger.info(f"Applying {len(file_codemods)} codemod(s) to {len(files)} files in '{root}' with {workers} workers")

    file_results: List[FileResult] = []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        futures = {
            executor.submit(
                _process_file, path, root, compiled, file_codemods,
                config["extensions"], editor, dry_run,
            ): path
            for path in files
        }
        for future in as_completed(futures):
            file_results.append(future.result())

    file_results.sort(key=lambda r: r.path)
    result.files = file_results
    result.elapsed_seconds = time.time() - start_time

    changed = len(result.changed_files)
    failed = len(result.failed_files)
    logger.info(f"Codemods finished: {changed} changed, {failed} failed, {len(files)} scanned")

    if strict and failed:
        raise ApplyError(
            f"{failed} file(s) failed: " + ", ".join(f.path for f in result.failed_files),
            failures=result.failed_files,
        )
    return result
