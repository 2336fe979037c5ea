from pydantic import BaseModel, Field
from typing import List, Optional

class FileResult(BaseModel):
    """
    Outcome of running the codemods over one file.
    """
    path: str  # Relative to the directory the runner was pointed at
    changed: bool = False
    written: bool = False
    skipped: bool = False  # Not UTF-8 text, left alone
    codemods_applied: List[str] = Field(default_factory=list)
    replacements_applied: int = 0
    diff: str = ""
    backup_path: Optional[str] = None
    error: Optional[str] = None

class ApplyResult(BaseModel):
    """
    Outcome of apply_locally over a directory.
    """
    directory: str
    dry_run: bool = False
    files_scanned: int = 0
    files: List[FileResult] = Field(default_factory=list)
    project_codemods: List[str] = Field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def changed_files(self) -> List[FileResult]:
        return [f for f in self.files if f.changed]

    @property
    def failed_files(self) -> List[FileResult]:
        return [f for f in self.files if f.error]

    @property
    def ok(self) -> bool:
        return not self.failed_files
