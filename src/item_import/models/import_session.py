from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .commit_result import CommitResult
from .raw_row import RawRow
from .validated_row import ValidatedRow

"""ImportSession state holder and ImportStage enum.

One import attempt, kept in memory only. Each stage transition is a single
method so the session is mutated in exactly one place per transition:

    upload -> preview -> importing -> done
    importing -> preview   (commit failed, rows kept for a retry)
    any -> upload          (reset / start over)
"""

__all__ = [
    "ImportSession",
    "ImportStage",
    "SessionStateError",
]


class SessionStateError(Exception):
    """Raised on a stage transition that the state machine does not allow."""


class ImportStage(Enum):
    UPLOAD = "upload"
    PREVIEW = "preview"
    IMPORTING = "importing"
    DONE = "done"


@dataclass
class ImportSession:
    stage: ImportStage = ImportStage.UPLOAD
    file_name: str | None = None
    rows: list[RawRow] = field(default_factory=list)
    valid_rows: list[ValidatedRow] = field(default_factory=list)
    invalid_rows: list[ValidatedRow] = field(default_factory=list)
    result: CommitResult | None = None
    error: str | None = None  # last banner error (file, parse, schema or commit)

    def ensure_stage(self, *stages: ImportStage) -> None:
        if self.stage not in stages:
            allowed = "/".join(s.value for s in stages)
            raise SessionStateError(f"session is in stage '{self.stage.value}', expected {allowed}")

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def record_error(self, message: str | None) -> None:
        """Record a file-level error without changing stage (bad file, parse or schema error)."""
        self.error = message

    def load(
        self,
        file_name: str,
        rows: list[RawRow],
        valid_rows: list[ValidatedRow],
        invalid_rows: list[ValidatedRow],
    ) -> None:
        """upload -> preview."""
        self.ensure_stage(ImportStage.UPLOAD)
        self.file_name = file_name
        self.rows = list(rows)
        self.valid_rows = list(valid_rows)
        self.invalid_rows = list(invalid_rows)
        self.result = None
        self.error = None
        self.stage = ImportStage.PREVIEW

    def begin_commit(self) -> list[ValidatedRow]:
        """preview -> importing. Returns the rows to submit."""
        self.ensure_stage(ImportStage.PREVIEW)
        if not self.valid_rows:
            raise SessionStateError("no valid rows to import")
        self.error = None
        self.stage = ImportStage.IMPORTING
        return list(self.valid_rows)

    def complete(self, result: CommitResult) -> None:
        """importing -> done."""
        self.ensure_stage(ImportStage.IMPORTING)
        self.result = result
        self.stage = ImportStage.DONE

    def fail_commit(self, message: str) -> None:
        """importing -> preview, keeping parsed and validated rows."""
        self.ensure_stage(ImportStage.IMPORTING)
        self.error = message
        self.stage = ImportStage.PREVIEW

    def reset(self) -> None:
        """any -> upload."""
        self.file_name = None
        self.rows = []
        self.valid_rows = []
        self.invalid_rows = []
        self.result = None
        self.error = None
        self.stage = ImportStage.UPLOAD
