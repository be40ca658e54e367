from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .import_session import ImportSession

"""Import summary model: the counts behind the SUMMARY output line."""

__all__ = [
    "ImportSummary",
]


@dataclass(frozen=True)
class ImportSummary:
    file_name: str
    total_rows: int  # data rows after skipping blank lines
    valid_rows: int
    invalid_rows: int  # excluded by client-side validation
    created: int
    failed: int  # rejected by the server
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def has_problems(self) -> bool:
        return self.invalid_rows > 0 or self.failed > 0

    @staticmethod
    def from_session(session: ImportSession, start_time: datetime, end_time: datetime) -> ImportSummary:
        result = session.result
        return ImportSummary(
            file_name=session.file_name or "",
            total_rows=session.total_rows,
            valid_rows=len(session.valid_rows),
            invalid_rows=len(session.invalid_rows),
            created=result.created_count if result is not None else 0,
            failed=result.failed_count if result is not None else 0,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
        )
