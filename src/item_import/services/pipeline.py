from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from ..csvfile.normalizer import SchemaError, normalize_rows
from ..csvfile.reader import FileSelectionError, ParseError, check_file, read_csv_text, tokenize
from ..logging.error_log import FILE_LEVEL_ROW, ErrorLogBuffer
from ..models.commit_result import CommitResult
from ..models.config_models import ImportConfig
from ..models.import_session import ImportSession, ImportStage
from ..models.import_summary import ImportSummary
from .commit import CommitError, ItemStore, commit_rows
from .matcher import ReferenceMatcher
from .validator import validate_rows

"""Import pipeline orchestration.

Drives one ImportSession through its stages:

1. load_references(): fetch categories and units once per pipeline
2. select_file(): file check -> tokenize -> normalize -> match + validate (upload -> preview)
3. commit(): bulk create the valid rows (preview -> importing -> done, or back to preview)

File, parse and schema errors are recorded on the session and in the error
log, then re-raised. Row-level problems never raise; they are listed on the
session and in the error log.
"""

__all__ = [
    "ImportPipeline",
]

logger = logging.getLogger(__name__)


class ImportPipeline:
    def __init__(
        self,
        store: ItemStore,
        config: ImportConfig | None = None,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        self.store = store
        self.config = config if config is not None else ImportConfig()
        self.error_log = error_log if error_log is not None else ErrorLogBuffer()
        self.matcher: ReferenceMatcher | None = None
        self.started_at: datetime | None = None
        self.finished_at: datetime | None = None

    def load_references(self) -> ReferenceMatcher:
        """Load categories and units from the store.

        A failed load is logged and leaves the lists empty: any non-blank
        category or uom text will then be reported as unknown per row.
        """
        try:
            categories = self.store.get_active_categories()
            uom_types = self.store.get_uom_types()
        except Exception as e:
            logger.error("Error loading reference data: %s", e)
            categories, uom_types = [], []
        logger.debug("reference data: categories=%d uom_types=%d", len(categories), len(uom_types))
        self.matcher = ReferenceMatcher(categories, uom_types)
        return self.matcher

    def _record_file_error(self, session: ImportSession, file_name: str, error_type: str, message: str) -> None:
        session.record_error(message)
        self.error_log.add(file=file_name, row=FILE_LEVEL_ROW, error_type=error_type, message=message)
        logger.error("%s: %s", file_name, message)

    def select_file(self, session: ImportSession, path: Path) -> ImportSession:
        """Parse and validate ``path`` into ``session`` (upload -> preview).

        Raises:
            FileSelectionError: wrong extension, missing or oversized file
            ParseError: fewer than two non-blank lines, undecodable text
            SchemaError: required ``name`` column missing
            SessionStateError: session is not in the upload stage
        """
        session.ensure_stage(ImportStage.UPLOAD)
        self.started_at = datetime.now(UTC)
        self.finished_at = None
        session.record_error(None)
        file_name = path.name

        try:
            size = check_file(path, self.config.max_file_size_bytes)
        except FileSelectionError as e:
            self._record_file_error(session, file_name, "FILE_SELECTION_ERROR", str(e))
            raise
        logger.info("Reading %s (%d bytes)", file_name, size)

        try:
            parsed = tokenize(read_csv_text(path))
            rows = normalize_rows(parsed)
        except FileSelectionError as e:
            self._record_file_error(session, file_name, "FILE_SELECTION_ERROR", str(e))
            raise
        except ParseError as e:
            self._record_file_error(session, file_name, "PARSE_ERROR", f"Failed to parse CSV file: {e}")
            raise
        except SchemaError as e:
            self._record_file_error(session, file_name, "SCHEMA_ERROR", str(e))
            raise

        matcher = self.matcher if self.matcher is not None else self.load_references()
        outcome = validate_rows(rows, matcher)
        for row in outcome.invalid:
            self.error_log.add(
                file=file_name,
                row=row.line_number,
                error_type="ROW_VALIDATION_ERROR",
                message="; ".join(row.errors),
            )

        session.load(file_name, rows, outcome.valid, outcome.invalid)
        logger.info(
            "%s: rows=%d valid=%d invalid=%d",
            file_name,
            session.total_rows,
            len(outcome.valid),
            len(outcome.invalid),
        )
        return session

    def commit(
        self,
        session: ImportSession,
        on_progress: Callable[[int], None] | None = None,
    ) -> CommitResult:
        """Bulk create the session's valid rows (preview -> importing -> done).

        On CommitError the session goes back to preview with its rows intact
        and the error is re-raised; calling commit() again re-submits the
        same valid set.

        Raises:
            CommitError: the whole request failed
            SessionStateError: not in preview, or nothing valid to import
        """
        rows = session.begin_commit()
        file_name = session.file_name or ""
        logger.info("Creating %d items from %s", len(rows), file_name)
        try:
            result = commit_rows(self.store, rows, on_progress=on_progress)
        except CommitError as e:
            message = str(e) or "Import failed"
            session.fail_commit(message)
            self.error_log.add(file=file_name, row=FILE_LEVEL_ROW, error_type="COMMIT_ERROR", message=message)
            logger.error("Import error: %s", message)
            raise

        for failure in result.failed:
            self.error_log.add(
                file=file_name,
                row=failure.row,
                error_type="ROW_COMMIT_ERROR",
                message=failure.error,
            )
        session.complete(result)
        self.finished_at = datetime.now(UTC)
        return result

    def summarize(self, session: ImportSession) -> ImportSummary:
        end = self.finished_at or datetime.now(UTC)
        start = self.started_at or end
        return ImportSummary.from_session(session, start, end)

    def flush_errors(self) -> Path | None:
        """Write buffered error records; a failed write is logged, not raised."""
        try:
            return self.error_log.flush()
        except OSError as e:
            logger.warning("could not write error log: %s", e)
            return None

