from __future__ import annotations

from pathlib import Path

import pytest

from item_import.db.memory_store import InMemoryItemStore
from item_import.logging.error_log import ErrorLogBuffer
from item_import.models.import_session import ImportSession, ImportStage
from item_import.services.commit import CommitError
from item_import.services.pipeline import ImportPipeline

ITEMS_CSV = (
    "name,code,description,category,uom\r\n"
    "Ballpoint Pen,,Blue ink,Office Supplies,EA\r\n"
    ",X1,,,\r\n"
    '"Widget, ""Pro""",W-1,"Large, heavy",cleaning,packet\r\n'
    "\r\n"
    "Stapler,,,OFF,each\r\n"
)


class FlakyStore(InMemoryItemStore):
    """Fails the first bulk request as a whole, then behaves."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.attempts = 0

    def bulk_create_items(self, items, source_rows=None, on_progress=None):
        self.attempts += 1
        if self.attempts == 1:
            raise ConnectionError("server unavailable")
        return super().bulk_create_items(items, source_rows=source_rows, on_progress=on_progress)


def test_full_import(categories, uom_types, write_csv, tmp_path: Path):
    store = InMemoryItemStore(categories, uom_types)
    pipeline = ImportPipeline(store, error_log=ErrorLogBuffer(tmp_path / "logs"))
    session = pipeline.select_file(ImportSession(), write_csv(ITEMS_CSV))

    assert session.total_rows == 4
    assert [r.line_number for r in session.invalid_rows] == [3]
    assert session.invalid_rows[0].errors == ("Name is required",)
    widget = session.valid_rows[1]
    assert widget.name == 'Widget, "Pro"'
    assert widget.description == "Large, heavy"
    assert (widget.category_id, widget.default_uom_id) == ("cat-clean", "uom-pkt")
    assert session.valid_rows[2].line_number == 5  # blank line not counted

    result = pipeline.commit(session)
    assert session.stage is ImportStage.DONE
    assert [c.code for c in result.created] == ["ITEM-001", "W-1", "ITEM-002"]
    assert [c.row for c in result.created] == [2, 4, 5]
    assert result.failed == []
    assert store.items[0]["category_id"] == "cat-office"
    assert store.items[0]["description"] == "Blue ink"


def test_commit_failure_keeps_preview_and_retry_succeeds(categories, uom_types, write_csv, tmp_path: Path):
    store = FlakyStore(categories, uom_types)
    pipeline = ImportPipeline(store, error_log=ErrorLogBuffer(tmp_path / "logs"))
    session = pipeline.select_file(ImportSession(), write_csv(ITEMS_CSV))

    with pytest.raises(CommitError, match="server unavailable"):
        pipeline.commit(session)
    assert session.stage is ImportStage.PREVIEW
    assert session.error == "server unavailable"
    assert len(session.valid_rows) == 3 and len(session.invalid_rows) == 1
    assert store.items == []

    result = pipeline.commit(session)
    assert session.stage is ImportStage.DONE
    assert result.created_count == 3
    assert [r.error_type for r in pipeline.error_log.records] == ["ROW_VALIDATION_ERROR", "COMMIT_ERROR"]


def test_reset_allows_a_new_file(categories, uom_types, write_csv, tmp_path: Path):
    pipeline = ImportPipeline(InMemoryItemStore(categories, uom_types), error_log=ErrorLogBuffer(tmp_path))
    session = pipeline.select_file(ImportSession(), write_csv("name\nPen\n"))
    pipeline.commit(session)
    session.reset()
    pipeline.select_file(session, write_csv("name\nPaper\nTape\n", name="more.csv"))
    assert session.file_name == "more.csv"
    assert session.total_rows == 2
