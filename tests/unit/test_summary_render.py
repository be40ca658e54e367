from __future__ import annotations

from datetime import UTC, datetime, timedelta

from item_import.models.commit_result import CommitResult, CreatedItem, RowFailure
from item_import.models.import_summary import ImportSummary
from item_import.models.reference import Category, UnitOfMeasure
from item_import.models.validated_row import ValidatedRow
from item_import.services.summary import (
    _format_seconds,
    render_invalid_rows,
    render_preview,
    render_references,
    render_results,
    render_summary_line,
)


def test_summary_line_format():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    s = ImportSummary("items.csv", 4, 3, 1, 2, 1, start, start + timedelta(seconds=1.25), 1.25)
    assert render_summary_line(s) == (
        "SUMMARY file=items.csv rows=4 valid=3 invalid=1 created=2 failed=1 elapsed_sec=1.25"
    )
    assert s.has_problems


def test_format_seconds():
    assert _format_seconds(0) == "0"
    assert _format_seconds(3.0) == "3"
    assert _format_seconds(0.5) == "0.5"
    assert _format_seconds(0.0012) == "0.0012"


def test_invalid_rows_listing():
    rows = [
        ValidatedRow(line_number=3, name="", errors=("Name is required",)),
        ValidatedRow(line_number=4, name="Mop", category="Garden", errors=('Unknown category: "Garden"', 'Unknown UOM: "X"')),
    ]
    assert render_invalid_rows(rows) == [
        "2 rows with errors (will be skipped)",
        "  Row 3: (empty): Name is required",
        '  Row 4: Mop: Unknown category: "Garden", Unknown UOM: "X"',
    ]
    assert render_invalid_rows([]) == []


def test_preview_counts_and_rows():
    valid = [ValidatedRow(line_number=2, name="Ballpoint Pen", category="Office Supplies", uom="EA")]
    lines = render_preview(valid, [])
    assert lines[0] == "Total: 1  Valid: 1  Errors: 0"
    assert lines[1] == "Preview: 1 item ready to import"
    assert "code=Auto name=Ballpoint Pen category=Office Supplies uom=EA" in lines[2]


def test_results_listing():
    result = CommitResult(
        created=[CreatedItem(id="1", code="ITEM-001", name="A"), CreatedItem(id="2", code=None, name="B")],
        failed=[RowFailure(row=5, name="C", error="duplicate code")],
    )
    assert render_results(result) == [
        "2 items created successfully, 1 failed",
        "Created Items",
        "  ITEM-001 A",
        "  B",
        "Failed Items",
        "  Row 5: C - duplicate code",
    ]


def test_references_are_truncated():
    cats = [Category(id=str(i), name=f"Cat {i:02d}") for i in range(12)]
    uoms = [UnitOfMeasure(id="u", code="EA", name="Each")]
    lines = render_references(cats, uoms)
    assert lines[0] == "Available Categories (12)"
    assert lines[11] == "  +2 more"
    assert lines[12] == "Available UOM Types (1)"
    assert lines[13] == "  EA (Each)"


def test_has_problems_only_for_invalid_or_failed_rows():
    start = datetime(2024, 1, 1, tzinfo=UTC)
    s = ImportSummary("items.csv", 2, 2, 0, 2, 0, start, start, 0.0)
    assert not s.has_problems
    assert ImportSummary("items.csv", 2, 2, 0, 1, 1, start, start, 0.0).has_problems
