from __future__ import annotations

import pytest

from item_import.models.raw_row import RawRow
from item_import.services.matcher import ReferenceMatcher
from item_import.services.validator import validate_row, validate_rows


@pytest.fixture()
def matcher(categories, uom_types) -> ReferenceMatcher:
    return ReferenceMatcher(categories, uom_types)


def _row(line: int, **values: str) -> RawRow:
    return RawRow(line_number=line, values=values)


def test_valid_row_resolves_ids(matcher):
    row = validate_row(
        _row(2, name="Ballpoint Pen", code="", description="Blue ink", category="Office Supplies", uom="EA"),
        matcher,
    )
    assert row.is_valid
    assert row.line_number == 2
    assert row.category_id == "cat-office"
    assert row.default_uom_id == "uom-ea"
    assert row.to_payload() == {
        "name": "Ballpoint Pen",
        "code": None,
        "description": "Blue ink",
        "category_id": "cat-office",
        "default_uom_id": "uom-ea",
    }


def test_optional_columns_may_be_blank_or_absent(matcher):
    assert validate_row(_row(2, name="Stapler"), matcher).is_valid
    assert validate_row(_row(3, name="Stapler", category="", uom=""), matcher).is_valid


def test_errors_are_accumulated_in_order(matcher):
    row = validate_row(_row(4, name="", category="Toys", uom="Crate"), matcher)
    assert not row.is_valid
    assert row.errors == ("Name is required", 'Unknown category: "Toys"', 'Unknown UOM: "Crate"')


def test_whitespace_only_name_is_missing(matcher):
    row = validate_row(_row(2, name="   "), matcher)
    assert row.errors == ("Name is required",)


def test_partition_keeps_file_order_and_covers_every_row(matcher):
    rows = [
        _row(2, name="Pen", uom="EA"),
        _row(3, name=""),
        _row(4, name="Paper", category="office supplies"),
        _row(5, name="Mop", category="Garden"),
        _row(6, name="Tape"),
    ]
    outcome = validate_rows(rows, matcher)
    assert [r.line_number for r in outcome.valid] == [2, 4, 6]
    assert [r.line_number for r in outcome.invalid] == [3, 5]
    assert outcome.total == len(rows)
    assert all(r.is_valid for r in outcome.valid)
    assert all(r.errors for r in outcome.invalid)


def test_empty_input_gives_empty_partitions(matcher):
    outcome = validate_rows([], matcher)
    assert outcome.valid == [] and outcome.invalid == []
