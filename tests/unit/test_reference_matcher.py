from __future__ import annotations

from item_import.models.reference import Category, UnitOfMeasure
from item_import.services.matcher import ReferenceMatcher


def test_category_matches_name_or_code_case_insensitive(categories, uom_types):
    m = ReferenceMatcher(categories, uom_types)
    assert m.match_category("office supplies") == "cat-office"
    assert m.match_category("  OFFICE SUPPLIES ") == "cat-office"
    assert m.match_category("off") == "cat-office"
    assert m.match_category("cleaning") == "cat-clean"


def test_uom_matches_code_or_name(categories, uom_types):
    m = ReferenceMatcher(categories, uom_types)
    assert m.match_uom("ea") == "uom-ea"
    assert m.match_uom("Each") == "uom-ea"
    assert m.match_uom("packet") == "uom-pkt"


def test_no_partial_matching(categories, uom_types):
    m = ReferenceMatcher(categories, uom_types)
    assert m.match_category("Office") is None
    assert m.match_uom("E") is None


def test_blank_text_resolves_to_none(categories, uom_types):
    m = ReferenceMatcher(categories, uom_types)
    assert m.match_category("") is None
    assert m.match_category("   ") is None
    assert m.match_uom(None) is None


def test_first_entry_wins_on_duplicates():
    m = ReferenceMatcher(
        [Category(id="a", name="Tools"), Category(id="b", name="tools"), Category(id="c", name="Other", code="TOOLS")],
        [UnitOfMeasure(id="u1", code="BOX", name="Box"), UnitOfMeasure(id="u2", code="box", name="Carton")],
    )
    assert m.match_category("TOOLS") == "a"
    assert m.match_uom("box") == "u1"


def test_empty_reference_lists_match_nothing():
    m = ReferenceMatcher()
    assert m.match_category("Office Supplies") is None
    assert m.match_uom("EA") is None
