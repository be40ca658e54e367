from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models.raw_row import RawRow
from ..models.validated_row import ValidatedRow
from .matcher import ReferenceMatcher

"""Row validator: RawRow + matcher -> ValidatedRow, partitioned into valid / invalid.

Pure transformation; performs no I/O.
"""

__all__ = [
    "ValidationOutcome",
    "validate_row",
    "validate_rows",
]


@dataclass(frozen=True)
class ValidationOutcome:
    valid: list[ValidatedRow] = field(default_factory=list)
    invalid: list[ValidatedRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.invalid)


def validate_row(raw: RawRow, matcher: ReferenceMatcher) -> ValidatedRow:
    errors: list[str] = []

    name = raw.get("name").strip()
    if not name:
        errors.append("Name is required")

    category = raw.get("category")
    category_id = matcher.match_category(category)
    if category.strip() and category_id is None:
        errors.append(f'Unknown category: "{category}"')

    uom = raw.get("uom")
    default_uom_id = matcher.match_uom(uom)
    if uom.strip() and default_uom_id is None:
        errors.append(f'Unknown UOM: "{uom}"')

    return ValidatedRow(
        line_number=raw.line_number,
        name=name,
        code=raw.get("code").strip(),
        description=raw.get("description").strip(),
        category=category,
        uom=uom,
        category_id=category_id,
        default_uom_id=default_uom_id,
        errors=tuple(errors),
    )


def validate_rows(rows: Iterable[RawRow], matcher: ReferenceMatcher) -> ValidationOutcome:
    valid: list[ValidatedRow] = []
    invalid: list[ValidatedRow] = []
    for raw in rows:
        checked = validate_row(raw, matcher)
        if checked.is_valid:
            valid.append(checked)
        else:
            invalid.append(checked)
    return ValidationOutcome(valid=valid, invalid=invalid)
