from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""ValidatedRow model for the CSV item import tool.

Fixed-shape record produced by the row validator from a RawRow. Carries the
trimmed field values, the resolved reference ids and the accumulated
validation errors.
"""

__all__ = [
    "ValidatedRow",
]


@dataclass(frozen=True)
class ValidatedRow:
    """Row after reference matching and validation.

    A row is valid iff ``errors`` is empty, which holds exactly when ``name``
    is non-empty and every non-blank category/uom text resolved to an id.
    """
    line_number: int  # source line (header = 1)
    name: str
    code: str = ""
    description: str = ""
    category: str = ""  # display text as written in the file
    uom: str = ""  # display text as written in the file
    category_id: str | None = None
    default_uom_id: str | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_payload(self) -> dict[str, Any]:
        """Creation payload for the bulk-create call (empty strings -> None)."""
        return {
            "name": self.name,
            "code": self.code or None,
            "description": self.description or None,
            "category_id": self.category_id,
            "default_uom_id": self.default_uom_id,
        }
