from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from ..models.reference import Category, UnitOfMeasure

"""In-memory item store used when no database connection is wanted.

Seeded from the ``reference_data`` config section. Mirrors the database
rules that matter to an import: codes are unique (case-insensitive), a
missing code is generated as ``<prefix>-<n>`` and reference ids must exist.
"""

__all__ = [
    "InMemoryItemStore",
]


class InMemoryItemStore:
    def __init__(
        self,
        categories: Iterable[Category] = (),
        uom_types: Iterable[UnitOfMeasure] = (),
        *,
        existing_codes: Iterable[str] = (),
        code_prefix: str = "ITEM",
        code_padding: int = 3,
    ) -> None:
        self.categories = list(categories)
        self.uom_types = list(uom_types)
        self.items: list[dict[str, Any]] = []
        self.code_prefix = code_prefix
        self.code_padding = code_padding
        self._codes: set[str] = {c.lower() for c in existing_codes}
        self._next_number = 1

    def get_active_categories(self) -> list[Category]:
        return sorted(self.categories, key=lambda c: c.name)

    def get_uom_types(self) -> list[UnitOfMeasure]:
        return sorted(self.uom_types, key=lambda u: u.code)

    def _generate_code(self) -> str:
        while True:
            code = f"{self.code_prefix}-{str(self._next_number).zfill(self.code_padding)}"
            self._next_number += 1
            if code.lower() not in self._codes:
                return code

    def _check(self, item: Mapping[str, Any], code: str) -> str | None:
        if not (item.get("name") or "").strip():
            return 'null value in column "name" violates not-null constraint'
        if code.lower() in self._codes:
            return f'duplicate code "{code}"'
        category_id = item.get("category_id")
        if category_id is not None and category_id not in {c.id for c in self.categories}:
            return f'category "{category_id}" does not exist'
        uom_id = item.get("default_uom_id")
        if uom_id is not None and uom_id not in {u.id for u in self.uom_types}:
            return f'unit of measure "{uom_id}" does not exist'
        return None

    def bulk_create_items(
        self,
        items: Sequence[Mapping[str, Any]],
        source_rows: Sequence[int] | None = None,
        on_progress: Callable[[int], None] | None = None,
    ) -> dict[str, list[dict[str, Any]]]:
        rows = list(source_rows) if source_rows is not None else list(range(1, len(items) + 1))
        created: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []
        for item, row in zip(items, rows, strict=True):
            code = item.get("code") or self._generate_code()
            problem = self._check(item, code)
            if problem is not None:
                errors.append({"row": row, "name": item.get("name") or "", "error": problem})
            else:
                record = {
                    "id": str(uuid.uuid4()),
                    "code": code,
                    "name": item["name"],
                    "description": item.get("description"),
                    "category_id": item.get("category_id"),
                    "default_uom_id": item.get("default_uom_id"),
                }
                self.items.append(record)
                self._codes.add(code.lower())
                created.append({"id": record["id"], "code": code, "name": record["name"], "row": row})
            if on_progress is not None:
                on_progress(1)
        return {"created": created, "errors": errors}
