from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import psycopg2
from psycopg2.extras import execute_values

from ..models.reference import Category, UnitOfMeasure

"""PostgreSQL item store: reference data reads and bulk item creation.

bulk_create_items() first inserts every row with one
``psycopg2.extras.execute_values`` call inside a savepoint. If the database
rejects that batch (unique code, bad foreign key, ...), it rolls back to the
savepoint and inserts row by row, each in its own savepoint, so one bad row
only fails itself. Rows without a code get one from ``item_code_function``
(``generate_item_code()`` by default) through COALESCE.

The caller owns the transaction (see db.connection.connect).
"""

__all__ = [
    "PostgresItemStore",
    "StoreError",
]

logger = logging.getLogger(__name__)

ITEMS_TABLE = "items"
CATEGORIES_TABLE = "categories"
UOM_TABLE = "uom_types"
ITEM_COLUMNS = ["name", "code", "description", "category_id", "default_uom_id"]
RETURNING = "RETURNING id, code, name"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class StoreError(Exception):
    pass


def _db_message(e: Exception) -> str:
    """Primary message of a database error, without the DETAIL/CONTEXT lines."""
    diag = getattr(e, "diag", None)
    primary = getattr(diag, "message_primary", None) if diag is not None else None
    if primary:
        return str(primary)
    text = str(e).strip()
    return text.splitlines()[0] if text else type(e).__name__


class PostgresItemStore:
    def __init__(
        self,
        cursor: Any,
        *,
        organization_id: str | None = None,
        created_by: str | None = None,
        item_code_function: str | None = "generate_item_code",
        page_size: int = 1000,
    ) -> None:
        if item_code_function is not None and not _IDENTIFIER.match(item_code_function):
            raise StoreError(f"invalid item code function name: {item_code_function!r}")
        self.cursor = cursor
        self.organization_id = organization_id
        self.created_by = created_by
        self.item_code_function = item_code_function
        self.page_size = page_size

    # reference data -----------------------------------------------------

    def _scope(self) -> tuple[str, tuple[Any, ...]]:
        if self.organization_id is None:
            return "", ()
        return " AND org_id = %s", (self.organization_id,)

    def get_active_categories(self) -> list[Category]:
        where, params = self._scope()
        self.cursor.execute(
            f"SELECT id, name, code FROM {CATEGORIES_TABLE} WHERE is_active = true{where} ORDER BY name",
            params,
        )
        return [Category(id=str(r[0]), name=r[1], code=r[2]) for r in self.cursor.fetchall()]

    def get_uom_types(self) -> list[UnitOfMeasure]:
        where, params = self._scope()
        self.cursor.execute(
            f"SELECT id, code, name FROM {UOM_TABLE} WHERE is_active = true{where} ORDER BY code",
            params,
        )
        return [UnitOfMeasure(id=str(r[0]), code=r[1], name=r[2]) for r in self.cursor.fetchall()]

    # bulk create --------------------------------------------------------

    def _columns(self) -> list[str]:
        columns = list(ITEM_COLUMNS)
        if self.organization_id is not None:
            columns.append("org_id")
        if self.created_by is not None:
            columns.append("created_by")
        return columns

    def _template(self, columns: list[str]) -> str:
        placeholders = []
        for col in columns:
            if col == "code" and self.item_code_function:
                placeholders.append(f"COALESCE(%s, {self.item_code_function}())")
            else:
                placeholders.append("%s")
        return f"({','.join(placeholders)})"

    def _values(self, item: Mapping[str, Any]) -> list[Any]:
        values = [item.get(col) for col in ITEM_COLUMNS]
        if self.organization_id is not None:
            values.append(self.organization_id)
        if self.created_by is not None:
            values.append(self.created_by)
        return values

    def bulk_create_items(
        self,
        items: Sequence[Mapping[str, Any]],
        source_rows: Sequence[int] | None = None,
        on_progress: Callable[[int], None] | None = None,
    ) -> dict[str, list[dict[str, Any]]]:
        """Insert ``items``; returns ``{"created": [...], "errors": [...]}``.

        ``source_rows`` gives the CSV line of each item so failures can be
        traced back to the file; without it the 1-based position is used.
        Errors other than database errors (psycopg2.Error) propagate.
        """
        if not items:
            return {"created": [], "errors": []}
        rows = list(source_rows) if source_rows is not None else list(range(1, len(items) + 1))
        if len(rows) != len(items):
            raise StoreError(f"source_rows has {len(rows)} entries for {len(items)} items")

        columns = self._columns()
        cols_sql = ",".join(f'"{c}"' for c in columns)
        template = self._template(columns)
        values = [self._values(item) for item in items]

        cur = self.cursor
        cur.execute("SAVEPOINT item_import_bulk")
        try:
            returned = execute_values(
                cur,
                f"INSERT INTO {ITEMS_TABLE} ({cols_sql}) VALUES %s {RETURNING}",
                values,
                template=template,
                page_size=self.page_size,
                fetch=True,
            )
        except psycopg2.Error as e:
            cur.execute("ROLLBACK TO SAVEPOINT item_import_bulk")
            logger.info("batch insert rejected (%s); retrying row by row", _db_message(e))
            return self._insert_each(cols_sql, template, items, values, rows, on_progress)
        cur.execute("RELEASE SAVEPOINT item_import_bulk")

        created = [
            {"id": str(rec[0]), "code": rec[1], "name": rec[2], "row": row}
            for rec, row in zip(returned, rows, strict=False)
        ]
        if on_progress is not None:
            on_progress(len(items))
        return {"created": created, "errors": []}

    def _insert_each(
        self,
        cols_sql: str,
        template: str,
        items: Sequence[Mapping[str, Any]],
        values: list[list[Any]],
        rows: list[int],
        on_progress: Callable[[int], None] | None,
    ) -> dict[str, list[dict[str, Any]]]:
        cur = self.cursor
        sql = f"INSERT INTO {ITEMS_TABLE} ({cols_sql}) VALUES {template} {RETURNING}"
        created: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []
        for item, params, row in zip(items, values, rows, strict=True):
            cur.execute("SAVEPOINT item_import_row")
            try:
                cur.execute(sql, params)
                rec = cur.fetchone()
            except psycopg2.Error as e:
                cur.execute("ROLLBACK TO SAVEPOINT item_import_row")
                errors.append({"row": row, "name": item.get("name") or "", "error": _db_message(e)})
                logger.debug("row %d rejected: %s", row, _db_message(e))
            else:
                cur.execute("RELEASE SAVEPOINT item_import_row")
                created.append({"id": str(rec[0]), "code": rec[1], "name": rec[2], "row": row})
            if on_progress is not None:
                on_progress(1)
        return {"created": created, "errors": errors}
