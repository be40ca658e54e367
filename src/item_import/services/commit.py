from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from ..models.commit_result import CommitResult, CreatedItem, RowFailure
from ..models.reference import Category, UnitOfMeasure
from ..models.validated_row import ValidatedRow

"""Commit stage: submit validated rows as one bulk-create request and reconcile the answer.

The store answers ``{"created": [...], "errors": [{"row", "name", "error"}]}``.
Per-row rejections become RowFailure entries; a failure of the whole
request raises CommitError so the caller can keep the session for a retry.
No de-duplication key is sent: re-submitting after a partial success can
create duplicates unless the database rejects them (e.g. unique codes).
"""

__all__ = [
    "CommitError",
    "ItemStore",
    "MISSING_RESULT_ERROR",
    "build_payload",
    "commit_rows",
    "reconcile",
]

logger = logging.getLogger(__name__)

MISSING_RESULT_ERROR = "No result returned for this row"


class CommitError(Exception):
    """The bulk-create request as a whole was rejected or failed in transport."""


class ItemStore(Protocol):
    """Persistence collaborator used by the pipeline."""

    def get_active_categories(self) -> list[Category]: ...

    def get_uom_types(self) -> list[UnitOfMeasure]: ...

    def bulk_create_items(
        self,
        items: Sequence[Mapping[str, Any]],
        source_rows: Sequence[int] | None = None,
        on_progress: Callable[[int], None] | None = None,
    ) -> Mapping[str, Any]: ...


def build_payload(rows: Sequence[ValidatedRow]) -> list[dict[str, Any]]:
    return [row.to_payload() for row in rows]


def reconcile(response: Any, rows: Sequence[ValidatedRow]) -> CommitResult:
    """Turn a bulk-create response into a CommitResult.

    When every created record reports its source row, submitted rows missing
    from both lists are added as failures so none are dropped silently.
    """
    if not isinstance(response, Mapping):
        raise CommitError(f"unexpected bulk create response: {type(response).__name__}")
    created_raw = response.get("created") or []
    errors_raw = response.get("errors") or []
    if not isinstance(created_raw, list) or not isinstance(errors_raw, list):
        raise CommitError("unexpected bulk create response: 'created' and 'errors' must be lists")
    try:
        created = [CreatedItem.from_record(r) for r in created_raw]
        failed = [RowFailure.from_record(e) for e in errors_raw]
    except (KeyError, TypeError, ValueError) as e:
        raise CommitError(f"malformed bulk create response: {e}") from e

    if all(c.row is not None for c in created):
        accounted = {c.row for c in created} | {f.row for f in failed}
        for row in rows:
            if row.line_number not in accounted:
                logger.warning("row %d (%s) missing from bulk create response", row.line_number, row.name)
                failed.append(RowFailure(row=row.line_number, name=row.name, error=MISSING_RESULT_ERROR))
    elif len(created) + len(failed) < len(rows):
        logger.warning(
            "bulk create accounted for %d of %d rows",
            len(created) + len(failed),
            len(rows),
        )
    return CommitResult(created=created, failed=failed)


def commit_rows(
    store: ItemStore,
    rows: Sequence[ValidatedRow],
    on_progress: Callable[[int], None] | None = None,
) -> CommitResult:
    """Submit ``rows`` in one bulk call. Callers guard against an empty set.

    Raises:
        CommitError: the request failed as a whole (nothing can be assumed created)
    """
    payload = build_payload(rows)
    source_rows = [row.line_number for row in rows]
    logger.debug("bulk create: submitting %d items", len(payload))
    try:
        response = store.bulk_create_items(payload, source_rows=source_rows, on_progress=on_progress)
    except CommitError:
        raise
    except Exception as e:
        raise CommitError(str(e) or "Import failed") from e
    return reconcile(response, rows)
