from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

"""Commit result models for the CSV item import tool.

The bulk-create call answers with ``{"created": [...], "errors": [...]}``.
CommitResult keeps both lists in server order so every submitted row ends up
either created or failed.
"""

__all__ = [
    "CommitResult",
    "CreatedItem",
    "RowFailure",
]


@dataclass(frozen=True)
class CreatedItem:
    """Summary of an item record created by the bulk call."""
    id: str | None
    code: str | None
    name: str
    row: int | None = None  # source line, when the store reports it

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> CreatedItem:
        if not isinstance(record, Mapping):
            raise TypeError(f"created entry must be a mapping, got {type(record).__name__}")
        item_id = record.get("id")
        code = record.get("code")
        row = record.get("row")
        return CreatedItem(
            id=str(item_id) if item_id is not None else None,
            code=str(code) if code is not None else None,
            name=str(record.get("name") or ""),
            row=int(row) if row is not None else None,
        )


@dataclass(frozen=True)
class RowFailure:
    """Row accepted by client validation but rejected by the server."""
    row: int  # source line
    name: str
    error: str

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> RowFailure:
        if not isinstance(record, Mapping):
            raise TypeError(f"error entry must be a mapping, got {type(record).__name__}")
        return RowFailure(
            row=int(record["row"]),
            name=str(record.get("name") or ""),
            error=str(record.get("error") or "Unknown error"),
        )


@dataclass(frozen=True)
class CommitResult:
    created: list[CreatedItem] = field(default_factory=list)
    failed: list[RowFailure] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
