from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

"""Reference entries (categories, units of measure) used to resolve display text to ids.

Owned by the persistence layer; read-only inside the import pipeline.
"""

__all__ = [
    "Category",
    "UnitOfMeasure",
]


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    code: str | None = None

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> Category:
        code = record.get("code")
        return Category(
            id=str(record["id"]),
            name=str(record["name"]),
            code=str(code) if code is not None else None,
        )


@dataclass(frozen=True)
class UnitOfMeasure:
    id: str
    code: str
    name: str

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> UnitOfMeasure:
        return UnitOfMeasure(
            id=str(record["id"]),
            code=str(record["code"]),
            name=str(record["name"]),
        )
