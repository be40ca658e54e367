from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""RawRow model for the CSV item import tool.

A RawRow is a data line zipped against the header row: the column set is
whatever the user supplied, so values stay a string-keyed mapping until the
validator turns them into a fixed-shape ValidatedRow.
"""

__all__ = [
    "RawRow",
]


@dataclass(frozen=True)
class RawRow:
    """Single CSV data line after header zipping and trimming.

    The line_number is 1-based with the header as line 1, so the first data
    row is line 2.
    """
    line_number: int  # 1-based, header = 1
    values: Mapping[str, str] = field(default_factory=dict)  # lower-cased header -> trimmed value

    def __post_init__(self) -> None:
        # read-only view so the row cannot be changed after normalization
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, column: str) -> str:
        return self.values.get(column, "")
