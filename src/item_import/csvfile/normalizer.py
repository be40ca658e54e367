from __future__ import annotations

from ..models.raw_row import RawRow
from .reader import ParsedCsv

"""Row normalizer: zips tokenized lines against the header into RawRows."""

__all__ = [
    "ALL_COLUMNS",
    "OPTIONAL_COLUMNS",
    "REQUIRED_COLUMNS",
    "SchemaError",
    "normalize_rows",
]

REQUIRED_COLUMNS = ["name"]
OPTIONAL_COLUMNS = ["code", "description", "category", "uom"]
ALL_COLUMNS = [*REQUIRED_COLUMNS, *OPTIONAL_COLUMNS]

SCHEMA_ERROR_MESSAGE = (
    'CSV must contain a "name" column. Download the template for the expected format.'
)


class SchemaError(Exception):
    """Raised when a required column is missing from the header row."""


def normalize_rows(parsed: ParsedCsv) -> list[RawRow]:
    """Build one RawRow per data line.

    Fields past the header length are ignored; headers past the field count
    get an empty string. The required-column check runs once per file.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in parsed.headers]
    if missing:
        raise SchemaError(SCHEMA_ERROR_MESSAGE)

    rows: list[RawRow] = []
    for line in parsed.lines:
        values: dict[str, str] = {}
        for idx, header in enumerate(parsed.headers):
            raw = line.fields[idx] if idx < len(line.fields) else ""
            values[header] = raw.strip()
        rows.append(RawRow(line_number=line.line_number, values=values))
    return rows
