from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..models.config_models import DEFAULT_MAX_FILE_SIZE_BYTES

"""CSV file selection checks and tokenizer.

check_file() runs before any parsing: only ``.csv`` files up to the size
limit are accepted. tokenize() splits the text into a header and data lines.

Tokenizer rules:
- lines split on ``\\n`` with an optional preceding ``\\r``; blank lines are
  dropped before numbering (header = line 1)
- fields split on ``,``; a double quote toggles quoted mode, ``""`` inside
  quotes is one literal quote
- lines whose fields are all blank are skipped but keep their number
- header cells are trimmed and lower-cased
"""

__all__ = [
    "CsvLine",
    "FileSelectionError",
    "ParseError",
    "ParsedCsv",
    "check_file",
    "parse_line",
    "read_csv_text",
    "tokenize",
]

_LINE_SPLIT = re.compile(r"\r?\n")


class FileSelectionError(Exception):
    """Raised when a chosen file is not acceptable (wrong type, too large)."""


class ParseError(Exception):
    """Raised when the file text cannot be split into header + data rows."""


@dataclass(frozen=True)
class CsvLine:
    line_number: int  # 1-based over non-blank lines, header = 1
    fields: list[str]


@dataclass(frozen=True)
class ParsedCsv:
    headers: list[str]  # trimmed, lower-cased
    lines: list[CsvLine]


def check_file(path: Path, max_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES) -> int:
    """Validate a selected file before parsing. Returns its size in bytes.

    Raises:
        FileSelectionError: file missing, not named ``*.csv``, or over the size limit
    """
    if not path.name.endswith(".csv"):
        raise FileSelectionError("Please upload a CSV file")
    if not path.is_file():
        raise FileSelectionError(f"File not found: {path}")
    size = path.stat().st_size
    if size > max_size_bytes:
        limit_mb = max_size_bytes / (1024 * 1024)
        raise FileSelectionError(f"File size must be less than {limit_mb:g}MB")
    return size


def read_csv_text(path: Path) -> str:
    """Read the file as UTF-8 text, dropping a leading byte order mark."""
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"file is not valid UTF-8 text: {e}") from e
    except OSError as e:
        raise FileSelectionError(f"cannot read file {path.name}: {e}") from e


def parse_line(line: str) -> list[str]:
    """Split one CSV line into raw (untrimmed) fields."""
    result: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    result.append("".join(current))
    return result


def tokenize(text: str) -> ParsedCsv:
    """Split raw CSV text into a header row and data lines.

    Raises:
        ParseError: fewer than two non-blank lines (no header or no data)
    """
    lines = [ln for ln in _LINE_SPLIT.split(text) if ln.strip()]
    if len(lines) < 2:
        raise ParseError("CSV must contain a header row and at least one data row")

    headers = [h.strip().lower() for h in parse_line(lines[0])]

    data: list[CsvLine] = []
    for idx, raw in enumerate(lines[1:], start=2):
        fields = parse_line(raw)
        if all(not f.strip() for f in fields):
            continue  # e.g. ",,,," left behind by spreadsheet exports
        data.append(CsvLine(line_number=idx, fields=fields))
    return ParsedCsv(headers=headers, lines=data)
