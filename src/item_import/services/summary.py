from __future__ import annotations

from collections.abc import Sequence

from ..models.commit_result import CommitResult
from ..models.import_summary import ImportSummary
from ..models.reference import Category, UnitOfMeasure
from ..models.validated_row import ValidatedRow

"""Text rendering for the CLI: preview, results, reference lists and the SUMMARY line."""

REFERENCE_PREVIEW_LIMIT = 10


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(summary: ImportSummary) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY file={name} rows={total} valid={valid} invalid={invalid}
    created={created} failed={failed} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> s = ImportSummary("items.csv", 3, 2, 1, 2, 0, start, end, 2.0)
        >>> render_summary_line(s)
        'SUMMARY file=items.csv rows=3 valid=2 invalid=1 created=2 failed=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY file={summary.file_name} "
        f"rows={summary.total_rows} "
        f"valid={summary.valid_rows} "
        f"invalid={summary.invalid_rows} "
        f"created={summary.created} "
        f"failed={summary.failed} "
        f"elapsed_sec={_format_seconds(summary.elapsed_seconds)}"
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def render_invalid_rows(rows: Sequence[ValidatedRow]) -> list[str]:
    if not rows:
        return []
    lines = [f"{_plural(len(rows), 'row')} with errors (will be skipped)"]
    for row in rows:
        lines.append(f"  Row {row.line_number}: {row.name or '(empty)'}: {', '.join(row.errors)}")
    return lines


def render_preview(valid: Sequence[ValidatedRow], invalid: Sequence[ValidatedRow]) -> list[str]:
    total = len(valid) + len(invalid)
    lines = [f"Total: {total}  Valid: {len(valid)}  Errors: {len(invalid)}"]
    lines.extend(render_invalid_rows(invalid))
    if valid:
        lines.append(f"Preview: {_plural(len(valid), 'item')} ready to import")
        for row in valid:
            lines.append(
                f"  Row {row.line_number}: code={row.code or 'Auto'} name={row.name} "
                f"category={row.category or '-'} uom={row.uom or '-'}"
            )
    return lines


def render_results(result: CommitResult) -> list[str]:
    headline = f"{_plural(result.created_count, 'item')} created successfully"
    if result.failed:
        headline += f", {result.failed_count} failed"
    lines = [headline]
    if result.created:
        lines.append("Created Items")
        for item in result.created:
            lines.append("  " + " ".join(p for p in (item.code, item.name) if p))
    if result.failed:
        lines.append("Failed Items")
        for failure in result.failed:
            lines.append(f"  Row {failure.row}: {failure.name or '(empty)'} - {failure.error}")
    return lines


def render_references(categories: Sequence[Category], uom_types: Sequence[UnitOfMeasure]) -> list[str]:
    lines = [f"Available Categories ({len(categories)})"]
    for c in categories[:REFERENCE_PREVIEW_LIMIT]:
        lines.append(f"  {c.name}" + (f" [{c.code}]" if c.code else ""))
    if len(categories) > REFERENCE_PREVIEW_LIMIT:
        lines.append(f"  +{len(categories) - REFERENCE_PREVIEW_LIMIT} more")
    lines.append(f"Available UOM Types ({len(uom_types)})")
    for u in uom_types[:REFERENCE_PREVIEW_LIMIT]:
        lines.append(f"  {u.code} ({u.name})")
    if len(uom_types) > REFERENCE_PREVIEW_LIMIT:
        lines.append(f"  +{len(uom_types) - REFERENCE_PREVIEW_LIMIT} more")
    return lines
