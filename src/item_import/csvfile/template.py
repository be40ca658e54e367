from __future__ import annotations

from pathlib import Path

from .normalizer import ALL_COLUMNS

"""Import template: the canonical header plus a few example rows."""

TEMPLATE_FILE_NAME = "items_import_template.csv"

EXAMPLE_ROWS = [
    "Ballpoint Pen,,Blue ink ballpoint pen,Office Supplies,EA",
    "A4 Paper,,80gsm white A4 paper (500 sheets),Office Supplies,PKT",
    "Stapler,,Heavy-duty desktop stapler,Office Supplies,EA",
]


def generate_template() -> str:
    return "\n".join([",".join(ALL_COLUMNS), *EXAMPLE_ROWS])


def write_template(path: Path | None = None) -> Path:
    """Write the template CSV; a directory target gets the default file name."""
    target = path if path is not None else Path(TEMPLATE_FILE_NAME)
    if target.is_dir():
        target = target / TEMPLATE_FILE_NAME
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(generate_template(), encoding="utf-8")
    return target
