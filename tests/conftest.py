# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from item_import.logging.init import reset_logging
from item_import.models.reference import Category, UnitOfMeasure


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """max_file_size_bytes: 5242880
organization_id: org-1
item_code_function: generate_item_code
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
reference_data:
  categories:
    - {id: cat-office, name: Office Supplies, code: "OFF"}
    - {id: cat-clean, name: Cleaning}
  uom_types:
    - {id: uom-ea, code: EA, name: Each}
    - {id: uom-pkt, code: PKT, name: Packet}
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def categories() -> list[Category]:
    return [
        Category(id="cat-office", name="Office Supplies", code="OFF"),
        Category(id="cat-clean", name="Cleaning"),
    ]


@pytest.fixture()
def uom_types() -> list[UnitOfMeasure]:
    return [
        UnitOfMeasure(id="uom-ea", code="EA", name="Each"),
        UnitOfMeasure(id="uom-pkt", code="PKT", name="Packet"),
    ]


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(text: str, name: str = "items.csv") -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
