from __future__ import annotations

import pytest

from item_import.db.connection import resolve_dsn
from item_import.models.config_models import DatabaseConfig, ImportConfig

PG_VARS = ["DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in PG_VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults_without_config():
    assert resolve_dsn(ImportConfig()) == "host=localhost port=5432 user=postgres dbname=postgres"


def test_config_values_used_as_fallback():
    cfg = ImportConfig(database=DatabaseConfig(host="db", port=6543, user="app", password="pw", database="proc"))
    assert resolve_dsn(cfg) == "host=db port=6543 user=app dbname=proc password=pw"


def test_environment_wins_over_config(monkeypatch):
    monkeypatch.setenv("PGHOST", "envhost")
    monkeypatch.setenv("PGUSER", "envuser")
    cfg = ImportConfig(database=DatabaseConfig(host="db", user="app"))
    assert resolve_dsn(cfg) == "host=envhost port=5432 user=envuser dbname=postgres"


def test_whole_dsn_precedence(monkeypatch):
    cfg = ImportConfig(database=DatabaseConfig(dsn="postgresql://cfg/db"))
    assert resolve_dsn(cfg) == "postgresql://cfg/db"
    monkeypatch.setenv("PGDSN", "postgresql://pgdsn/db")
    assert resolve_dsn(cfg) == "postgresql://pgdsn/db"
    monkeypatch.setenv("DATABASE_URL", "postgresql://url/db")
    assert resolve_dsn(cfg) == "postgresql://url/db"
