from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..models.config_models import ImportConfig

"""PostgreSQL connection handling.

Connection parameters are resolved in this order:
    1. DATABASE_URL / PGDSN environment variables (whole DSN)
    2. database.dsn from the config file
    3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling back
       to the matching key of the config ``database`` section
The CLI loads ``.env`` (override mode) before calling connect(), so values
from ``.env`` win over the process environment.
"""

__all__ = [
    "connect",
    "resolve_dsn",
]

logger = logging.getLogger(__name__)


def resolve_dsn(cfg: ImportConfig) -> str:
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def connect(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper; tested via integration)
    """Yield a cursor inside one explicit transaction.

    The transaction is committed when the block exits normally and rolled
    back when it raises, so a failed bulk request leaves nothing behind.
    """
    conn = psycopg2.connect(resolve_dsn(cfg))
    conn.autocommit = False
    cur = conn.cursor()
    try:
        yield cur
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        try:
            cur.close()
        finally:
            conn.close()
