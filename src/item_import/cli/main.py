from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..csvfile.normalizer import SchemaError
from ..csvfile.reader import FileSelectionError, ParseError, check_file
from ..csvfile.template import write_template
from ..db.connection import connect
from ..db.item_store import PostgresItemStore, StoreError
from ..db.memory_store import InMemoryItemStore
from ..logging.error_log import FILE_LEVEL_ROW, ErrorLogBuffer
from ..logging.init import enable_debug, log_summary, setup_logging
from ..models.config_models import ImportConfig
from ..models.import_session import ImportSession
from ..models.import_summary import ImportSummary
from ..services.commit import CommitError, ItemStore
from ..services.pipeline import ImportPipeline
from ..services.progress import CommitProgress
from ..services.summary import (
    render_preview,
    render_references,
    render_results,
    render_summary_line,
)

"""CLI entrypoint.

Subcommands:
- import FILE [--dry-run]: parse, validate and bulk create items from a CSV file
- template [PATH]: write the import template CSV
- references: list the categories and units a CSV may refer to

Exit codes: 0 every row imported, 2 some rows invalid or rejected, 1 fatal.
Set DISABLE_DB_CONNECT=1 to run against the in-memory store seeded from the
config ``reference_data`` section instead of PostgreSQL.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="item-import", description="CSV -> procurement items bulk importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import items from a CSV file")
    imp.add_argument("file", type=Path, help="CSV file (name,code,description,category,uom)")
    imp.add_argument("--dry-run", action="store_true", help="Validate and preview only, create nothing")

    tpl = sub.add_parser("template", help="Write the import template CSV")
    tpl.add_argument("output", nargs="?", type=Path, default=None, help="Target file or directory")

    sub.add_parser("references", help="List available categories and units of measure")
    return p.parse_args(argv)


@contextmanager
def _open_store(cfg: ImportConfig) -> Iterator[ItemStore]:
    """Yield the item store for this run.

    With a database the whole run is one transaction: an exception leaving
    this block rolls it back.
    """
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logging.getLogger(__name__).debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> in-memory store")
        yield InMemoryItemStore(cfg.reference_data.categories, cfg.reference_data.uom_types)
        return
    with connect(cfg) as cur:
        yield PostgresItemStore(
            cur,
            organization_id=cfg.organization_id,
            created_by=cfg.created_by,
            item_code_function=cfg.item_code_function,
        )


def _emit(logger: logging.Logger, lines: list[str]) -> None:
    for line in lines:
        logger.info(line)


def _run_import(args: argparse.Namespace, cfg: ImportConfig, logger: logging.Logger) -> int:
    error_log = ErrorLogBuffer()
    session = ImportSession()
    pipeline: ImportPipeline | None = None
    summary: ImportSummary | None = None
    try:
        # reject a wrong or oversized file before touching the database
        try:
            check_file(args.file, cfg.max_file_size_bytes)
        except FileSelectionError as e:
            error_log.add(file=args.file.name, row=FILE_LEVEL_ROW, error_type="FILE_SELECTION_ERROR", message=str(e))
            logger.error(f"{args.file.name}: {e}")
            return EXIT_FATAL

        with _open_store(cfg) as store:
            pipeline = ImportPipeline(store, cfg, error_log)
            pipeline.load_references()
            try:
                pipeline.select_file(session, args.file)
            except (FileSelectionError, ParseError, SchemaError):
                return EXIT_FATAL

            _emit(logger, render_preview(session.valid_rows, session.invalid_rows))
            if args.dry_run:
                logger.info("dry run: nothing imported")
            elif not session.valid_rows:
                logger.error("no valid rows to import")
                return EXIT_FATAL
            else:
                with CommitProgress(len(session.valid_rows)) as progress:
                    result = pipeline.commit(session, on_progress=progress.advance)
                    progress.set_postfix(created=result.created_count, failed=result.failed_count)
                _emit(logger, render_results(result))
    except CommitError:
        # already logged by the pipeline; the transaction has been rolled back
        return EXIT_FATAL
    except (psycopg2.Error, StoreError) as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL
    finally:
        path = error_log.flush() if pipeline is None else pipeline.flush_errors()
        if path is not None:
            logger.info(f"error log written: {path}")
        if pipeline is not None and session.file_name:
            summary = pipeline.summarize(session)
            log_summary(render_summary_line(summary).removeprefix("SUMMARY "))

    if summary is not None and summary.has_problems:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _run_references(cfg: ImportConfig, logger: logging.Logger) -> int:
    try:
        with _open_store(cfg) as store:
            categories = store.get_active_categories()
            uom_types = store.get_uom_types()
    except (psycopg2.Error, StoreError) as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL
    _emit(logger, render_references(categories, uom_types))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up the test runner's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    if args.command == "template":
        path = write_template(args.output)
        logger.info(f"template written: {path}")
        return EXIT_SUCCESS_ALL

    # .env first so database settings from it take precedence
    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "references":
        return _run_references(cfg, logger)
    return _run_import(args, cfg, logger)
