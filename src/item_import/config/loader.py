from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_ITEM_CODE_FUNCTION,
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DatabaseConfig,
    ImportConfig,
    ReferenceDataConfig,
)
from ..models.reference import Category, UnitOfMeasure

"""Config loader.

Responsibilities:
- Load the YAML config (config/import.yml by default)
- Validate it against the bundled config_schema.json
- Apply defaults for optional keys
"""

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (unknown keys, wrong types).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _load_reference_data(raw: dict[str, Any]) -> ReferenceDataConfig:
    return ReferenceDataConfig(
        categories=[Category.from_record(c) for c in raw.get("categories", [])],
        uom_types=[UnitOfMeasure.from_record(u) for u in raw.get("uom_types", [])],
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return ImportConfig(
        max_file_size_bytes=data.get("max_file_size_bytes", DEFAULT_MAX_FILE_SIZE_BYTES),
        organization_id=data.get("organization_id"),
        created_by=data.get("created_by"),
        # explicit null disables server-side code generation
        item_code_function=data.get("item_code_function", DEFAULT_ITEM_CODE_FUNCTION),
        database=db,
        reference_data=_load_reference_data(data.get("reference_data") or {}),
    )
