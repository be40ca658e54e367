from __future__ import annotations

from dataclasses import dataclass, field

from .reference import Category, UnitOfMeasure

"""Config dataclasses for the CSV item import tool.

Built by item_import.config.loader from the validated YAML document.
"""

DEFAULT_MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024
DEFAULT_ITEM_CODE_FUNCTION = "generate_item_code"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ReferenceDataConfig:
    """Reference lists for the offline (no database) store."""
    categories: list[Category] = field(default_factory=list)
    uom_types: list[UnitOfMeasure] = field(default_factory=list)


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the import process."""
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    organization_id: str | None = None  # scopes reference data and new items
    created_by: str | None = None  # user id stamped on created items
    item_code_function: str | None = DEFAULT_ITEM_CODE_FUNCTION  # SQL function for missing codes
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    reference_data: ReferenceDataConfig = field(default_factory=ReferenceDataConfig)
