"""Domain models for the CSV item import tool."""

from .commit_result import CommitResult, CreatedItem, RowFailure
from .config_models import DatabaseConfig, ImportConfig, ReferenceDataConfig
from .error_record import ErrorRecord
from .import_session import ImportSession, ImportStage, SessionStateError
from .import_summary import ImportSummary
from .raw_row import RawRow
from .reference import Category, UnitOfMeasure
from .validated_row import ValidatedRow

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    "ReferenceDataConfig",
    # Reference data
    "Category",
    "UnitOfMeasure",
    # Pipeline models
    "RawRow",
    "ValidatedRow",
    "ImportSession",
    "ImportStage",
    "SessionStateError",
    "ImportSummary",
    "CommitResult",
    "CreatedItem",
    "RowFailure",
    "ErrorRecord",
]
