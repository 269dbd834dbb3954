"""Shared utilities for fauna_typegen."""

from .records import RecordSchema
from .schema_loader import (
    SchemaCache,
    load_schema,
    collect_schema_paths,
    record_from_collection,
    records_from_schema,
)
from .errors import (
    SchemaError,
    SchemaValidationError,
    FaunaQueryError,
    MissingSecretError,
)

__all__ = [
    # Records
    "RecordSchema",
    # Schema loading
    "SchemaCache",
    "load_schema",
    "collect_schema_paths",
    "record_from_collection",
    "records_from_schema",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "FaunaQueryError",
    "MissingSecretError",
]
