"""Schema loading utilities with caching support."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Sequence

import yaml

from .records import RecordSchema
from .errors import SchemaError, SchemaValidationError

SCHEMA_SUFFIXES: tuple[str, ...] = (".yaml", ".yml", ".json")


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Immutable cache key for schema files."""

    path: Path
    mtime: float
    size: int

    @classmethod
    def from_path(cls, path: Path) -> CacheKey:
        """Create a cache key from a file path."""
        stat = path.stat()
        return cls(
            path=path.resolve(),
            mtime=stat.st_mtime,
            size=stat.st_size,
        )


@dataclass
class CachedSchema:
    """A cached schema with metadata."""

    data: dict[str, Any]
    key: CacheKey


class SchemaCache:
    """Schema cache with automatic invalidation.

    Caches parsed schema files and automatically invalidates when
    the underlying file changes (based on mtime and size).
    """

    __slots__ = ("_cache", "_max_size")

    def __init__(self, max_size: int = 100) -> None:
        self._cache: dict[Path, CachedSchema] = {}
        self._max_size = max_size

    def get(self, path: Path) -> dict[str, Any]:
        """Get a schema from cache, loading it if necessary.

        Args:
            path: Path to the schema file.

        Returns:
            The parsed schema data.

        Raises:
            SchemaError: If the schema is invalid.
        """
        resolved = path.resolve()
        current_key = CacheKey.from_path(resolved)

        cached = self._cache.get(resolved)
        if cached is not None and cached.key == current_key:
            return cached.data

        data = load_schema(resolved)

        # Evict the oldest entry when full
        if len(self._cache) >= self._max_size:
            oldest = next(iter(self._cache))
            del self._cache[oldest]

        self._cache[resolved] = CachedSchema(
            data=data,
            key=current_key,
        )

        return data

    def invalidate(self, path: Path | None = None) -> None:
        """Invalidate cached schemas.

        Args:
            path: Specific path to invalidate, or None to clear all.
        """
        if path is None:
            self._cache.clear()
        else:
            self._cache.pop(path.resolve(), None)

    def __len__(self) -> int:
        return len(self._cache)


def load_schema(schema_path: Path) -> dict[str, Any]:
    """Load a schema document from a YAML or JSON file.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read schema file: {e}", str(schema_path)) from e

    if schema_path.suffix.lower() == ".json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SchemaError(f"Invalid JSON: {e}", str(schema_path)) from e
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise SchemaError(f"Invalid YAML: {e}", str(schema_path)) from e

    if not isinstance(data, dict):
        raise SchemaError("Schema root must be a mapping", str(schema_path))

    return data


def collect_schema_paths(inputs: Sequence[Path]) -> list[Path]:
    """Collect all schema files from the given inputs.

    Args:
        inputs: Paths to schema files or directories.

    Returns:
        List of unique, resolved schema file paths.

    Raises:
        FileNotFoundError: If any input path doesn't exist.
    """

    def _iter_paths() -> Iterator[Path]:
        for raw in inputs:
            path = raw.resolve()
            if not path.exists():
                raise FileNotFoundError(f"Schema path '{raw}' does not exist")
            if path.is_dir():
                yield from sorted(
                    p
                    for p in path.iterdir()
                    if p.is_file() and p.suffix in SCHEMA_SUFFIXES
                )
            else:
                yield path

    # Use dict to preserve order while deduplicating
    seen: dict[Path, None] = {}
    for path in _iter_paths():
        seen.setdefault(path, None)

    return list(seen.keys())


def record_from_collection(
    collection: dict[str, Any],
    schema_path: str | None = None,
) -> RecordSchema:
    """Build a RecordSchema from a Fauna collection document."""
    name = collection.get("name")
    if not name or not isinstance(name, str):
        raise SchemaValidationError("collection is missing a 'name'", schema_path)

    fields = collection.get("fields")
    if fields is not None and not isinstance(fields, dict):
        raise SchemaValidationError("'fields' must be a mapping", schema_path, field=name)

    computed = collection.get("computed_fields")
    if computed is not None and not isinstance(computed, dict):
        raise SchemaValidationError(
            "'computed_fields' must be a mapping", schema_path, field=name
        )

    return RecordSchema(name=name, fields=fields, computed_fields=computed)


def records_from_schema(
    data: dict[str, Any],
    schema_path: str | None = None,
) -> list[RecordSchema]:
    """Extract record schemas from a loaded schema document.

    Accepts either ``{"collections": [...]}`` or a raw Fauna page
    (``{"data": [...]}``) as returned by ``Collection.all()``.
    """
    collections = data.get("collections")
    if collections is None:
        collections = data.get("data")

    if not isinstance(collections, list):
        raise SchemaValidationError(
            "schema must provide a 'collections' list",
            schema_path,
        )

    records: list[RecordSchema] = []
    for collection in collections:
        if not isinstance(collection, dict):
            raise SchemaValidationError("collection entries must be mappings", schema_path)
        records.append(record_from_collection(collection, schema_path))
    return records
