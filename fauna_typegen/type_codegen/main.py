"""
Types Code Generator - Generates TypeScript declarations from Fauna collection schemas.

For every collection ``X`` with fields, the generated document contains:
- ``X``: the read type (fields plus computed fields)
- ``X_Create`` / ``X_Replace`` / ``X_Update``: input types accepting a value
  or a ``DocumentReference`` wherever a reference is expected
- ``X_FaunaCreate`` / ``X_FaunaReplace`` / ``X_FaunaUpdate``: wire payload types
  where every reference is a ``DocumentReference``
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..shared import (
    RecordSchema,
    SchemaCache,
    SchemaError,
    collect_schema_paths,
    records_from_schema,
)
from .parser import RenderMode, has_top_level, parse_signature, split_top_level, strip_optional

# Template configuration
TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

# Name suffix of the declaration rendered in each mode
MODE_SUFFIXES: Final[dict[RenderMode, str]] = {
    RenderMode.MAIN: "",
    RenderMode.CREATE: "_Create",
    RenderMode.FAUNA_CREATE: "_FaunaCreate",
}

# Every type name exported per collection, in export order
EXPORT_SUFFIXES: Final[tuple[str, ...]] = (
    "",
    "_Create",
    "_Update",
    "_Replace",
    "_FaunaCreate",
    "_FaunaUpdate",
    "_FaunaReplace",
)

MAPPING_INTERFACE: Final[str] = "UserCollectionsTypeMapping"
RUNTIME_MODULE: Final[str] = "fauna"

DEFAULT_OUTPUT_DIR: Final[Path] = Path("src/fauna-typed")
DEFAULT_OUTPUT_FILE: Final[str] = "types.ts"


@dataclass(frozen=True, slots=True)
class TypeMapping:
    """Type names a collection maps to in the mapping interface."""

    main: str
    create: str
    replace: str
    update: str

    @classmethod
    def for_record(cls, name: str) -> TypeMapping:
        return cls(
            main=name,
            create=f"{name}_Create",
            replace=f"{name}_Replace",
            update=f"{name}_Update",
        )


@dataclass(frozen=True, slots=True)
class GeneratedDocument:
    """Result of a generation run."""

    declarations: tuple[str, ...]
    export_names: tuple[str, ...]
    mappings: Mapping[str, TypeMapping]
    text: str


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    template_env: Environment = field(init=False)
    schema_cache: SchemaCache = field(default_factory=SchemaCache)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        # Pre-compile templates
        self._document_template = self.template_env.get_template("types.ts.j2")

    @property
    def document_template(self):
        return self._document_template


def _unwrap_array(signature: str) -> tuple[str, bool]:
    """Return the element signature of an ``Array<...>`` field, if it is one.

    The outer optional marker is carried over to the element text.
    """
    trimmed = signature.strip()
    body = strip_optional(trimmed)
    if body.startswith("Array<") and body.endswith(">") and not has_top_level(body, "|"):
        inner = body[len("Array<"):-1]
        return (f"{inner}?" if trimmed.endswith("?") else inner), True
    return trimmed, False


def render_field_type(signature: str, mode: RenderMode = RenderMode.MAIN) -> str:
    """Render the TypeScript type of a single collection field.

    Array fields are unwrapped first and each union alternative is wrapped
    back in ``Array<...>`` on its own, so ``Array<String | Null>`` becomes
    ``Array<string> | Array<null>``.
    """
    body, is_array = _unwrap_array(signature)

    if has_top_level(body, "|"):
        alternatives = split_top_level(body, "|")
    else:
        alternatives = [body]

    rendered = []
    for alternative in alternatives:
        ts_type = parse_signature(alternative, mode)
        rendered.append(f"Array<{ts_type}>" if is_array else ts_type)
    return " | ".join(rendered)


def render_field(name: str, signature: str, mode: RenderMode = RenderMode.MAIN) -> str:
    """Render one property line, e.g. ``\\tage?: number;``."""
    optional = "?" if signature.strip().endswith("?") else ""
    return f"\t{name}{optional}: {render_field_type(signature, mode)};"


def render_declaration(
    name: str,
    fields: Mapping[str, str],
    mode: RenderMode = RenderMode.MAIN,
) -> str:
    """Render a ``type`` declaration for one mode, preserving field order."""
    lines = [f"type {name}{MODE_SUFFIXES[mode]} = {{"]
    lines.extend(render_field(key, signature, mode) for key, signature in fields.items())
    lines.append("};")
    return "\n".join(lines)


def render_record(record: RecordSchema) -> str:
    """Render the seven declarations of a collection as one block."""
    name = record.name
    fields = record.fields or {}
    main_decl = render_declaration(name, record.read_fields, RenderMode.MAIN)
    create_decl = render_declaration(name, fields, RenderMode.CREATE)
    fauna_decl = render_declaration(name, fields, RenderMode.FAUNA_CREATE)

    return "\n".join([
        main_decl,
        "",
        create_decl,
        f"type {name}_Replace = {name}_Create;",
        f"type {name}_Update = Partial<{name}_Create>;",
        "",
        fauna_decl,
        f"type {name}_FaunaReplace = {name}_FaunaCreate;",
        f"type {name}_FaunaUpdate = Partial<{name}_FaunaCreate>;",
    ])


def emit(
    records: Sequence[RecordSchema],
    ctx: GeneratorContext | None = None,
) -> GeneratedDocument:
    """Build the TypeScript document for a list of collections.

    Collections without ``fields`` are skipped: they produce no declaration,
    no export and no mapping entry.
    """
    ctx = ctx or GeneratorContext()

    declarations: list[str] = []
    export_names: list[str] = []
    mappings: dict[str, TypeMapping] = {}

    for record in records:
        if record.fields is None:
            continue
        declarations.append(render_record(record))
        export_names.extend(f"{record.name}{suffix}" for suffix in EXPORT_SUFFIXES)
        mappings[record.name] = TypeMapping.for_record(record.name)

    text = ctx.document_template.render(
        runtime_module=RUNTIME_MODULE,
        declarations=declarations,
        mappings=mappings,
        export_names=export_names,
        mapping_interface=MAPPING_INTERFACE,
    )

    return GeneratedDocument(
        declarations=tuple(declarations),
        export_names=tuple(export_names),
        mappings=mappings,
        text=text,
    )


def write_document(
    document: GeneratedDocument,
    directory: Path = DEFAULT_OUTPUT_DIR,
    filename: str = DEFAULT_OUTPUT_FILE,
) -> Path:
    """Write the generated document, creating the directory if needed."""
    directory.mkdir(parents=True, exist_ok=True)
    output_path = directory / filename
    output_path.write_text(document.text, encoding="utf-8")
    return output_path


def load_records(
    schema_paths: Sequence[Path],
    ctx: GeneratorContext,
) -> list[RecordSchema]:
    """Load collection records from schema files, in path order."""
    records: list[RecordSchema] = []
    for schema_path in schema_paths:
        data: dict[str, Any] = ctx.schema_cache.get(schema_path)
        records.extend(records_from_schema(data, str(schema_path)))
    return records


def generate(
    schema_paths: Sequence[Path],
    output_dir: Path = DEFAULT_OUTPUT_DIR,
    filename: str = DEFAULT_OUTPUT_FILE,
) -> Path:
    """Generate a TypeScript types file from schema files.

    Args:
        schema_paths: Paths to YAML/JSON schema files.
        output_dir: Directory for the generated file.
        filename: Name of the generated file.

    Returns:
        Path of the written file.
    """
    ctx = GeneratorContext()
    records = load_records(schema_paths, ctx)
    return write_document(emit(records, ctx), output_dir, filename)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate TypeScript types from Fauna schema files",
    )
    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="Schema file(s) or directories containing schema YAML/JSON files",
    )
    parser.add_argument(
        "-d",
        "--dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory to generate types file",
    )
    parser.add_argument(
        "-f",
        "--file",
        default=DEFAULT_OUTPUT_FILE,
        help="Name of the generated types file",
    )

    args = parser.parse_args(argv)

    try:
        schema_paths = collect_schema_paths(args.paths)
        if not schema_paths:
            raise SystemExit("No schema files found")

        output_path = generate(schema_paths, args.dir, args.file)

        print(
            f"Generated types from {len(schema_paths)} schema file(s) into {output_path}"
        )
    except (SchemaError, FileNotFoundError) as e:
        raise SystemExit(f"Error: {e}") from e


if __name__ == "__main__":
    main()
