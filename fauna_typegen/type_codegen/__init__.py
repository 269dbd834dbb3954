"""Types Code Generator - Generates TypeScript declarations from Fauna schemas."""

from .parser import (
    RenderMode,
    parse_signature,
    split_top_level,
    strip_optional,
)
from .main import (
    GeneratedDocument,
    GeneratorContext,
    TypeMapping,
    emit,
    generate,
    render_declaration,
    render_field,
    render_field_type,
    write_document,
)

__all__ = [
    "RenderMode",
    "parse_signature",
    "split_top_level",
    "strip_optional",
    "GeneratedDocument",
    "GeneratorContext",
    "TypeMapping",
    "emit",
    "generate",
    "render_declaration",
    "render_field",
    "render_field_type",
    "write_document",
]
