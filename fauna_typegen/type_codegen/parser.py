"""
Fauna signature parser - Converts Fauna field signatures to TypeScript types.

Examples:
    "String"                 => "string"
    "Long?"                  => "number" (the caller marks the field optional)
    "Ref<User>"              => "User"
    "Array<Ref<User>>"       => "Array<User>"
    "{ id: String, n: Int }" => "{ id: string; n: number }"
"""

from __future__ import annotations

import enum
from typing import Final

# Opening and closing characters tracked by the depth scanner
OPEN_BRACKETS: Final[frozenset[str]] = frozenset({"{", "<"})
CLOSE_BRACKETS: Final[frozenset[str]] = frozenset({"}", ">"})

# Opaque reference type used in write payloads
DOCUMENT_REFERENCE: Final[str] = "DocumentReference"

# Mapping from Fauna scalars to TypeScript types
SCALAR_TYPES: Final[dict[str, str]] = {
    "String": "string",
    "Boolean": "boolean",
    "Long": "number",
    "Int": "number",
    "Time": "TimeStub",
    "Date": "DateStub",
    "Null": "null",
}


class RenderMode(enum.Enum):
    """How ``Ref<...>`` signatures are rendered."""

    MAIN = "main"
    CREATE = "create"
    FAUNA_CREATE = "faunaCreate"


def strip_optional(signature: str) -> str:
    """Trim a signature and drop a single trailing ``?``."""
    trimmed = signature.strip()
    if trimmed.endswith("?"):
        trimmed = trimmed[:-1].strip()
    return trimmed


def has_top_level(text: str, separator: str) -> bool:
    """Check whether ``separator`` occurs outside any brackets."""
    depth = 0
    for char in text:
        if char in OPEN_BRACKETS:
            depth += 1
        elif char in CLOSE_BRACKETS:
            depth -= 1
        elif char == separator and depth == 0:
            return True
    return False


def split_top_level(text: str, separator: str) -> list[str]:
    """Split ``text`` on ``separator`` occurrences at bracket depth 0.

    Each part is trimmed. Nested ``{...}`` and ``<...>`` regions are kept whole:

        >>> split_top_level("a: Int, b: { c: Int, d: Int }", ",")
        ['a: Int', 'b: { c: Int, d: Int }']
    """
    parts: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char in OPEN_BRACKETS:
            depth += 1
        elif char in CLOSE_BRACKETS:
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(text[start:index].strip())
            start = index + 1
    parts.append(text[start:].strip())
    return parts


def _render_ref(name: str, mode: RenderMode) -> str:
    if mode is RenderMode.MAIN:
        return name
    if mode is RenderMode.CREATE:
        return f"{name} | {DOCUMENT_REFERENCE}"
    if mode is RenderMode.FAUNA_CREATE:
        return DOCUMENT_REFERENCE
    raise ValueError(f"Unknown render mode: {mode!r}")


def _parse_object_literal(text: str, mode: RenderMode) -> str:
    inside = text[1:-1].strip()
    properties = [prop for prop in split_top_level(inside, ",") if prop]

    rendered: list[str] = []
    for prop in properties:
        key, colon, value = prop.partition(":")
        if not colon:
            # Not a "key: value" pair, keep as written
            rendered.append(prop)
            continue
        rendered.append(f"{key.strip()}: {parse_signature(value, mode)}")

    return f"{{ {'; '.join(rendered)} }}"


def parse_signature(signature: str, mode: RenderMode = RenderMode.MAIN) -> str:
    """Recursively convert a Fauna type signature to a TypeScript type.

    Never raises on malformed input: anything that is not a recognised
    construct is returned as written, so unknown or future scalar names
    flow through to the generated file.

    Args:
        signature: Fauna signature, e.g. ``"Array<Ref<User>>?"``.
        mode: Controls how references render (read, create or wire-create).

    Returns:
        The TypeScript type. A trailing optional marker is stripped and
        never appears in the result.
    """
    trimmed = strip_optional(signature)

    if has_top_level(trimmed, "|"):
        branches = split_top_level(trimmed, "|")
        return " | ".join(parse_signature(branch, mode) for branch in branches)

    if trimmed.startswith("{") and trimmed.endswith("}"):
        return _parse_object_literal(trimmed, mode)

    if trimmed.startswith("Array<") and trimmed.endswith(">"):
        inner = trimmed[len("Array<"):-1]
        return f"Array<{parse_signature(inner, mode)}>"

    if trimmed.startswith("Ref<") and trimmed.endswith(">"):
        return _render_ref(trimmed[len("Ref<"):-1].strip(), mode)

    return SCALAR_TYPES.get(trimmed, trimmed)
