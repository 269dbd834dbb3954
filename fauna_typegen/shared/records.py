"""Record schema model shared by schema sources and the type generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


def _signature_of(definition: Any) -> str:
    """Return the signature of a Fauna field definition.

    Fauna returns ``{"signature": "String?"}``; schema files may use the
    bare signature string instead. A missing signature renders as ``any``.
    """
    if definition is None:
        return "any"
    if isinstance(definition, Mapping):
        # Computed fields may omit their signature
        return str(definition.get("signature") or "any")
    return str(definition)


def _freeze(fields: Mapping[str, Any] | None) -> Mapping[str, str] | None:
    if fields is None:
        return None
    return MappingProxyType({str(k): _signature_of(v) for k, v in fields.items()})


@dataclass(frozen=True, slots=True)
class RecordSchema:
    """A named collection with its ordered field signatures."""

    name: str
    fields: Mapping[str, str] | None
    computed_fields: Mapping[str, str] | None = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _freeze(self.fields))
        object.__setattr__(self, "computed_fields", _freeze(self.computed_fields))

    @property
    def read_fields(self) -> dict[str, str]:
        """Fields merged with computed fields, for the read type only."""
        merged = dict(self.fields or {})
        if self.computed_fields:
            merged.update(self.computed_fields)
        return merged
