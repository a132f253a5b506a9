from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class SchemaRef:
    """Named pointer to a value that is resolved before validation runs."""

    key: str
    value: Any


def is_ref(value: Any) -> bool:
    return isinstance(value, SchemaRef)


def schema_refs(values: Mapping[str, Any]) -> dict[str, SchemaRef]:
    return {key: SchemaRef(key=key, value=value) for key, value in values.items()}


def resolve_refs(refs: Mapping[str, SchemaRef]) -> dict[str, Any]:
    return {ref.key: ref.value for ref in refs.values()}
