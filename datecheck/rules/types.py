from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..offset.types import CompiledOffset


@dataclass(frozen=True)
class RuleSpec:
    name: str
    options: tuple[Any, ...]


@dataclass(frozen=True)
class ParsedRule:
    name: str
    compiled_options: CompiledOffset
    async_: bool = False
