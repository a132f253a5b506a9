from __future__ import annotations

from typing import Any, Sequence

from ..offset.common import ValidationContext
from ..offset.comparator import validate_offset
from ..offset.compiler import compile_offset
from ..offset.types import CompiledOffset, OffsetCompileError, Operator
from .types import ParsedRule


class DateOffsetRule:
    """Host-facing descriptor for an offset date rule.

    compile() runs once per schema and rejects malformed options by raising
    OffsetCompileError; validate() runs per field and only ever reports.
    """

    subtypes = ("date",)

    def __init__(self, name: str, operator: Operator, default_message: str):
        self.name = name
        self.operator = operator
        self.default_message = default_message

    def compile(self, field_type: str, subtype: str, options: Sequence[Any] | None) -> ParsedRule:
        if subtype not in self.subtypes:
            raise OffsetCompileError(self.name, 'Rule can only be used with "schema.<date>" type')
        return ParsedRule(
            name=self.name,
            compiled_options=compile_offset(self.name, self.operator, options),
        )

    def validate(self, value: Any, compiled_options: CompiledOffset, ctx: ValidationContext) -> None:
        validate_offset(self.name, self.default_message, value, compiled_options, ctx)


after = DateOffsetRule("after", ">", "after date validation failed")
before = DateOffsetRule("before", "<", "before date validation failed")
