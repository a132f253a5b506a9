from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union


Operator = Literal[">", "<"]

DurationUnit = Literal[
    "years",
    "quarters",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
]

# Offsets in these units are compared at day resolution.
DAY_UNITS: frozenset[str] = frozenset({"years", "quarters", "months", "weeks", "days"})

# relativedelta only accepts whole years and months.
CALENDAR_UNITS: frozenset[str] = frozenset({"years", "quarters", "months"})


@dataclass(frozen=True)
class LiteralOffset:
    operator: Operator
    interval: int | float
    unit: DurationUnit

    @property
    def day_resolution(self) -> bool:
        return self.unit in DAY_UNITS

    def message_args(self) -> dict[str, int | float | str]:
        return {"interval": self.interval, "duration": self.unit}


@dataclass(frozen=True)
class ReferenceOffset:
    operator: Operator
    ref_key: str

    @property
    def day_resolution(self) -> bool:
        return False

    def message_args(self) -> dict[str, int | float | str]:
        return {"ref": self.ref_key}


CompiledOffset = Union[LiteralOffset, ReferenceOffset]


class OffsetCompileError(ValueError):
    def __init__(self, rule_name: str, message: str):
        super().__init__(f'"{rule_name}": {message}')
        self.rule_name = rule_name


class OffsetReferenceError(RuntimeError):
    def __init__(self, *, rule_name: str, ref_key: str, message: str):
        super().__init__(f'"{rule_name}": expects "refs.{ref_key}" {message}')
        self.rule_name = rule_name
        self.ref_key = ref_key
