from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from ..refs import is_ref
from .types import CALENDAR_UNITS, CompiledOffset, LiteralOffset, Operator, OffsetCompileError, ReferenceOffset


logger = logging.getLogger(__name__)


UNIT_ALIASES = {
    "year": "years",
    "years": "years",
    "quarter": "quarters",
    "quarters": "quarters",
    "month": "months",
    "months": "months",
    "week": "weeks",
    "weeks": "weeks",
    "day": "days",
    "days": "days",
    "hour": "hours",
    "hours": "hours",
    "minute": "minutes",
    "minutes": "minutes",
    "second": "seconds",
    "seconds": "seconds",
}

_OFFSET_OR_REF = 'expects an offset "interval" and "duration" or a "ref"'


def normalize_unit(duration: Any) -> str | None:
    if not isinstance(duration, str):
        return None
    return UNIT_ALIASES.get(duration.strip().lower())


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def compile_offset(rule_name: str, operator: Operator, args: Sequence[Any] | None) -> CompiledOffset:
    options = list(args or [])

    if not options or len(options) > 2:
        raise OffsetCompileError(rule_name, _OFFSET_OR_REF)

    if len(options) == 1:
        if not is_ref(options[0]):
            raise OffsetCompileError(rule_name, _OFFSET_OR_REF)
        compiled: CompiledOffset = ReferenceOffset(operator=operator, ref_key=options[0].key)
        logger.debug("[offset] %s compiled against ref %s", rule_name, compiled.ref_key)
        return compiled

    interval, duration = options
    if not _is_number(interval):
        raise OffsetCompileError(rule_name, 'expects an "interval" to be a number')

    unit = normalize_unit(duration)
    if unit is None:
        raise OffsetCompileError(rule_name, f'unsupported duration "{duration}"')

    if unit in CALENDAR_UNITS:
        if interval != int(interval):
            raise OffsetCompileError(rule_name, f'expects a whole "interval" for "{unit}" duration')
        interval = int(interval)

    compiled = LiteralOffset(operator=operator, interval=interval, unit=unit)
    logger.debug("[offset] %s compiled as %s %s %s", rule_name, operator, interval, unit)
    return compiled
