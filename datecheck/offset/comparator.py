from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from dateutil.relativedelta import relativedelta

from ..settings import get_settings
from .common import ValidationContext, local_timezone, to_local_datetime
from .types import DAY_UNITS, CompiledOffset, LiteralOffset, OffsetReferenceError


logger = logging.getLogger(__name__)


def _debug_step(message: str, *args: Any) -> None:
    if get_settings().DEBUG_STEPS:
        logger.info("[offset] " + message, *args)


def _now() -> datetime:
    return datetime.now(local_timezone())


def _delta(offset: LiteralOffset) -> relativedelta:
    if offset.unit == "quarters":
        return relativedelta(months=3 * offset.interval)
    return relativedelta(**{offset.unit: offset.interval})


def shift_from_now(offset: LiteralOffset) -> datetime:
    """After-offsets look forward from now, before-offsets look back.

    Calendar units move the local wall clock; hours and finer move the
    instant, so a DST change never stretches or shrinks the shift.
    """
    tz = local_timezone()
    now = _now().astimezone(tz)
    sign = 1 if offset.operator == ">" else -1
    if offset.unit in DAY_UNITS:
        return now + sign * _delta(offset)
    shift = timedelta(**{offset.unit: offset.interval})
    return (now.astimezone(timezone.utc) + sign * shift).astimezone(tz)


def _ref_boundary(rule_name: str, ref_key: str, refs: Mapping[str, Any]) -> datetime:
    if ref_key not in refs:
        raise OffsetReferenceError(rule_name=rule_name, ref_key=ref_key, message="to be resolved before validation")
    boundary = to_local_datetime(refs[ref_key])
    if boundary is None:
        raise OffsetReferenceError(rule_name=rule_name, ref_key=ref_key, message="to be a date")
    return boundary


def resolve_boundary(rule_name: str, compiled: CompiledOffset, refs: Mapping[str, Any]) -> datetime:
    if isinstance(compiled, LiteralOffset):
        return shift_from_now(compiled)
    return _ref_boundary(rule_name, compiled.ref_key, refs)


def is_satisfied(value: datetime, boundary: datetime, compiled: CompiledOffset) -> bool:
    if compiled.day_resolution:
        # calendar days of the local zone
        left, right = value.date(), boundary.date()
    else:
        left, right = value.astimezone(timezone.utc), boundary.astimezone(timezone.utc)
    if compiled.operator == ">":
        return left > right
    return left < right


def validate_offset(
    rule_name: str,
    default_message: str,
    value: Any,
    compiled: CompiledOffset,
    ctx: ValidationContext,
) -> None:
    candidate = to_local_datetime(value)
    if candidate is None:
        # non-date values belong to the date type check
        logger.debug("[offset] %s skipped non-date value at %s", rule_name, ctx.pointer)
        return

    boundary = resolve_boundary(rule_name, compiled, ctx.refs)
    passed = is_satisfied(candidate, boundary, compiled)
    _debug_step(
        "%s %s at %s: %s %s %s",
        rule_name,
        "passed" if passed else "failed",
        ctx.pointer,
        candidate.isoformat(),
        compiled.operator,
        boundary.isoformat(),
    )
    if passed:
        return
    ctx.error_reporter.report(default_message, rule_name, ctx.pointer, compiled.message_args())
