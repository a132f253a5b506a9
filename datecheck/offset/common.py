from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from typing import Any, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

from ..settings import get_settings


class ErrorReporter(Protocol):
    def report(self, message: str, rule: str, pointer: str, args: Optional[Mapping[str, Any]] = None) -> None:
        ...


@dataclass
class ValidationContext:
    field: str
    pointer: str
    error_reporter: ErrorReporter
    refs: Mapping[str, Any] = field(default_factory=dict)


def local_timezone() -> tzinfo:
    name = get_settings().TIMEZONE
    if name:
        return ZoneInfo(name)
    return datetime.now().astimezone().tzinfo


def to_local_datetime(value: Any) -> Optional[datetime]:
    """Bring a date or datetime onto the local timeline; anything else gives None."""
    tz = local_timezone()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)
    return None


def parse_date_value(value: Any) -> Optional[datetime]:
    if isinstance(value, (date, datetime)):
        return to_local_datetime(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return to_local_datetime(date_parser.isoparse(value.strip()))
    except (ValueError, OverflowError):
        return None
