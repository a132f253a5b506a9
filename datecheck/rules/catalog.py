from __future__ import annotations

from typing import Any

from . import dates
from .types import RuleSpec


RULES = {
    "after": dates.after,
    "before": dates.before,
}


def after(*options: Any) -> RuleSpec:
    return RuleSpec("after", tuple(options))


def before(*options: Any) -> RuleSpec:
    return RuleSpec("before", tuple(options))
