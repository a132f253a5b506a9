from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .offset.common import ValidationContext, parse_date_value
from .offset.types import OffsetReferenceError
from .refs import SchemaRef, resolve_refs
from .reporter import ApiErrorReporter, MessagesBag, ValidationBailError
from .rules.catalog import RULES
from .rules.types import ParsedRule
from .schemas import RuleItem
from .settings import get_settings


logger = logging.getLogger(__name__)

DATE_RULE = "date"
DATE_DEFAULT_MESSAGE = "date validation failed"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _collect_refs(data: Mapping[str, Any], rules: list[RuleItem]) -> dict[str, SchemaRef]:
    refs: dict[str, SchemaRef] = {}
    for item in rules:
        if item.ref is None or item.ref in refs:
            continue
        if _is_blank(data.get(item.ref)):
            raise OffsetReferenceError(rule_name=item.rule, ref_key=item.ref, message="to be resolved before validation")
        value = parse_date_value(data.get(item.ref))
        if value is None:
            raise OffsetReferenceError(rule_name=item.rule, ref_key=item.ref, message="to be a date")
        refs[item.ref] = SchemaRef(key=item.ref, value=value)
    return refs


def _compile_all(rules: list[RuleItem], refs: Mapping[str, SchemaRef]) -> list[tuple[RuleItem, ParsedRule]]:
    compiled = []
    for item in rules:
        options = [refs[item.ref]] if item.ref is not None else list(item.args)
        compiled.append((item, RULES[item.rule].compile("literal", "date", options)))
    return compiled


def run_date_rules(
    data: Mapping[str, Any],
    rules: Iterable[RuleItem],
    messages: Optional[Mapping[str, str]] = None,
    bail: Optional[bool] = None,
) -> dict[str, Any]:
    """Compile every rule, then validate every field against them.

    Compile problems and unusable refs raise before anything is validated.
    Failing fields are reported and the run carries on, unless bail is set.
    """
    items = list(rules)
    if bail is None:
        bail = get_settings().REPORTER_BAIL
    reporter = ApiErrorReporter(MessagesBag(messages), bail=bail)

    refs = _collect_refs(data, items)
    compiled = _compile_all(items, refs)
    resolved = resolve_refs(refs)

    values: dict[str, Optional[datetime]] = {}
    try:
        for item, parsed in compiled:
            raw = data.get(item.field)
            if _is_blank(raw):
                continue
            if item.field not in values:
                values[item.field] = parse_date_value(raw)
                if values[item.field] is None:
                    reporter.report(DATE_DEFAULT_MESSAGE, DATE_RULE, item.field)
            value = values[item.field]
            if value is None:
                continue
            ctx = ValidationContext(field=item.field, pointer=item.field, error_reporter=reporter, refs=resolved)
            RULES[item.rule].validate(value, parsed.compiled_options, ctx)
    except ValidationBailError as exc:
        logger.info("[engine] stopped on first error (%s rules)", len(items))
        return exc.report

    report = reporter.to_json()
    logger.info("[engine] %s rules checked, %s errors", len(items), len(report["errors"]))
    return report
