from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from .schemas import ErrorReport, ReportedError


logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*([\w.]+)\s*\}\}")


class ValidationBailError(Exception):
    def __init__(self, report: dict[str, Any]):
        super().__init__("validation stopped on the first error")
        self.report = report


class MessagesBag:
    """Custom messages looked up by '<field>.<rule>', then '<rule>'."""

    def __init__(self, messages: Optional[Mapping[str, str]] = None):
        self.messages = dict(messages or {})

    def get(self, pointer: str, rule: str, default: str, args: Optional[Mapping[str, Any]] = None) -> str:
        template = self.messages.get(f"{pointer}.{rule}") or self.messages.get(rule) or default
        return self.render(template, pointer, rule, args)

    @staticmethod
    def render(template: str, pointer: str, rule: str, args: Optional[Mapping[str, Any]] = None) -> str:
        values: dict[str, Any] = {"field": pointer, "rule": rule}
        for key, value in (args or {}).items():
            values[f"options.{key}"] = value

        def _sub(match: re.Match) -> str:
            key = match.group(1)
            if key not in values:
                return match.group(0)
            return str(values[key])

        return _PLACEHOLDER.sub(_sub, template)


class ApiErrorReporter:
    def __init__(self, messages: MessagesBag, bail: bool = False):
        self.messages = messages
        self.bail = bail
        self.errors: list[ReportedError] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def report(self, message: str, rule: str, pointer: str, args: Optional[Mapping[str, Any]] = None) -> None:
        self.errors.append(
            ReportedError(
                rule=rule,
                field=pointer,
                message=self.messages.get(pointer, rule, message, args),
                args=dict(args) if args else None,
            )
        )
        logger.debug("[reporter] %s failed at %s", rule, pointer)
        if self.bail:
            raise ValidationBailError(self.to_json())

    def to_json(self) -> dict[str, Any]:
        return ErrorReport(errors=list(self.errors)).model_dump(exclude_none=True)
