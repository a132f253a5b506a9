from __future__ import annotations

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator, model_validator
from typing import Any, Optional, List, Literal, Union


RuleName = Literal["after", "before"]


class ReportedError(BaseModel):
    rule: str
    field: str
    message: str
    args: Optional[dict[str, Optional[str | int | float]]] = None


class ErrorReport(BaseModel):
    errors: List[ReportedError] = Field(default_factory=list)


class RuleItem(BaseModel):
    field: str = Field(..., description="Key of the field in data")
    rule: RuleName = Field(..., description="after | before")
    args: List[Union[StrictInt, StrictFloat, StrictStr, StrictBool]] = Field(default_factory=list, description="[interval, duration]")
    ref: Optional[str] = Field(None, description="Key of the field in data holding the boundary date")

    @field_validator("rule", mode="before")
    @classmethod
    def _normalize_rule(cls, value):
        if value is None:
            return value
        return str(value).strip().lower()

    @model_validator(mode="after")
    def _args_or_ref(self):
        if self.ref is not None and self.args:
            raise ValueError("rule accepts either args or ref, not both")
        return self


class ValidateRequest(BaseModel):
    data: dict[str, Any] = Field(default_factory=dict)
    rules: List[RuleItem] = Field(default_factory=list)
    messages: dict[str, str] = Field(default_factory=dict, description="Message overrides keyed by '<field>.<rule>' or '<rule>'")


class Trace(BaseModel):
    request_id: str
    timings_ms: dict[str, int] = Field(default_factory=dict)


class ValidateResponse(BaseModel):
    errors: List[ReportedError] = Field(default_factory=list)
    trace: Trace
