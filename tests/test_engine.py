import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from datecheck.engine import run_date_rules
from datecheck.offset import comparator
from datecheck.offset.types import OffsetCompileError, OffsetReferenceError
from datecheck.schemas import RuleItem
from datecheck.settings import get_settings


NOW = datetime(2026, 10, 19, 14, 30, tzinfo=ZoneInfo("UTC"))


@pytest.fixture(autouse=True)
def _frozen_clock(monkeypatch):
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.delenv("REPORTER_BAIL", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(comparator, "_now", lambda: NOW)
    yield
    get_settings.cache_clear()


def _rules(*items):
    return [RuleItem.model_validate(i) for i in items]


def _fields(report):
    return [(e["field"], e["rule"]) for e in report["errors"]]


def test_all_fields_are_validated_after_a_failure():
    data = {"published_on": "2026-10-19", "archived_on": "2026-10-10", "expires_on": "2026-10-25"}
    report = run_date_rules(
        data,
        _rules(
            {"field": "published_on", "rule": "before", "args": [1, "day"]},
            {"field": "archived_on", "rule": "before", "args": [1, "day"]},
            {"field": "expires_on", "rule": "after", "args": [1, "week"]},
        ),
    )
    assert _fields(report) == [("published_on", "before"), ("expires_on", "after")]


def test_ref_is_resolved_from_data():
    data = {"starts_on": "2026-11-01", "ends_on": "2026-10-30T09:00:00Z"}
    report = run_date_rules(data, _rules({"field": "ends_on", "rule": "after", "ref": "starts_on"}))
    assert _fields(report) == [("ends_on", "after")]
    assert report["errors"][0]["args"] == {"ref": "starts_on"}

    data["ends_on"] = "2026-11-01T00:00:01Z"
    assert run_date_rules(data, _rules({"field": "ends_on", "rule": "after", "ref": "starts_on"})) == {"errors": []}


def test_unparseable_value_reports_date_rule_once():
    report = run_date_rules(
        {"published_on": "not-a-date"},
        _rules(
            {"field": "published_on", "rule": "before", "args": [1, "day"]},
            {"field": "published_on", "rule": "after", "args": [1, "year"]},
        ),
    )
    assert report["errors"] == [{"rule": "date", "field": "published_on", "message": "date validation failed"}]


def test_blank_values_are_skipped():
    report = run_date_rules({"published_on": "  "}, _rules({"field": "published_on", "rule": "before", "args": [1, "day"]}))
    assert report == {"errors": []}


def test_custom_messages_are_applied():
    report = run_date_rules(
        {"published_on": "2026-10-19"},
        _rules({"field": "published_on", "rule": "before", "args": [1, "days"]}),
        messages={"before": "{{ field }} must be older than {{ options.interval }} {{ options.duration }}"},
    )
    assert report["errors"][0]["message"] == "published_on must be older than 1 days"


def test_compile_errors_raise_before_validation():
    with pytest.raises(OffsetCompileError):
        run_date_rules({"published_on": "2026-10-19"}, _rules({"field": "published_on", "rule": "before", "args": ["1", "day"]}))


def test_unusable_ref_raises():
    with pytest.raises(OffsetReferenceError):
        run_date_rules({"ends_on": "2026-10-19"}, _rules({"field": "ends_on", "rule": "after", "ref": "starts_on"}))


def test_bail_stops_on_first_error(monkeypatch):
    monkeypatch.setenv("REPORTER_BAIL", "true")
    get_settings.cache_clear()
    report = run_date_rules(
        {"a": "2026-10-19", "b": "2026-10-19"},
        _rules({"field": "a", "rule": "before", "args": [1, "day"]}, {"field": "b", "rule": "before", "args": [1, "day"]}),
    )
    assert _fields(report) == [("a", "before")]


def test_rule_item_rejects_args_and_ref_together():
    with pytest.raises(ValueError):
        RuleItem.model_validate({"field": "a", "rule": "after", "args": [1, "day"], "ref": "b"})


def test_missing_ref_field_is_reported_as_unresolved():
    with pytest.raises(OffsetReferenceError, match="to be resolved before validation") as exc:
        run_date_rules({"ends_on": "2026-10-19"}, _rules({"field": "ends_on", "rule": "after", "ref": "starts_on"}))
    assert exc.value.ref_key == "starts_on"


def test_malformed_ref_field_is_reported_as_not_a_date():
    with pytest.raises(OffsetReferenceError, match="to be a date"):
        run_date_rules(
            {"starts_on": "soon", "ends_on": "2026-10-19"},
            _rules({"field": "ends_on", "rule": "after", "ref": "starts_on"}),
        )


def test_rule_item_keeps_boolean_args_for_the_compiler():
    item = RuleItem.model_validate({"field": "a", "rule": "after", "args": [True, "days"]})
    assert item.args == [True, "days"]
    assert item.args[0] is True
    with pytest.raises(OffsetCompileError, match="to be a number"):
        run_date_rules({"a": "2026-10-19"}, [item])
