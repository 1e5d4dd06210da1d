"""Output rendering tests."""

from __future__ import annotations

import json

import click

from plc_lens.models import ViewState
from plc_lens.output import render_human, render_json
from plc_lens.pipeline import build_report
from tests.helpers_engine import END_TO_END_OUTPUT

SOURCE = "FUNCTION_BLOCK FB1\nVAR\n  x : INT;\nEND_VAR\n  x := 10 / y;\nEND_FUNCTION_BLOCK"


def test_render_human_lists_followed_violations_and_frequency() -> None:
    state = ViewState(phase="success", report=build_report(END_TO_END_OUTPUT))
    output = click.unstyle(render_human(state, source=SOURCE))

    assert "Compliance: 95% (19/20 rules passed, 1 failed) (GOOD)" in output
    assert "Practices followed:" in output
    assert "- 1. X" in output
    assert "Practices not followed:" in output
    assert "1. [Rule 2] Y (line 5)" in output
    assert "code: x := 10 / y;" in output
    assert "reason: bad" in output
    assert "suggestion: fix" in output
    assert "Violation frequency:" in output
    assert "- Rule 2: 1" in output
    assert "Engine warnings:" not in output


def test_render_human_can_hide_followed_practices() -> None:
    state = ViewState(phase="success", report=build_report(END_TO_END_OUTPUT))
    output = click.unstyle(render_human(state, source=SOURCE, show_followed=False))
    assert "Practices followed:" not in output
    assert "Practices not followed:" in output


def test_render_human_shows_engine_warnings_and_catalog_names() -> None:
    raw = [
        {"status": "ERROR", "rule_no": 0, "rule_name": "", "reason": "Policy parse error"},
        {"status": "NOT_FOLLOWED", "rule_no": 4, "rule_name": ""},
    ]
    state = ViewState(phase="success", report=build_report(json.dumps(raw)))
    output = click.unstyle(render_human(state, source=""))
    assert "Engine warnings:" in output
    assert "- Policy parse error" in output
    assert "[Rule 4] Use PLC flags as integrity checks" in output
    assert "(line" not in output


def test_render_human_failure_keeps_previous_results() -> None:
    state = ViewState(
        phase="failure",
        report=build_report(END_TO_END_OUTPUT),
        error_kind="engine_threw",
        error_message="Analysis engine failed: boom",
    )
    output = click.unstyle(render_human(state, source=SOURCE))
    assert output.splitlines()[0] == "Analysis failed: Analysis engine failed: boom"
    assert "Compliance: 95%" in output


def test_render_human_without_results() -> None:
    assert render_human(ViewState()) == "No analysis results."


def test_render_json_has_stable_schema_keys() -> None:
    state = ViewState(phase="success", report=build_report(END_TO_END_OUTPUT))
    payload = json.loads(render_json(state, source=SOURCE, file_name="fb1.scl"))

    assert set(payload.keys()) == {
        "phase",
        "summary",
        "followed",
        "violations",
        "errors",
        "frequency",
        "error",
        "meta",
    }
    assert payload["phase"] == "success"
    assert payload["error"] is None
    assert payload["summary"] == {
        "total_rules": 20,
        "failed_rule_count": 1,
        "passed_rule_count": 19,
        "percent": 95,
        "failed_rule_numbers": [2],
    }
    assert set(payload["meta"].keys()) == {"generated_at", "file_name", "version"}
    assert payload["meta"]["file_name"] == "fb1.scl"
    assert payload["frequency"] == [{"rule_no": 2, "count": 1}]

    violation = payload["violations"][0]
    assert set(violation.keys()) == {
        "status",
        "rule_no",
        "rule_name",
        "line",
        "reason",
        "suggestion",
        "code",
    }
    assert violation["line"] == 5
    assert violation["code"] == "  x := 10 / y;"


def test_render_json_failure_without_results() -> None:
    state = ViewState(
        phase="failure",
        error_kind="engine_unavailable",
        error_message="Analysis engine module 'missing' could not be imported",
    )
    payload = json.loads(render_json(state))
    assert payload["summary"] is None
    assert payload["violations"] == []
    assert payload["error"] == {
        "kind": "engine_unavailable",
        "message": "Analysis engine module 'missing' could not be imported",
    }
