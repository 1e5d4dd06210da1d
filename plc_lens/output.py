"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from plc_lens import __version__
from plc_lens.catalog import rule_info
from plc_lens.models import ComplianceSummary, NormalizedResult, ViewState
from plc_lens.source_lines import resolve_line, source_lines


def render_human(
    state: ViewState,
    *,
    source: str = "",
    show_followed: bool = True,
) -> str:
    """Render a compact colorized report."""
    lines: list[str] = []
    if state.error_message:
        lines.append(click.style(f"Analysis failed: {state.error_message}", fg="red", bold=True))

    result_set = state.result_set
    summary = state.summary
    if result_set is None or summary is None:
        if not lines:
            lines.append("No analysis results.")
        return "\n".join(lines)

    label, color = _compliance_severity(summary)
    lines.append(
        click.style(
            f"Compliance: {summary.percent}% "
            f"({summary.passed_rule_count}/{summary.total_rules} rules passed, "
            f"{summary.failed_rule_count} failed) ({label})",
            fg=color,
            bold=True,
        )
    )

    if show_followed and result_set.followed:
        lines.append(click.style("Practices followed:", bold=True))
        for result in result_set.followed:
            lines.append(f"- {result.rule_no}. {_rule_name(result)}")

    if result_set.violations:
        split_source = source_lines(source)
        lines.append(click.style("Practices not followed:", bold=True))
        for index, result in enumerate(result_set.violations, start=1):
            location = f" (line {result.line})" if result.line is not None else ""
            lines.append(f"{index}. [Rule {result.rule_no}] {_rule_name(result)}{location}")
            code = resolve_line(split_source, result.line)
            if code is not None:
                lines.append(f"   code: {code.strip()}")
            if result.reason:
                lines.append(f"   reason: {result.reason}")
            if result.suggestion:
                lines.append(f"   suggestion: {result.suggestion}")

    if result_set.errors:
        lines.append(click.style("Engine warnings:", fg="yellow", bold=True))
        for result in result_set.errors:
            detail = result.reason or result.rule_name or "unspecified error"
            lines.append(f"- {detail}")

    if state.frequency:
        lines.append(click.style("Violation frequency:", bold=True))
        for entry in state.frequency:
            lines.append(f"- {entry.label}: {entry.count}")

    return "\n".join(lines)


def render_json(state: ViewState, *, source: str = "", file_name: str | None = None) -> str:
    """Render stable JSON output for CI and automation."""
    payload = build_json_payload(state, source=source, file_name=file_name)
    return json.dumps(payload, sort_keys=True)


def build_json_payload(
    state: ViewState,
    *,
    source: str = "",
    file_name: str | None = None,
) -> dict[str, Any]:
    """Build stable JSON payload for CI and automation."""
    meta: dict[str, Any] = {
        "generated_at": datetime.now(tz=UTC)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z"),
        "file_name": file_name,
        "version": __version__,
    }
    error = (
        {"kind": state.error_kind, "message": state.error_message}
        if state.error_message
        else None
    )

    result_set = state.result_set
    summary = state.summary
    if result_set is None or summary is None:
        return {
            "phase": state.phase,
            "summary": None,
            "followed": [],
            "violations": [],
            "errors": [],
            "frequency": [],
            "error": error,
            "meta": meta,
        }

    split_source = source_lines(source)
    return {
        "phase": state.phase,
        "summary": summary.to_dict(),
        "followed": [item.to_dict() for item in result_set.followed],
        "violations": [
            _serialize_violation(item, split_source) for item in result_set.violations
        ],
        "errors": [item.to_dict() for item in result_set.errors],
        "frequency": [entry.to_dict() for entry in state.frequency or ()],
        "error": error,
        "meta": meta,
    }


def _serialize_violation(result: NormalizedResult, split_source: list[str]) -> dict[str, Any]:
    payload = result.to_dict()
    payload["code"] = resolve_line(split_source, result.line)
    return payload


def _rule_name(result: NormalizedResult) -> str:
    if result.rule_name:
        return result.rule_name
    info = rule_info(result.rule_no)
    return info.name if info is not None else "Unknown rule"


def _compliance_severity(summary: ComplianceSummary) -> tuple[str, str]:
    if summary.percent >= 80:
        return ("GOOD", "green")
    if summary.percent >= 50:
        return ("FAIR", "yellow")
    return ("POOR", "red")
