"""Result and view-state models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Status = Literal["OK", "NOT_FOLLOWED", "ERROR"]
Phase = Literal["idle", "loading", "success", "failure"]
ErrorKind = Literal["input_missing", "engine_unavailable", "engine_threw", "malformed_output"]

STATUS_OK: Status = "OK"
STATUS_NOT_FOLLOWED: Status = "NOT_FOLLOWED"
STATUS_ERROR: Status = "ERROR"


@dataclass(frozen=True, slots=True)
class NormalizedResult:
    """A single rule evaluation result in canonical shape."""

    status: Status
    rule_no: int
    rule_name: str
    line: int | None = None
    reason: str | None = None
    suggestion: str | None = None

    @property
    def is_followed(self) -> bool:
        return self.status == STATUS_OK

    @property
    def is_violation(self) -> bool:
        return self.status == STATUS_NOT_FOLLOWED

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "rule_no": self.rule_no,
            "rule_name": self.rule_name,
            "line": self.line,
            "reason": self.reason,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Results partitioned by status; violations are sorted."""

    followed: tuple[NormalizedResult, ...] = ()
    violations: tuple[NormalizedResult, ...] = ()
    errors: tuple[NormalizedResult, ...] = ()

    def __len__(self) -> int:
        return len(self.followed) + len(self.violations) + len(self.errors)


@dataclass(frozen=True, slots=True)
class ComplianceSummary:
    """Passed/failed rule counts against the static rule catalog."""

    total_rules: int
    failed_rule_count: int
    passed_rule_count: int
    percent: int
    failed_rule_numbers: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rules": self.total_rules,
            "failed_rule_count": self.failed_rule_count,
            "passed_rule_count": self.passed_rule_count,
            "percent": self.percent,
            "failed_rule_numbers": list(self.failed_rule_numbers),
        }


@dataclass(frozen=True, slots=True)
class FrequencyEntry:
    """Number of violations reported for one rule."""

    rule_no: int
    count: int

    @property
    def label(self) -> str:
        return f"Rule {self.rule_no}"

    def to_dict(self) -> dict[str, Any]:
        return {"rule_no": self.rule_no, "count": self.count}


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Everything derived from one completed engine run."""

    result_set: ResultSet
    summary: ComplianceSummary
    frequency: tuple[FrequencyEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ViewState:
    """The single record presentation reads from.

    A new instance is published on every transition; instances are never
    mutated.
    """

    phase: Phase = "idle"
    report: AnalysisReport | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def result_set(self) -> ResultSet | None:
        return self.report.result_set if self.report is not None else None

    @property
    def summary(self) -> ComplianceSummary | None:
        return self.report.summary if self.report is not None else None

    @property
    def frequency(self) -> tuple[FrequencyEntry, ...] | None:
        return self.report.frequency if self.report is not None else None


@dataclass(frozen=True, slots=True)
class AnalysisOutcome:
    """Explicit success/failure result of one analyze trigger."""

    report: AnalysisReport | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None and self.report is not None
