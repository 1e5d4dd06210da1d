"""Status partitioning and violation ordering."""

from __future__ import annotations

from typing import Iterable

from plc_lens.models import NormalizedResult, ResultSet


def partition_results(results: Iterable[NormalizedResult]) -> ResultSet:
    """Split results by status; only the violations are reordered."""
    followed: list[NormalizedResult] = []
    violations: list[NormalizedResult] = []
    errors: list[NormalizedResult] = []
    for result in results:
        if result.is_followed:
            followed.append(result)
        elif result.is_violation:
            violations.append(result)
        else:
            errors.append(result)

    return ResultSet(
        followed=tuple(followed),
        violations=tuple(sort_violations(violations)),
        errors=tuple(errors),
    )


def sort_violations(violations: Iterable[NormalizedResult]) -> list[NormalizedResult]:
    """Order by line (missing last), then rule number; stable beyond that."""
    return sorted(violations, key=_violation_sort_key)


def _violation_sort_key(result: NormalizedResult) -> tuple[bool, int, int]:
    return (result.line is None, result.line or 0, result.rule_no)
