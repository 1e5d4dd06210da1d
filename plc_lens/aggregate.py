"""Compliance summary and violation-frequency aggregation.

The compliance denominator is the size of the static rule catalog, not the
number of results the engine reports: a rule the engine skipped counts as
passed. A rule with several violations counts once toward the failed total
but every instance counts in the frequency table.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Iterable

from plc_lens.catalog import TOTAL_RULES
from plc_lens.models import ComplianceSummary, FrequencyEntry, NormalizedResult


def compliance_summary(
    violations: Iterable[NormalizedResult],
    *,
    total_rules: int = TOTAL_RULES,
) -> ComplianceSummary:
    """Count distinct failed rules and derive the compliance percentage."""
    failed_rules = sorted({item.rule_no for item in violations})
    failed_count = len(failed_rules)
    passed_count = max(0, total_rules - failed_count)

    if total_rules <= 0:
        percent = 0
    else:
        percent = _round_half_up(passed_count / total_rules * 100)

    return ComplianceSummary(
        total_rules=total_rules,
        failed_rule_count=failed_count,
        passed_rule_count=passed_count,
        percent=percent,
        failed_rule_numbers=tuple(failed_rules),
    )


def violation_frequency(violations: Iterable[NormalizedResult]) -> list[FrequencyEntry]:
    """Count violations per rule, most frequent first, ties by rule number."""
    counts = Counter(item.rule_no for item in violations)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [FrequencyEntry(rule_no=rule_no, count=count) for rule_no, count in ranked]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
