"""Static catalog of the secure PLC coding practices evaluated by the engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and display."""

    rule_no: int
    name: str
    description: str


RULE_CATALOG: tuple[RuleInfo, ...] = (
    RuleInfo(1, "Modularize PLC Code", "Use FC/FB/OB separation; avoid monolithic logic."),
    RuleInfo(2, "Track operating modes", "Gate risky actions on RUN/STOP/STARTUP states."),
    RuleInfo(
        3,
        "Validate and alert for paired I/O",
        "Never drive conflicting outputs simultaneously.",
    ),
    RuleInfo(
        4,
        "Use PLC flags as integrity checks",
        "Guard divisions with SW.OV/SW.OS and divisor<>0.",
    ),
    RuleInfo(
        5,
        "Use checksum integrity checks",
        "Compute and verify checksums where data integrity matters.",
    ),
    RuleInfo(
        6,
        "Validate timers and counters",
        "Range-check externally set presets and parameters.",
    ),
    RuleInfo(
        7,
        "Validate paired inputs/outputs",
        "Mutual exclusion on forward/reverse or open/close pairs.",
    ),
    RuleInfo(
        8,
        "Validate HMI input variables",
        "Sanitize HMI/DB values with plausibility checks.",
    ),
    RuleInfo(9, "Validate indirections", "Bounds-check array and indirect memory access."),
    RuleInfo(
        10,
        "Assign designated register blocks",
        "Writes only to policy-allowed memory regions.",
    ),
    RuleInfo(
        11,
        "Plausibility Checks",
        "Document plausibility with inline comments before use.",
    ),
    RuleInfo(
        12,
        "Document critical assumptions",
        "Attach context/assumptions before critical operations.",
    ),
    RuleInfo(13, "Alarm escalation path", "Escalate persistent alarms instead of silencing."),
    RuleInfo(14, "Fail-safe defaults", "Default outputs to safe states during uncertainty."),
    RuleInfo(
        15,
        "Define a safe restart state",
        "Use OB100 to reset to a secure, deterministic baseline.",
    ),
    RuleInfo(
        16,
        "Summarize PLC cycle times",
        "Record scan/cycle time to detect overloads/regressions.",
    ),
    RuleInfo(17, "Log PLC uptime", "Record uptime for diagnostics and duty-cycle analysis."),
    RuleInfo(
        18,
        "Log PLC hard stops",
        "Use OB121/OB82/OB86 to capture faults and program errors.",
    ),
    RuleInfo(19, "Monitor PLC memory usage", "Track memory usage trends to avoid overflows."),
    RuleInfo(20, "Trap false alerts", "Debounce/validate alarms to reduce noise and flapping."),
)

# Denominator of the compliance percentage. Fixed by the catalog, not by
# how many results the engine happens to report.
TOTAL_RULES = len(RULE_CATALOG)

_BY_NUMBER = {info.rule_no: info for info in RULE_CATALOG}


def list_rule_info() -> list[RuleInfo]:
    """Return catalog entries ordered by rule number."""
    return sorted(RULE_CATALOG, key=lambda item: item.rule_no)


def rule_info(rule_no: int) -> RuleInfo | None:
    """Look up a catalog entry by rule number."""
    return _BY_NUMBER.get(rule_no)
