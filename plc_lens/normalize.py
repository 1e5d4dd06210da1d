"""Engine output decoding and result normalization.

The engine reports results in two shapes: flat records carrying
``line``/``reason``/``suggestion`` directly, and nested records that keep
them under a ``violation`` object. Both are collapsed into
:class:`~plc_lens.models.NormalizedResult` here; nothing downstream looks at
the raw shape again.
"""

from __future__ import annotations

import json
from typing import Any

from plc_lens.errors import MalformedOutput
from plc_lens.models import (
    STATUS_ERROR,
    STATUS_NOT_FOLLOWED,
    STATUS_OK,
    NormalizedResult,
    Status,
)

RawEntry = dict[str, Any]

_STATUS_ALIASES: dict[str, Status] = {
    "OK": STATUS_OK,
    "NOT_FOLLOWED": STATUS_NOT_FOLLOWED,
    "NOT FOLLOWED": STATUS_NOT_FOLLOWED,
    "ERROR": STATUS_ERROR,
}

_DETAIL_FIELDS = ("line", "reason", "suggestion")


def parse_engine_output(text: Any) -> list[RawEntry]:
    """Decode raw engine text into a list of untyped entries."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    if not isinstance(text, str):
        raise MalformedOutput(
            f"Analysis engine returned {type(text).__name__}, expected JSON text."
        )

    try:
        decoded = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise MalformedOutput(f"Analysis engine returned invalid JSON: {exc}") from exc

    if isinstance(decoded, dict) and "error" in decoded:
        raise MalformedOutput(f"Analysis engine reported an error: {decoded['error']}")
    if not isinstance(decoded, list):
        raise MalformedOutput(
            f"Analysis engine returned a JSON {_json_type(decoded)}, expected an array."
        )
    return decoded


def normalize_entries(entries: list[Any]) -> list[NormalizedResult]:
    """Convert raw entries to canonical results, one-to-one and in order."""
    return [normalize_entry(entry, index=index) for index, entry in enumerate(entries)]


def normalize_entry(entry: Any, *, index: int = 0) -> NormalizedResult:
    """Convert one raw entry, lifting nested violation details to the top level."""
    if not isinstance(entry, dict):
        raise MalformedOutput(f"Result #{index} is a {_json_type(entry)}, expected an object.")

    status = _parse_status(entry.get("status"), index=index)

    details: dict[str, Any] = {name: entry.get(name) for name in _DETAIL_FIELDS}
    nested = entry.get("violation")
    if nested is not None:
        if not isinstance(nested, dict):
            raise MalformedOutput(f"Result #{index} has a non-object 'violation' field.")
        details = {name: nested.get(name) for name in _DETAIL_FIELDS}

    return NormalizedResult(
        status=status,
        rule_no=_parse_rule_no(entry.get("rule_no"), status=status, index=index),
        rule_name=_as_text(entry.get("rule_name")) or "",
        line=_parse_line(details["line"]),
        reason=_as_text(details["reason"]),
        suggestion=_as_text(details["suggestion"]),
    )


def _parse_status(raw: Any, *, index: int) -> Status:
    if not isinstance(raw, str):
        raise MalformedOutput(f"Result #{index} has no status.")
    status = _STATUS_ALIASES.get(raw.strip().upper())
    if status is None:
        raise MalformedOutput(f"Result #{index} has unknown status {raw!r}.")
    return status


def _parse_rule_no(raw: Any, *, status: Status, index: int) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().isdecimal():
        return int(raw.strip())
    # Policy and parse errors are not tied to a catalog rule.
    if raw is None and status == STATUS_ERROR:
        return 0
    raise MalformedOutput(f"Result #{index} has an invalid rule_no: {raw!r}.")


def _parse_line(raw: Any) -> int | None:
    if isinstance(raw, int) and not isinstance(raw, bool) and raw > 0:
        return raw
    return None


def _as_text(raw: Any) -> str | None:
    if raw is None:
        return None
    return raw if isinstance(raw, str) else str(raw)


def _json_type(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if value is None:
        return "null"
    return "number"
