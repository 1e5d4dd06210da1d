"""Map violation line numbers back to source text."""

from __future__ import annotations

from re import compile

NEWLINE_RE = compile(r"\r\n|\r|\n")


def source_lines(source: str) -> list[str]:
    """Split source text on any newline convention."""
    return NEWLINE_RE.split(source)


def resolve_line(source: str | list[str], line: int | None) -> str | None:
    """Return the text of 1-based ``line``, or None when it is out of range."""
    if line is None or isinstance(line, bool) or line <= 0:
        return None
    lines = source_lines(source) if isinstance(source, str) else source
    if line > len(lines):
        return None
    return lines[line - 1]
