"""Tests for source and policy ingestion."""

from __future__ import annotations

from pathlib import Path

import pytest

from plc_lens.errors import UnsupportedSourceFile
from plc_lens.ingest import is_supported_file, read_policy, read_source


def test_supported_extensions_are_case_insensitive() -> None:
    for name in ("main.scl", "main.ST", "project.xml", "block.il", "LEGACY.AWL"):
        assert is_supported_file(name)


def test_unsupported_extensions_are_rejected() -> None:
    for name in ("main.py", "scl", "main.scl.bak", "README"):
        assert not is_supported_file(name)


def test_read_source_returns_text_and_file_name(tmp_path: Path) -> None:
    path = tmp_path / "Motor.scl"
    path.write_text("FUNCTION FC1 : VOID\nEND_FUNCTION\n", encoding="utf-8")

    document = read_source(path)
    assert document.file_name == "Motor.scl"
    assert document.text.startswith("FUNCTION FC1")


def test_read_source_rejects_unsupported_file(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")
    with pytest.raises(UnsupportedSourceFile, match="Unsupported file type: notes.txt"):
        read_source(path)


def test_read_policy_is_verbatim(tmp_path: Path) -> None:
    text = '{ "pairs": [["Motor_Fwd","Motor_Rev"]], "memory_areas": [] , "extra": 1 }\n'
    path = tmp_path / "policy.json"
    path.write_text(text, encoding="utf-8")
    assert read_policy(path) == text
