"""Source and policy file ingestion."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from plc_lens.errors import UnsupportedSourceFile

SUPPORTED_EXTENSIONS = ("scl", "st", "xml", "il", "awl")
DEFAULT_FILE_NAME = "uploaded.scl"


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """PLC source text together with the file name the engine dispatches on."""

    text: str
    file_name: str = DEFAULT_FILE_NAME


def is_supported_file(file_name: str) -> bool:
    """Return True when the extension is one the engine can parse."""
    _, dot, extension = file_name.rpartition(".")
    return bool(dot) and extension.lower() in SUPPORTED_EXTENSIONS


def read_source(path: Path) -> SourceDocument:
    """Read a PLC source file after checking its extension."""
    if not is_supported_file(path.name):
        allowed = ", ".join(f".{ext}" for ext in SUPPORTED_EXTENSIONS)
        raise UnsupportedSourceFile(
            f"Unsupported file type: {path.name}. Expected one of: {allowed}"
        )
    text = path.read_text(encoding="utf-8", errors="replace")
    return SourceDocument(text=text, file_name=path.name)


def read_policy(path: Path) -> str:
    """Read policy JSON text verbatim; the engine owns its validation."""
    return path.read_text(encoding="utf-8")
