"""Error taxonomy for the analysis pipeline."""

from __future__ import annotations

from plc_lens.models import ErrorKind


class PipelineError(RuntimeError):
    """Base class for fatal analysis-run errors."""

    kind: ErrorKind = "malformed_output"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputMissing(PipelineError):
    """Raised when analysis is requested without loaded source text."""

    kind: ErrorKind = "input_missing"


class EngineUnavailable(PipelineError):
    """Raised when the engine failed to initialize or lacks its entry point."""

    kind: ErrorKind = "engine_unavailable"


class EngineThrew(PipelineError):
    """Raised when the engine call itself failed."""

    kind: ErrorKind = "engine_threw"


class MalformedOutput(PipelineError):
    """Raised when engine output is not a JSON array of result records."""

    kind: ErrorKind = "malformed_output"


class UnsupportedSourceFile(ValueError):
    """Raised when a source file has an extension the engine cannot parse."""
