"""Analysis orchestration.

``build_report`` is the pure part: engine text in, report out. The
:class:`Orchestrator` wraps it around the asynchronous engine call and owns
the single :class:`~plc_lens.models.ViewState` that presentation reads.

Transitions::

    idle -> loading -> success | failure
    any  -> idle          (new source loaded, or reset)

A failed run keeps the previous report visible and overlays the error
message. The previous report also stays visible while a new run is loading.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from plc_lens.aggregate import compliance_summary, violation_frequency
from plc_lens.dedupe import dedupe_results
from plc_lens.engine import EngineBinding, invoke_engine
from plc_lens.errors import InputMissing, PipelineError
from plc_lens.ingest import DEFAULT_FILE_NAME, SourceDocument
from plc_lens.models import AnalysisOutcome, AnalysisReport, ViewState
from plc_lens.normalize import normalize_entries, parse_engine_output
from plc_lens.partition import partition_results

logger = logging.getLogger(__name__)

Listener = Callable[[ViewState], None]

INPUT_MISSING_MESSAGE = "Please load a source code file before analyzing."


def build_report(raw_text: Any) -> AnalysisReport:
    """Parse, normalize, dedupe, partition and aggregate engine output."""
    entries = parse_engine_output(raw_text)
    results = dedupe_results(normalize_entries(entries))
    result_set = partition_results(results)
    return AnalysisReport(
        result_set=result_set,
        summary=compliance_summary(result_set.violations),
        frequency=tuple(violation_frequency(result_set.violations)),
    )


class Orchestrator:
    """Coordinates one engine binding with the result transforms."""

    def __init__(self, engine: EngineBinding) -> None:
        self._engine = engine
        self._source: SourceDocument | None = None
        self._policy = ""
        self._state = ViewState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def source(self) -> SourceDocument | None:
        return self._source

    @property
    def policy(self) -> str:
        return self._policy

    def subscribe(self, listener: Listener) -> None:
        """Register a callable that receives every new view state."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def load_source(self, text: str, file_name: str | None = None) -> None:
        """Replace the source text; any previous results are discarded."""
        self._source = SourceDocument(text=text, file_name=file_name or DEFAULT_FILE_NAME)
        self._publish(ViewState())

    def set_policy(self, policy: str | None) -> None:
        self._policy = policy or ""

    def reset(self) -> None:
        """Clear source, policy and results."""
        self._source = None
        self._policy = ""
        self._publish(ViewState())

    async def analyze(self) -> AnalysisOutcome | None:
        """Run one analysis.

        Returns None without doing anything when a run is already in flight.
        Never raises: every failure is reported through the returned outcome
        and the published state.
        """
        if self._state.phase == "loading":
            logger.debug("Analyze ignored: a run is already in progress")
            return None

        if self._source is None or not self._source.text:
            error = InputMissing(INPUT_MISSING_MESSAGE)
            self._publish(
                ViewState(
                    phase="idle",
                    report=self._state.report,
                    error_kind=error.kind,
                    error_message=error.message,
                )
            )
            return AnalysisOutcome(error_kind=error.kind, error_message=error.message)

        source = self._source
        previous = self._state.report
        self._publish(ViewState(phase="loading", report=previous))

        try:
            analyze_fn = await self._engine.load()
            raw_text = await invoke_engine(analyze_fn, source.text, self._policy, source.file_name)
            report = build_report(raw_text)
        except PipelineError as exc:
            logger.warning("Analysis of %s failed (%s): %s", source.file_name, exc.kind, exc)
            self._publish(
                ViewState(
                    phase="failure",
                    report=previous,
                    error_kind=exc.kind,
                    error_message=exc.message,
                )
            )
            return AnalysisOutcome(error_kind=exc.kind, error_message=exc.message)
        except Exception as exc:
            logger.exception("Unexpected error while analyzing %s", source.file_name)
            message = f"Analysis failed unexpectedly: {str(exc).strip() or type(exc).__name__}"
            self._publish(
                ViewState(
                    phase="failure",
                    report=previous,
                    error_kind="engine_threw",
                    error_message=message,
                )
            )
            return AnalysisOutcome(error_kind="engine_threw", error_message=message)

        logger.debug(
            "Analysis of %s finished: %d followed, %d violations, %d errors",
            source.file_name,
            len(report.result_set.followed),
            len(report.result_set.violations),
            len(report.result_set.errors),
        )
        self._publish(ViewState(phase="success", report=report))
        return AnalysisOutcome(report=report)

    def _publish(self, state: ViewState) -> None:
        logger.debug("View state: %s -> %s", self._state.phase, state.phase)
        self._state = state
        for listener in list(self._listeners):
            listener(state)
