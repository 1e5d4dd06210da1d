"""Bindings to the external rule-checking engine."""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
from collections.abc import Callable
from types import ModuleType
from typing import Any, Protocol

from plc_lens.errors import EngineThrew, EngineUnavailable

logger = logging.getLogger(__name__)

AnalyzeFn = Callable[[str, str, str], Any]

DEFAULT_FUNCTION_NAMES = ("check_plc_code", "checkPlcCode")
DEFAULT_INIT_NAME = "init"


class EngineBinding(Protocol):
    """Source of the engine's analyze callable."""

    async def load(self) -> AnalyzeFn:
        """Initialize the engine if needed and return its analyze callable."""


class CallableEngine:
    """Binding for an analyze callable that is already in process."""

    def __init__(self, fn: AnalyzeFn | None) -> None:
        self._fn = fn

    async def load(self) -> AnalyzeFn:
        if not callable(self._fn):
            raise EngineUnavailable("Analysis engine function is not callable.")
        return self._fn


class ModuleEngine:
    """Binding that imports the engine from a Python module.

    Initialization imports the module and runs its optional initializer once;
    later calls to :meth:`load` reuse the result.
    """

    def __init__(
        self,
        module: str,
        *,
        functions: tuple[str, ...] = DEFAULT_FUNCTION_NAMES,
        init: str | None = DEFAULT_INIT_NAME,
    ) -> None:
        self.module = module
        self.functions = tuple(functions)
        self.init = init
        self._loaded: ModuleType | None = None
        self._lock = asyncio.Lock()

    async def load(self) -> AnalyzeFn:
        module = await self._initialize()
        for name in self.functions:
            candidate = getattr(module, name, None)
            if callable(candidate):
                logger.debug("Resolved engine function %s.%s", self.module, name)
                return candidate

        expected = " or ".join(self.functions) or "<none>"
        raise EngineUnavailable(
            f"Analysis engine function {expected} was not found in module "
            f"'{self.module}'. Make sure the engine bindings are built and installed."
        )

    async def _initialize(self) -> ModuleType:
        async with self._lock:
            if self._loaded is not None:
                return self._loaded

            try:
                module = await asyncio.to_thread(importlib.import_module, self.module)
            except Exception as exc:
                raise EngineUnavailable(
                    f"Analysis engine module '{self.module}' could not be imported: {exc}"
                ) from exc

            initializer = getattr(module, self.init, None) if self.init else None
            if callable(initializer):
                logger.debug("Initializing engine module %s", self.module)
                try:
                    outcome = initializer()
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception as exc:
                    raise EngineUnavailable(
                        f"Analysis engine module '{self.module}' failed to initialize: {exc}"
                    ) from exc

            self._loaded = module
            return module


async def invoke_engine(fn: AnalyzeFn, source: str, policy: str, file_name: str) -> Any:
    """Run the analyze callable without blocking the event loop."""
    try:
        if inspect.iscoroutinefunction(fn):
            return await fn(source, policy, file_name)
        outcome = await asyncio.to_thread(fn, source, policy, file_name)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome
    except Exception as exc:
        detail = str(exc).strip() or type(exc).__name__
        raise EngineThrew(f"Analysis engine failed: {detail}") from exc
