"""Configuration loading for plc-lens."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from plc_lens.engine import DEFAULT_FUNCTION_NAMES, DEFAULT_INIT_NAME

CONFIG_FILENAMES = (".plc-lens.toml", "plc-lens.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("plc_lens", "plc-lens")

DEFAULT_ENGINE_MODULE = "plc_secure_checker"


@dataclass(slots=True)
class EngineConfig:
    """Where to find the rule-checking engine."""

    module: str = DEFAULT_ENGINE_MODULE
    functions: list[str] = field(default_factory=lambda: list(DEFAULT_FUNCTION_NAMES))
    init: str | None = DEFAULT_INIT_NAME

    def to_dict(self) -> dict[str, Any]:
        return {
            "module": self.module,
            "functions": list(self.functions),
            "init": self.init,
        }


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "human"
    fail_below: int | None = None
    policy: str | None = None
    show_followed: bool = True
    engine: EngineConfig = field(default_factory=EngineConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "fail_below": self.fail_below,
            "policy": self.policy,
            "show_followed": self.show_followed,
            "engine": self.engine.to_dict(),
            "source": self.source,
        }


def load_app_config(directory: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from an explicit path or directory-local files with precedence."""
    directory = directory.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (directory / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = directory / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = directory / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'format = "human"',
            "# Exit nonzero when compliance drops below this percentage.",
            "fail_below = 80",
            '# policy = "policy.json"',
            "show_followed = true",
            "",
            "[engine]",
            f'module = "{DEFAULT_ENGINE_MODULE}"',
            'functions = ["check_plc_code", "checkPlcCode"]',
            'init = "init"',
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    engine_mapping = _as_table(mapping.get("engine"), "engine")

    raw_format = mapping.get("format", "human")
    format_value = str(raw_format).lower()
    if format_value not in {"human", "json"}:
        format_value = "human"

    raw_fail = mapping.get("fail_below")
    if raw_fail is None:
        fail_value: int | None = None
    else:
        fail_value = _as_int(raw_fail, "fail_below")
        if not 0 <= fail_value <= 100:
            raise ValueError("fail_below must be between 0 and 100")

    raw_policy = mapping.get("policy")
    policy = None if raw_policy is None else _as_str(raw_policy, "policy")

    return AppConfig(
        format=format_value,
        fail_below=fail_value,
        policy=policy,
        show_followed=_as_bool(mapping.get("show_followed", True), "show_followed"),
        engine=_parse_engine_config(engine_mapping),
        source=source,
    )


def _parse_engine_config(value: dict[str, Any]) -> EngineConfig:
    module = _as_str(value.get("module", DEFAULT_ENGINE_MODULE), "engine.module").strip()
    if not module:
        raise ValueError("engine.module must not be empty")

    functions = _as_str_list(value.get("functions"), "engine.functions")
    raw_init = value.get("init", DEFAULT_INIT_NAME)
    init = None if raw_init in (None, "") else _as_str(raw_init, "engine.init")

    return EngineConfig(
        module=module,
        functions=functions or list(DEFAULT_FUNCTION_NAMES),
        init=init,
    )


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{field_name} must be a list of strings")
        items.append(item)
    return items


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw


def _as_bool(raw: Any, field_name: str) -> bool:
    if not isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return raw
