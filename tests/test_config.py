"""Tests for config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from plc_lens.config import AppConfig, default_config_template, load_app_config


def test_defaults_when_no_config_present(tmp_path: Path) -> None:
    config = load_app_config(tmp_path)
    assert config == AppConfig()
    assert config.engine.module == "plc_secure_checker"
    assert config.engine.functions == ["check_plc_code", "checkPlcCode"]
    assert config.source is None


def test_dot_file_wins_over_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "\n".join(["[tool.plc_lens]", 'format = "human"', "fail_below = 50"]),
        encoding="utf-8",
    )
    (tmp_path / ".plc-lens.toml").write_text(
        "\n".join(
            [
                'format = "json"',
                "fail_below = 85",
                'policy = "policy.json"',
                "show_followed = false",
                "",
                "[engine]",
                'module = "vendor.checker"',
                'functions = ["run_checks"]',
                'init = ""',
            ]
        ),
        encoding="utf-8",
    )

    config = load_app_config(tmp_path)
    assert config.format == "json"
    assert config.fail_below == 85
    assert config.policy == "policy.json"
    assert config.show_followed is False
    assert config.engine.module == "vendor.checker"
    assert config.engine.functions == ["run_checks"]
    assert config.engine.init is None
    assert config.source == str(tmp_path.resolve() / ".plc-lens.toml")


def test_reads_pyproject_hyphenated_key(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "\n".join(["[tool.plc-lens]", "fail_below = 70"]),
        encoding="utf-8",
    )
    config = load_app_config(tmp_path)
    assert config.fail_below == 70
    assert config.source == str(tmp_path.resolve() / "pyproject.toml")


def test_pyproject_without_tool_section_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")
    assert load_app_config(tmp_path).source is None


def test_explicit_config_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Config file does not exist"):
        load_app_config(tmp_path, config_path=Path("missing.toml"))


def test_unknown_format_falls_back_to_human(tmp_path: Path) -> None:
    (tmp_path / "plc-lens.toml").write_text('format = "xml"\n', encoding="utf-8")
    assert load_app_config(tmp_path).format == "human"


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ('fail_below = "high"', "fail_below must be an integer"),
        ("fail_below = 150", "fail_below must be between 0 and 100"),
        ("show_followed = 1", "show_followed must be a boolean"),
        ("policy = 3", "policy must be a string"),
        ('engine = "plc"', "engine must be a table/object"),
        ('[engine]\nmodule = ""', "engine.module must not be empty"),
        ("[engine]\nfunctions = [1]", "engine.functions must be a list of strings"),
        ("format = [", "Invalid TOML"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".plc-lens.toml").write_text(content + "\n", encoding="utf-8")
    with pytest.raises(ValueError, match=message):
        load_app_config(tmp_path)


def test_default_template_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "starter.toml"
    path.write_text(default_config_template(), encoding="utf-8")
    config = load_app_config(tmp_path, config_path=path)
    assert config.fail_below == 80
    assert config.policy is None
    assert config.engine.init == "init"
