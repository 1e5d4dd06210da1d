"""CLI entrypoint for plc-lens."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from plc_lens import __version__
from plc_lens.catalog import TOTAL_RULES, list_rule_info
from plc_lens.config import AppConfig, default_config_template, load_app_config
from plc_lens.engine import ModuleEngine
from plc_lens.errors import UnsupportedSourceFile
from plc_lens.ingest import SUPPORTED_EXTENSIONS, read_policy, read_source
from plc_lens.logging_config import setup_logging
from plc_lens.output import render_human, render_json
from plc_lens.pipeline import Orchestrator

logger = logging.getLogger(__name__)

EXIT_BELOW_THRESHOLD = 1
EXIT_ANALYSIS_FAILED = 2

app = typer.Typer(
    name="plc-lens",
    no_args_is_help=True,
    help="Check PLC source against secure coding practices.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logs.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only log errors.")] = False,
) -> None:
    """Root command callback."""
    _ = version
    setup_logging(verbose=verbose, quiet=quiet)


@app.command("check")
def check_command(
    source_file: Annotated[
        Path,
        typer.Argument(
            help="PLC source file (.scl, .st, .xml, .il or .awl).",
            exists=True,
            dir_okay=False,
        ),
    ],
    policy: Annotated[Path | None, typer.Option(help="Path to policy JSON file.")] = None,
    project: Annotated[Path, typer.Option(help="Project directory for config lookup.")] = Path(
        "."
    ),
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    fail_below: Annotated[
        int | None,
        typer.Option(help="Exit nonzero if compliance percent is below this value."),
    ] = None,
    engine: Annotated[
        str | None, typer.Option("--engine", help="Python module providing the engine.")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Analyze a PLC source file and report rule compliance."""
    app_config = _load_config_or_raise(project, config_file)
    output_format = (format or app_config.format).lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    try:
        document = read_source(source_file)
    except UnsupportedSourceFile as exc:
        raise typer.BadParameter(str(exc), param_hint="SOURCE_FILE") from exc

    policy_text = _resolve_policy_text(policy, project=project, app_config=app_config)

    orchestrator = Orchestrator(_engine_binding(app_config, engine))
    orchestrator.load_source(document.text, document.file_name)
    orchestrator.set_policy(policy_text)
    outcome = asyncio.run(orchestrator.analyze())
    state = orchestrator.state

    if output_format == "json":
        typer.echo(render_json(state, source=document.text, file_name=document.file_name))
    else:
        typer.echo(
            render_human(
                state,
                source=document.text,
                show_followed=app_config.show_followed,
            )
        )

    if outcome is None or not outcome.ok:
        raise typer.Exit(code=EXIT_ANALYSIS_FAILED)

    threshold = fail_below if fail_below is not None else app_config.fail_below
    summary = state.summary
    if threshold is not None and summary is not None and summary.percent < threshold:
        logger.info("Compliance %d%% is below threshold %d%%", summary.percent, threshold)
        raise typer.Exit(code=EXIT_BELOW_THRESHOLD)


@app.command("rules")
def rules_command(
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """List the secure coding practices in the rule catalog."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    rule_info = list_rule_info()
    if output_format == "json":
        payload = {
            "rules": [
                {"rule_no": item.rule_no, "name": item.name, "description": item.description}
                for item in rule_info
            ],
            "total_rules": TOTAL_RULES,
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [f"Rule catalog ({TOTAL_RULES} rules):"]
    for item in rule_info:
        lines.append(f"{item.rule_no:>2}. {item.name} - {item.description}")
    lines.append("Supported source files: " + ", ".join(f".{ext}" for ext in SUPPORTED_EXTENSIONS))
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    project: Annotated[Path, typer.Option(help="Project directory for config lookup.")] = Path(
        "."
    ),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    payload = _load_config_or_raise(project, config_file).to_dict()
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- fail_below: {payload['fail_below']}",
        f"- policy: {payload['policy']}",
        f"- show_followed: {payload['show_followed']}",
        f"- engine.module: {payload['engine']['module']}",
        f"- engine.functions: {payload['engine']['functions']}",
        f"- engine.init: {payload['engine']['init']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".plc-lens.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(project: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(project, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _resolve_policy_text(policy: Path | None, *, project: Path, app_config: AppConfig) -> str:
    if policy is None and app_config.policy is None:
        return ""

    if policy is not None:
        policy_path = policy
    else:
        configured = Path(app_config.policy or "")
        policy_path = configured if configured.is_absolute() else project / configured

    try:
        return read_policy(policy_path)
    except OSError as exc:
        raise typer.BadParameter(
            f"Cannot read policy file {policy_path}: {exc}", param_hint="--policy"
        ) from exc


def _engine_binding(app_config: AppConfig, module_override: str | None) -> ModuleEngine:
    engine_config = app_config.engine
    return ModuleEngine(
        module_override or engine_config.module,
        functions=tuple(engine_config.functions),
        init=engine_config.init,
    )
