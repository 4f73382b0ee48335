from __future__ import annotations

import dataclasses
from functools import partial
from pathlib import Path
from typing import Annotated

import typer

from covgate._meta import logger
from covgate.api import run_check
from covgate.cli._shared import resolve_use_color
from covgate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_SOFTWARE,
    EXIT_THRESHOLD,
)
from covgate.config import CheckConfig, load_config
from covgate.errors import ConfigError, CoverageDataError, CoverageInputNotFoundError
from covgate.inputs import load_dataset, resolve_coverage_paths
from covgate.model.thresholds import parse_threshold_expression
from covgate.model.violations import EvaluationResult


def _apply_overrides(
    config: CheckConfig,
    *,
    global_expr: str | None,
    each_expr: str | None,
    exclude: list[str],
    base_path: str | None,
    reporters: list[str],
    color: bool,
    no_color: bool,
) -> CheckConfig:
    thresholds = config.thresholds
    if global_expr is not None:
        thresholds = dataclasses.replace(thresholds, global_rule=parse_threshold_expression(global_expr))
    if each_expr is not None:
        thresholds = dataclasses.replace(thresholds, each_rule=parse_threshold_expression(each_expr))

    return dataclasses.replace(
        config,
        thresholds=thresholds,
        base_path=config.base_path if base_path is None else base_path,
        reporters=tuple(reporters) if reporters else config.reporters,
        excludes=(*config.excludes, *exclude),
        colors=resolve_use_color(color=color, no_color=no_color, color_allowed=config.colors),
    )


def _run(
    *,
    coverage: list[Path],
    config_file: Path | None,
    global_expr: str | None,
    each_expr: str | None,
    exclude: list[str],
    base_path: str | None,
    reporters: list[str],
    color: bool,
    no_color: bool,
) -> EvaluationResult:
    cwd = Path.cwd()
    try:
        config = _apply_overrides(
            load_config(config_file, cwd=cwd),
            global_expr=global_expr,
            each_expr=each_expr,
            exclude=exclude,
            base_path=base_path,
            reporters=reporters,
            color=color,
            no_color=no_color,
        )
        paths = resolve_coverage_paths(coverage, cwd=cwd)
        dataset, summarizer = load_dataset(paths)
        return run_check(dataset, config, log=partial(typer.echo, color=config.colors), summarizer=summarizer)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc
    except CoverageInputNotFoundError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc
    except CoverageDataError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc
    except OSError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc
    except Exception as exc:
        logger.exception("unexpected failure")
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_SOFTWARE) from exc


def check_cmd(
    coverage: Annotated[
        list[Path] | None,
        typer.Argument(help="Coverage JSON or Cobertura XML file(s). If omitted, discovery is used."),
    ] = None,
    global_: Annotated[
        str | None,
        typer.Option(
            "--global",
            help="Project-wide threshold: '80' or 'statements=80,branches=-5'.",
        ),
    ] = None,
    each: Annotated[
        str | None,
        typer.Option("--each", help="Per-file threshold, same syntax as --global."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("-x", "--exclude", help="Exclude glob patterns (repeatable)."),
    ] = None,
    base_path: Annotated[
        str | None,
        typer.Option("--base-path", help="Root for exclude globs and reported filenames."),
    ] = None,
    reporter: Annotated[
        list[str] | None,
        typer.Option("-r", "--reporter", help="Reporter to use: text or teamcity (repeatable)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="TOML file with covgate settings (default: pyproject.toml)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output"),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output"),
    ] = False,
) -> None:
    """Fail when coverage is below the configured thresholds."""
    result = _run(
        coverage=coverage or [],
        config_file=config_file,
        global_expr=global_,
        each_expr=each,
        exclude=exclude or [],
        base_path=base_path,
        reporters=reporter or [],
        color=color,
        no_color=no_color,
    )
    raise typer.Exit(code=EXIT_THRESHOLD if result.failed else EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["register"]
