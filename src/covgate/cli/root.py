from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from covgate import __version__
from covgate.cli import check
from covgate.cli._shared import configure_logging


def create_app() -> typer.Typer:
    app = typer.Typer(help="Enforce code-coverage thresholds on Istanbul JSON or Cobertura XML reports.")

    @app.callback(invoke_without_command=True)
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = False,
        quiet: Annotated[
            bool,
            typer.Option("-q", "--quiet", help="Emit only errors"),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
        ] = False,
    ) -> None:
        if version:
            typer.echo(f"covgate {__version__}")
            raise typer.Exit
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit
        configure_logging(quiet=quiet, verbose=verbose)

    check.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
