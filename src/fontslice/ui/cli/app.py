"""Typer application wiring for the fontslice CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontslice.core.exceptions import FontSliceError, exception_hint
from fontslice.version import get_version

from .commands import list_fonts, regenerate, serve, subset, sweep
from .state import configure_logging, debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Serve per-request font subsets and manage their cache.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def configure(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            exists=True,
            dir_okay=False,
            help="YAML or JSON service configuration file.",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks when an unexpected error occurs."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the installed version and exit.",
        ),
    ] = False,
) -> None:
    """Configure diagnostics and the service configuration for every command."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug, config_file=config)
    configure_logging(state.verbosity)


app.command("serve")(serve)
app.command("fonts")(list_fonts)
app.command("subset")(subset)
app.command("regenerate")(regenerate)
app.command("sweep")(sweep)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except SystemExit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except FontSliceError as exc:
        if debug_enabled():
            raise
        emit_error(exception_hint(exc) or exc.public_message, exception=exc)
        raise typer.Exit(code=1) from exc
    except Exception as exc:  # pragma: no cover
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(type(exc), exc, exc.__traceback__)
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
