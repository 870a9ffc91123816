"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from typing import Annotated

import typer


SERVER_PANEL = "Server"
CACHE_PANEL = "Cache"

CharsArgument = Annotated[
    str,
    typer.Argument(
        metavar="CHARS",
        help="Comma separated decimal code points, e.g. '40339,40340'.",
    ),
]

FontIdOption = Annotated[
    str | None,
    typer.Option(
        "--id",
        "-i",
        help="Font identity to use. Every registered font is tried when omitted.",
    ),
]

HostOption = Annotated[
    str | None,
    typer.Option("--host", help="Address the HTTP server binds to.", rich_help_panel=SERVER_PANEL),
]

PortOption = Annotated[
    int | None,
    typer.Option("--port", "-p", help="Port the HTTP server listens on.", rich_help_panel=SERVER_PANEL),
]

NoJanitorOption = Annotated[
    bool,
    typer.Option(
        "--no-janitor",
        help="Do not start the background cache cleanup.",
        rich_help_panel=CACHE_PANEL,
    ),
]

RetentionDaysOption = Annotated[
    int | None,
    typer.Option(
        "--days",
        min=0,
        help="Retention window in days (defaults to the configured value).",
        rich_help_panel=CACHE_PANEL,
    ),
]
