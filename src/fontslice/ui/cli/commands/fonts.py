"""CLI helper listing the registered fonts."""

from __future__ import annotations

import json
from typing import Annotated

import typer

from ..state import get_cli_state
from ..utils import build_service


def list_fonts(
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the font list as JSON."),
    ] = False,
) -> None:
    """Print the fonts found in the fonts directory."""
    service, _config = build_service()
    fonts = service.list_fonts()

    if as_json:
        typer.echo(json.dumps([info.to_dict() for info in fonts], indent=2, ensure_ascii=False))
        return

    from rich import box
    from rich.table import Table

    table = Table(title="Registered Fonts", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Id", style="magenta")
    table.add_column("Family", style="green")
    table.add_column("Version")
    table.add_column("License")
    table.add_column("Fallback")

    if not fonts:
        table.add_row("-", "-", "-", "-", "No fonts found")
    for info in fonts:
        table.add_row(
            info.id,
            info.font_family,
            info.version,
            info.license,
            ", ".join(info.fallback) or "-",
        )
    get_cli_state().console.print(table)


__all__ = ["list_fonts"]
