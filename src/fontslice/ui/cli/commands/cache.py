"""CLI commands producing, refreshing and sweeping cached subsets."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Annotated

import typer

from fontslice.fonts.janitor import CacheJanitor
from fontslice.fonts.keys import cache_key

from .._options import CharsArgument, FontIdOption, RetentionDaysOption
from ..state import emit_warning, get_cli_state, resolve_config
from ..utils import build_service, parse_chars_argument


def subset(
    font_id: Annotated[str, typer.Argument(metavar="FONT_ID", help="Font identity.")],
    chars: CharsArgument,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            dir_okay=False,
            help="Also copy the WOFF2 payload to this file.",
        ),
    ] = None,
) -> None:
    """Return the cached subset of CHARS for FONT_ID, generating it if needed."""
    codepoints = parse_chars_argument(chars)
    service, _config = build_service()
    data = service.get_or_generate(font_id, codepoints)
    location = service.store.path_for(font_id, cache_key(codepoints))
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        location = output
    get_cli_state().console.print(f"{location} ({len(data)} bytes)")


def regenerate(chars: CharsArgument, font_id: FontIdOption = None) -> None:
    """Rebuild the single-character subsets of CHARS, bypassing the cache."""
    codepoints = parse_chars_argument(chars)
    service, _config = build_service()
    report = service.force_regenerate(font_id, codepoints)
    for failed_id, reason in sorted(report.failures.items()):
        emit_warning(f"{failed_id}: {reason}")
    for unsaved_id, key in report.unsaved:
        emit_warning(f"{unsaved_id}: unable to write {key}")
    get_cli_state().console.print(
        f"Regenerated {len(report.written)} subset(s) for {len(codepoints)} character(s)."
    )


def sweep(days: RetentionDaysOption = None) -> None:
    """Remove multi-character subsets older than the retention window."""
    config = resolve_config()
    retention = timedelta(days=config.cache_cleanup_days if days is None else days)
    janitor = CacheJanitor(config.static_root, retention=retention)
    report = janitor.sweep()
    for path, reason in report.errors:
        emit_warning(f"{path}: {reason}")
    get_cli_state().console.print(
        f"Removed {report.removed_count} of {report.scanned} cached subset(s)."
    )


__all__ = ["regenerate", "subset", "sweep"]
