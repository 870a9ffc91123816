"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from fontslice.core.config import ServiceConfig
from fontslice.core.exceptions import InvalidInput
from fontslice.fonts.keys import parse_codepoints
from fontslice.service import FontService

from .state import resolve_config


def build_service(config: ServiceConfig | None = None) -> tuple[FontService, ServiceConfig]:
    """Load the fonts described by the active configuration."""
    resolved = config or resolve_config()
    return FontService.from_config(resolved), resolved


def parse_chars_argument(chars: str) -> list[int]:
    """Parse a CHARS argument, accepting literal text prefixed with ``text:``."""
    if chars.startswith("text:"):
        text = chars[len("text:") :]
        if not text:
            raise InvalidInput("Code point list is empty")
        return [ord(ch) for ch in text]
    return parse_codepoints(chars)


__all__ = ["build_service", "parse_chars_argument"]
