"""Font handles: coverage tests, glyph subsetting and WOFF2 transcoding."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from io import BytesIO
import logging
from pathlib import Path

from fontTools import subset as ft_subset
from fontTools.ttLib import TTFont

from fontslice.core.exceptions import EngineFailure, NoCoverableGlyphs


logger = logging.getLogger(__name__)

MAX_CODEPOINT = 0x10FFFF


def _subset_options() -> ft_subset.Options:
    options = ft_subset.Options()
    # Keep every table and the layout features the glyphs need.
    options.drop_tables = []
    options.layout_features = ["*"]
    options.name_IDs = ["*"]
    options.name_languages = ["*"]
    options.notdef_outline = True
    options.recalc_bounds = True
    options.recalc_timestamp = False
    return options


def transcode_woff2(font_data: bytes) -> bytes:
    """Wrap a TrueType/OpenType binary into a WOFF2 container.

    The input is returned unchanged when transcoding fails.
    """
    try:
        font = TTFont(BytesIO(font_data), recalcTimestamp=False)
        font.flavor = "woff2"
        buffer = BytesIO()
        font.save(buffer)
    except Exception as exc:
        logger.warning("WOFF2 transcoding failed, serving the raw subset: %s", exc)
        return font_data
    return buffer.getvalue()


@dataclass(frozen=True, slots=True)
class FontFileHandle:
    """One parsed font binary bound to the glyph subsetting engine.

    The cmap is captured once so coverage tests never touch fontTools. Each
    subset run parses a fresh ``TTFont`` because the subsetter mutates the
    font it works on.
    """

    path: Path
    family: str
    data: bytes = field(repr=False)
    codepoints: frozenset[int] = field(repr=False)
    font_number: int = 0

    @classmethod
    def open(cls, path: Path, family: str, *, font_number: int = 0) -> FontFileHandle:
        """Read and parse ``path``; raises ``OSError`` or ``EngineFailure``."""
        data = path.read_bytes()
        try:
            font = TTFont(BytesIO(data), fontNumber=font_number, lazy=True)
            try:
                cmap = font.getBestCmap() or {}
            finally:
                font.close()
        except Exception as exc:
            raise EngineFailure(f"Unable to parse font {path}") from exc
        if not cmap:
            logger.warning("Font %s declares no Unicode cmap", path)
        return cls(
            path=path,
            family=family,
            data=data,
            codepoints=frozenset(cmap),
            font_number=font_number,
        )

    def contains(self, codepoint: int) -> bool:
        """Return True when the font maps ``codepoint`` to a glyph."""
        if codepoint < 0 or codepoint > MAX_CODEPOINT:
            return False
        return codepoint in self.codepoints

    def available(self, codepoints: Iterable[int]) -> list[int]:
        """Filter ``codepoints`` down to the covered ones, keeping their order."""
        return [cp for cp in codepoints if self.contains(cp)]

    def subset(self, codepoints: Iterable[int]) -> bytes:
        """Return a font binary holding only the glyphs for ``codepoints``."""
        wanted = sorted({cp for cp in codepoints if self.contains(cp)})
        if not wanted:
            raise NoCoverableGlyphs(f"{self.path.name} covers none of the requested characters")
        try:
            font = TTFont(BytesIO(self.data), fontNumber=self.font_number, recalcTimestamp=False)
            subsetter = ft_subset.Subsetter(options=_subset_options())
            subsetter.populate(unicodes=wanted)
            subsetter.subset(font)
            buffer = BytesIO()
            font.save(buffer)
        except Exception as exc:
            raise EngineFailure(f"Subsetting {self.path.name} failed") from exc
        return buffer.getvalue()

    def generate_woff2(self, codepoints: Iterable[int]) -> bytes:
        """Subset then transcode to WOFF2."""
        return transcode_woff2(self.subset(codepoints))


__all__ = ["MAX_CODEPOINT", "FontFileHandle", "transcode_woff2"]
