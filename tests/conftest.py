from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import json
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
import pytest


def _rect_glyph(x0: int = 100, y0: int = 0, x1: int = 500, y1: int = 700):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()
    return pen.glyph()


def build_font(path: Path, family: str, codepoints: Iterable[int]) -> Path:
    """Write a minimal TrueType font mapping each code point to a box glyph."""
    cps = sorted(set(codepoints))
    glyph_order = [".notdef", *(f"uni{cp:04X}" for cp in cps)]
    cmap = {cp: f"uni{cp:04X}" for cp in cps}

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf({name: _rect_glyph() for name in glyph_order})
    fb.setupHorizontalMetrics({name: (600, 100) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupPost()
    fb.setupMaxp()

    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


def write_font_dir(
    fonts_root: Path,
    font_id: str,
    files: Mapping[str, Sequence[int] | None],
    *,
    fallback: Sequence[str] = (),
    dirname: str | None = None,
    extra: Mapping[str, object] | None = None,
) -> Path:
    """Create ``<fonts_root>/<font_id>`` with a descriptor and its font files.

    ``files`` maps a family name to the code points of its font; ``None``
    declares the file without writing it.
    """
    font_dir = fonts_root / (dirname or font_id)
    font_dir.mkdir(parents=True, exist_ok=True)
    entries = []
    for index, (family, codepoints) in enumerate(files.items()):
        filename = f"{font_id}-{index}.ttf"
        if codepoints is not None:
            build_font(font_dir / filename, family, codepoints)
        entries.append({"name": f"Style{index}", "path": filename, "font_family": family})
    payload: dict[str, object] = {
        "id": font_id,
        "version": "1.000",
        "font_family": f"{font_id} family",
        "license": "OFL-1.1",
        "fallback": list(fallback),
        "files": entries,
    }
    payload.update(extra or {})
    (font_dir / "config.json").write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return font_dir


@pytest.fixture
def fonts_root(tmp_path: Path) -> Path:
    root = tmp_path / "fonts"
    root.mkdir()
    return root


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    root = tmp_path / "static"
    root.mkdir()
    return root
