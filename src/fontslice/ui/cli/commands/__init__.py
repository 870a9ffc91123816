"""CLI command implementations exposed via `fontslice.ui.cli`."""

from __future__ import annotations

from .cache import regenerate, subset, sweep
from .fonts import list_fonts
from .serve import serve


__all__ = ["list_fonts", "regenerate", "serve", "subset", "sweep"]
