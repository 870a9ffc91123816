"""Primary public API for fontslice."""

from __future__ import annotations

from fontslice.core.config import ServiceConfig, load_config
from fontslice.core.exceptions import (
    CharacterNotFound,
    EngineFailure,
    FontNotFound,
    FontSliceError,
    InvalidInput,
    NoCoverableGlyphs,
)
from fontslice.fonts import (
    CacheJanitor,
    CacheStore,
    FallbackWalker,
    FontDescriptor,
    FontRegistry,
    cache_key,
    parse_codepoints,
)
from fontslice.service import FontInfo, FontService, RegenerationReport
from fontslice.version import get_version


__version__ = get_version()

__all__ = [
    "CacheJanitor",
    "CacheStore",
    "CharacterNotFound",
    "EngineFailure",
    "FallbackWalker",
    "FontDescriptor",
    "FontInfo",
    "FontNotFound",
    "FontRegistry",
    "FontService",
    "FontSliceError",
    "InvalidInput",
    "NoCoverableGlyphs",
    "RegenerationReport",
    "ServiceConfig",
    "__version__",
    "cache_key",
    "get_version",
    "load_config",
    "parse_codepoints",
]
