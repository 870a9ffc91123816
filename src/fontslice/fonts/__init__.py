"""Font resolution and subset caching engine.

Architecture
: `FontRegistry` scans one directory per font, parses its descriptor into a
  `FontDescriptor`, and opens a `FontFileHandle` for every declared file. The
  descriptors and the `SubsetProviderPool` holding the handles form an
  immutable `RegistrySnapshot` that is swapped in atomically.
: `cache_key` turns any code-point request into a deterministic storage key;
  `CacheStore` reads and writes artifacts under that key, degrading every I/O
  error to a miss or an unsaved write.
: `FallbackWalker` picks the first font file covering the request, walking
  declared fallback chains with a per-request visited set.
: `CacheJanitor` sweeps expired multi-character subsets on its own thread.

Goal
: Serve minimal WOFF2 subsets per request, computing each one at most once
  for as long as it stays on disk.
"""

from fontslice.fonts.descriptor import FontDescriptor, FontFileEntry
from fontslice.fonts.janitor import CacheJanitor, SweepReport
from fontslice.fonts.keys import cache_key, parse_codepoints, validate_codepoints
from fontslice.fonts.pool import SubsetProviderPool
from fontslice.fonts.processor import FontFileHandle, transcode_woff2
from fontslice.fonts.registry import FontRegistry, RegistrySnapshot
from fontslice.fonts.resolver import FallbackWalker, Resolution
from fontslice.fonts.store import CacheStore


__all__ = [
    "CacheJanitor",
    "CacheStore",
    "FallbackWalker",
    "FontDescriptor",
    "FontFileEntry",
    "FontFileHandle",
    "FontRegistry",
    "RegistrySnapshot",
    "Resolution",
    "SubsetProviderPool",
    "SweepReport",
    "cache_key",
    "parse_codepoints",
    "transcode_woff2",
    "validate_codepoints",
]
