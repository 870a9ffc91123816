"""Pool of font handles keyed by font identity and file family."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import logging

from fontslice.core.exceptions import FontNotFound, NoCoverableGlyphs
from fontslice.fonts.processor import FontFileHandle


logger = logging.getLogger(__name__)

PoolKey = tuple[str, str]


class SubsetProviderPool:
    """Ready-to-use handles for every loaded ``(font_id, family)`` pair.

    The pool is filled while a registry snapshot is being built and frozen
    by the snapshot that owns it. When two files of the same font share a
    family name the first one registered wins.
    """

    def __init__(self, handles: Mapping[PoolKey, FontFileHandle] | None = None) -> None:
        self._handles: dict[PoolKey, FontFileHandle] = dict(handles or {})
        self._frozen = False

    def add(self, font_id: str, handle: FontFileHandle) -> bool:
        """Register ``handle``; returns False when the key is already taken."""
        if self._frozen:
            raise RuntimeError("Cannot add handles to a frozen pool.")
        key = (font_id, handle.family)
        existing = self._handles.get(key)
        if existing is not None:
            logger.warning(
                "Font %s: family '%s' already backed by %s, ignoring %s",
                font_id,
                handle.family,
                existing.path.name,
                handle.path.name,
            )
            return False
        self._handles[key] = handle
        return True

    def freeze(self) -> SubsetProviderPool:
        """Reject further registrations and return the pool."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, font_id: str, family: str) -> FontFileHandle | None:
        return self._handles.get((font_id, family))

    def _require(self, font_id: str, family: str) -> FontFileHandle:
        handle = self.get(font_id, family)
        if handle is None:
            raise FontNotFound(f"{font_id}:{family}")
        return handle

    def coverage(self, font_id: str, family: str) -> Callable[[int], bool] | None:
        """Return the coverage predicate of a handle, or None when absent."""
        handle = self.get(font_id, family)
        return handle.contains if handle is not None else None

    def available(self, font_id: str, family: str, codepoints: Iterable[int]) -> list[int]:
        """Return the requested code points the handle covers (maybe none)."""
        handle = self.get(font_id, family)
        if handle is None:
            return []
        return handle.available(codepoints)

    def subset_and_compress(self, font_id: str, family: str, codepoints: Iterable[int]) -> bytes:
        """Subset the handle to ``codepoints`` and transcode the result to WOFF2."""
        handle = self._require(font_id, family)
        requested = list(codepoints)
        if not requested:
            raise NoCoverableGlyphs(f"{font_id}:{family}: empty code point set")
        return handle.generate_woff2(requested)

    def handles_for(self, font_id: str) -> list[FontFileHandle]:
        return [handle for (owner, _), handle in self._handles.items() if owner == font_id]

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, key: object) -> bool:
        return key in self._handles


__all__ = ["PoolKey", "SubsetProviderPool"]
