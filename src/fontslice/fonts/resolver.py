"""Resolve a font identity and its fallback chain to a generated subset."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from fontslice.core.exceptions import CharacterNotFound, EngineFailure, FontNotFound
from fontslice.fonts.registry import FontRegistry, RegistrySnapshot


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    """A generated subset and the font file that produced it."""

    data: bytes
    font_id: str
    family: str
    codepoints: tuple[int, ...]


class FallbackWalker:
    """Pick the font file able to render a request, following fallbacks.

    One walk works on a single registry snapshot. Identities already explored
    during a walk are not explored again, which bounds the recursion on
    cyclic fallback chains.
    """

    def __init__(self, registry: FontRegistry) -> None:
        self.registry = registry

    def resolve(self, font_id: str | None, codepoints: Sequence[int]) -> Resolution:
        """Return the first successful generation for ``codepoints``.

        With ``font_id`` only that font and its fallbacks are searched;
        without it every registered font is tried in registry order.
        """
        if not codepoints:
            raise CharacterNotFound(0)
        snapshot = self.registry.snapshot
        visited: set[str] = set()

        if font_id is not None:
            snapshot.require(font_id)
            result = self._resolve_font(snapshot, font_id, codepoints, visited)
        else:
            result = None
            for candidate in snapshot.ids():
                result = self._resolve_font(snapshot, candidate, codepoints, visited)
                if result is not None:
                    break

        if result is None:
            raise CharacterNotFound(codepoints[0])
        return result

    def generate(self, font_id: str | None, codepoints: Sequence[int]) -> bytes:
        return self.resolve(font_id, codepoints).data

    def _resolve_font(
        self,
        snapshot: RegistrySnapshot,
        font_id: str,
        codepoints: Sequence[int],
        visited: set[str],
    ) -> Resolution | None:
        if font_id in visited:
            logger.debug("Font %s already explored for this request", font_id)
            return None
        visited.add(font_id)

        descriptor = snapshot.get(font_id)
        if descriptor is None:
            logger.warning("Unknown fallback font: %s", font_id)
            return None

        pool = snapshot.pool
        for entry in descriptor.files:
            available = pool.available(font_id, entry.font_family, codepoints)
            if not available:
                continue
            try:
                data = pool.subset_and_compress(font_id, entry.font_family, available)
            except (EngineFailure, FontNotFound) as exc:
                logger.warning(
                    "WOFF2 generation failed for %s:%s: %s", font_id, entry.font_family, exc
                )
                continue
            return Resolution(
                data=data,
                font_id=font_id,
                family=entry.font_family,
                codepoints=tuple(available),
            )

        for fallback_id in descriptor.fallback:
            result = self._resolve_font(snapshot, fallback_id, codepoints, visited)
            if result is not None:
                logger.debug("Font %s resolved through fallback %s", font_id, fallback_id)
                return result
        return None


__all__ = ["FallbackWalker", "Resolution"]
