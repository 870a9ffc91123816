"""Subset service orchestrating the registry, the walker and the cache store."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
import logging
import threading
from typing import Any

from fontslice.core.config import ServiceConfig
from fontslice.core.diagnostics import DiagnosticEmitter, ensure_emitter
from fontslice.core.exceptions import FontSliceError
from fontslice.fonts.janitor import CacheJanitor
from fontslice.fonts.keys import cache_key, validate_codepoints
from fontslice.fonts.registry import FontRegistry
from fontslice.fonts.resolver import FallbackWalker
from fontslice.fonts.store import CacheStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FontInfo:
    """Public summary of a registered font."""

    id: str
    version: str
    font_family: str
    license: str
    fallback: tuple[str, ...]
    name: dict[str, str] | None = None
    title: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "version": self.version,
            "font_family": self.font_family,
            "license": self.license,
            "fallback": list(self.fallback),
        }
        if self.name is not None:
            payload["name"] = dict(self.name)
        if self.title is not None:
            payload["title"] = dict(self.title)
        return payload


@dataclass(slots=True)
class RegenerationReport:
    """Artifacts rewritten by :meth:`FontService.force_regenerate`."""

    written: list[tuple[str, str]] = field(default_factory=list)
    unsaved: list[tuple[str, str]] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return bool(self.failures or self.unsaved)


class _InflightLocks:
    """Per-key locks so identical concurrent misses share one generation."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: tuple[str, str]) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                current, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (current, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class FontService:
    """Cache-first subset retrieval over a font registry."""

    def __init__(
        self,
        registry: FontRegistry,
        store: CacheStore,
        *,
        single_flight: bool = True,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.walker = FallbackWalker(registry)
        self.emitter = ensure_emitter(emitter)
        self._inflight = _InflightLocks() if single_flight else None

    @classmethod
    def from_config(
        cls, config: ServiceConfig, *, emitter: DiagnosticEmitter | None = None
    ) -> FontService:
        """Create the directories, load the fonts and build the service."""
        config.ensure_directories()
        registry = FontRegistry.from_directory(config.fonts_root, emitter=emitter)
        store = CacheStore(config.static_root, emitter=emitter)
        return cls(registry, store, single_flight=config.single_flight, emitter=emitter)

    def list_fonts(self) -> list[FontInfo]:
        """Return every registered font in registry order."""
        return [
            FontInfo(
                id=descriptor.id,
                version=descriptor.version,
                font_family=descriptor.font_family,
                license=descriptor.license,
                fallback=tuple(descriptor.fallback),
                name=descriptor.name,
                title=descriptor.title,
            )
            for descriptor in self.registry.snapshot
        ]

    def generate(self, font_id: str | None, codepoints: Iterable[int]) -> bytes:
        """Generate a WOFF2 subset without touching the cache."""
        values = validate_codepoints(codepoints)
        return self.walker.generate(font_id, values)

    def get_or_generate(self, font_id: str, codepoints: Iterable[int]) -> bytes:
        """Return the cached subset for the request, generating it on a miss."""
        values = validate_codepoints(codepoints)
        self.registry.snapshot.require(font_id)
        key = cache_key(values)

        cached = self.store.get(font_id, key)
        if cached is not None:
            return cached

        if self._inflight is None:
            return self._generate_and_store(font_id, key, values)
        with self._inflight.hold((font_id, key)):
            cached = self.store.get(font_id, key)
            if cached is not None:
                return cached
            return self._generate_and_store(font_id, key, values)

    def _generate_and_store(self, font_id: str, key: str, codepoints: Sequence[int]) -> bytes:
        data = self.walker.generate(font_id, codepoints)
        self.store.put(font_id, key, data)
        return data

    def force_regenerate(
        self, font_id: str | None, codepoints: Iterable[int]
    ) -> RegenerationReport:
        """Rebuild and overwrite the single-character subsets of ``codepoints``.

        With ``font_id`` errors propagate. Without it every registered font is
        processed independently; failures are logged and recorded.
        """
        values = validate_codepoints(codepoints)
        report = RegenerationReport()
        if font_id is not None:
            self._regenerate_font(font_id, values, report)
            return report

        for candidate in self.registry.snapshot.ids():
            try:
                self._regenerate_font(candidate, values, report)
            except FontSliceError as exc:
                logger.warning("Failed to regenerate subsets for %s: %s", candidate, exc)
                report.failures[candidate] = str(exc)
        return report

    def _regenerate_font(
        self, font_id: str, codepoints: Sequence[int], report: RegenerationReport
    ) -> None:
        self.registry.snapshot.require(font_id)
        for codepoint in codepoints:
            data = self.walker.generate(font_id, [codepoint])
            key = cache_key([codepoint])
            if self.store.put(font_id, key, data):
                report.written.append((font_id, key))
                self.emitter.event(
                    "cache_regenerated", {"path": str(self.store.path_for(font_id, key))}
                )
            else:
                report.unsaved.append((font_id, key))

    def create_janitor(self, config: ServiceConfig) -> CacheJanitor:
        """Return a janitor sweeping this service's store with ``config`` policy."""
        return CacheJanitor(
            self.store.root,
            retention=timedelta(days=config.cache_cleanup_days),
            interval=timedelta(hours=config.cleanup_interval_hours),
            emitter=self.emitter,
        )


__all__ = ["FontInfo", "FontService", "RegenerationReport"]
