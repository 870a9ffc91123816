"""Font registry: descriptors and subset handles behind an atomic snapshot."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
import logging
from pathlib import Path
from threading import RLock
from types import MappingProxyType

from fontslice.core.diagnostics import DiagnosticEmitter, ensure_emitter
from fontslice.core.exceptions import DescriptorError, EngineFailure, FontNotFound
from fontslice.fonts.descriptor import FontDescriptor, find_descriptor
from fontslice.fonts.pool import SubsetProviderPool
from fontslice.fonts.processor import FontFileHandle


logger = logging.getLogger(__name__)


def _font_directories(root_dir: Path) -> list[Path]:
    try:
        entries = sorted(root_dir.iterdir(), key=lambda entry: entry.name)
    except FileNotFoundError:
        logger.warning("Fonts directory %s does not exist", root_dir)
        return []
    except OSError as exc:
        logger.error("Unable to list fonts directory %s: %s", root_dir, exc)
        return []
    return [entry for entry in entries if entry.is_dir()]


def load_descriptors(root_dir: Path) -> tuple[dict[str, FontDescriptor], dict[str, Path]]:
    """Parse every ``<root_dir>/<font>/config.*`` descriptor.

    Returns the descriptors keyed by identity, in directory-name order, and
    the directory each one was loaded from. Broken descriptors are logged and
    skipped; on duplicate identities the last one parsed wins.
    """
    descriptors: dict[str, FontDescriptor] = {}
    directories: dict[str, Path] = {}
    for font_dir in _font_directories(root_dir):
        path = find_descriptor(font_dir)
        if path is None:
            logger.error("No font descriptor in %s, skipping", font_dir)
            continue
        try:
            descriptor = FontDescriptor.load_file(path)
        except DescriptorError as exc:
            logger.error("Failed to load font descriptor %s: %s", path, exc.__cause__ or exc)
            continue
        if descriptor.id in descriptors:
            logger.warning(
                "Font id '%s' declared by both %s and %s; keeping the latter",
                descriptor.id,
                directories[descriptor.id],
                font_dir,
            )
            # Re-insert so iteration order follows the winning directory.
            descriptors.pop(descriptor.id)
        descriptors[descriptor.id] = descriptor
        directories[descriptor.id] = font_dir
        logger.info("Loaded font descriptor: %s", descriptor.id)
    return descriptors, directories


def build_pool(
    descriptors: Mapping[str, FontDescriptor], directories: Mapping[str, Path]
) -> SubsetProviderPool:
    """Open a handle for every declared font file that can be parsed."""
    pool = SubsetProviderPool()
    for font_id, descriptor in descriptors.items():
        font_dir = directories[font_id]
        for entry in descriptor.files:
            font_path = font_dir / entry.path
            if not font_path.is_file():
                logger.error("Font file not found: %s", font_path)
                continue
            try:
                handle = FontFileHandle.open(font_path, entry.font_family)
            except OSError as exc:
                logger.error("Unable to read font file %s: %s", font_path, exc)
                continue
            except EngineFailure as exc:
                logger.error("Unable to load font file %s: %s", font_path, exc.__cause__ or exc)
                continue
            if pool.add(font_id, handle):
                logger.info("Loaded font file: %s - %s", font_id, entry.font_family)
    return pool


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """Immutable view of the loaded fonts; replaced wholesale on reload."""

    descriptors: Mapping[str, FontDescriptor] = field(default_factory=dict)
    pool: SubsetProviderPool = field(default_factory=SubsetProviderPool)
    root: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "descriptors", MappingProxyType(dict(self.descriptors)))
        self.pool.freeze()

    def get(self, font_id: str) -> FontDescriptor | None:
        return self.descriptors.get(font_id)

    def require(self, font_id: str) -> FontDescriptor:
        descriptor = self.descriptors.get(font_id)
        if descriptor is None:
            raise FontNotFound(font_id)
        return descriptor

    def ids(self) -> list[str]:
        return list(self.descriptors)

    def __iter__(self) -> Iterator[FontDescriptor]:
        return iter(self.descriptors.values())

    def __len__(self) -> int:
        return len(self.descriptors)

    def __contains__(self, font_id: object) -> bool:
        return font_id in self.descriptors


class FontRegistry:
    """Owner of the current :class:`RegistrySnapshot`.

    Readers call :attr:`snapshot` once per request and work on that object;
    :meth:`load` builds a complete new snapshot before swapping it in, so a
    reload is never observed half-way.
    """

    def __init__(
        self,
        snapshot: RegistrySnapshot | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self._lock = RLock()
        self._snapshot = snapshot if snapshot is not None else RegistrySnapshot()
        self.emitter = ensure_emitter(emitter)

    @property
    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return self._snapshot

    def swap(self, snapshot: RegistrySnapshot) -> RegistrySnapshot:
        """Install ``snapshot`` and return the previous one."""
        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot
        return previous

    def load(self, root_dir: Path) -> RegistrySnapshot:
        """Scan ``root_dir`` and atomically replace the current snapshot."""
        descriptors, directories = load_descriptors(root_dir)
        pool = build_pool(descriptors, directories)
        snapshot = RegistrySnapshot(descriptors=descriptors, pool=pool, root=root_dir)
        self.swap(snapshot)
        self.emitter.event("fonts_loaded", {"count": len(snapshot), "handles": len(pool)})
        return snapshot

    def reload(self) -> RegistrySnapshot:
        """Reload from the root of the current snapshot."""
        root = self.snapshot.root
        if root is None:
            raise RuntimeError("The registry was never loaded from a directory.")
        return self.load(root)

    @classmethod
    def from_directory(
        cls, root_dir: Path, *, emitter: DiagnosticEmitter | None = None
    ) -> FontRegistry:
        registry = cls(emitter=emitter)
        registry.load(root_dir)
        return registry


__all__ = [
    "FontRegistry",
    "RegistrySnapshot",
    "build_pool",
    "load_descriptors",
]
