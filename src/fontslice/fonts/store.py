"""Filesystem store of generated subsets.

Artifacts live under ``<root>/<font_id>/<cache_key>``. Reads and writes are
best-effort: any I/O failure degrades to a miss or to an unsaved artifact and
is never raised to the caller.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
import tempfile

from fontslice.core.diagnostics import DiagnosticEmitter, ensure_emitter
from fontslice.core.exceptions import InvalidInput, StorageDegraded


logger = logging.getLogger(__name__)


def _check_font_id(font_id: str) -> str:
    if (
        not font_id
        or font_id in {".", ".."}
        or "/" in font_id
        or "\\" in font_id
        or "\x00" in font_id
    ):
        raise InvalidInput(f"Invalid font id: {font_id!r}")
    return font_id


def _check_key(key: str) -> PurePosixPath:
    relative = PurePosixPath(key)
    if (
        not key
        or relative.is_absolute()
        or "\\" in key
        or "\x00" in key
        or any(part in {"", ".", ".."} for part in key.split("/"))
    ):
        raise InvalidInput(f"Invalid cache key: {key!r}")
    return relative


class CacheStore:
    """Content-addressed artifact store rooted at the static directory."""

    def __init__(self, root: Path, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.root = root
        self.emitter = ensure_emitter(emitter)

    def path_for(self, font_id: str, key: str) -> Path:
        """Return the artifact path of ``key`` for ``font_id``."""
        relative = _check_key(key)
        return self.root / _check_font_id(font_id) / Path(*relative.parts)

    def get(self, font_id: str, key: str) -> bytes | None:
        """Return the cached bytes or None on a miss or unreadable entry."""
        path = self.path_for(font_id, key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            self.emitter.warning(
                f"Failed to read cached subset {path}", StorageDegraded(str(exc))
            )
            return None
        logger.debug("Using cached subset: %s", path)
        return data

    def put(self, font_id: str, key: str, data: bytes) -> bool:
        """Persist ``data``; returns False when the write failed."""
        path = self.path_for(font_id, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=path.suffix)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
                raise
        except OSError as exc:
            self.emitter.warning(
                f"Failed to save cached subset {path}", StorageDegraded(str(exc))
            )
            return False
        self.emitter.event("cache_write", {"path": str(path), "size": len(data)})
        return True

    def exists(self, font_id: str, key: str) -> bool:
        return self.path_for(font_id, key).is_file()


__all__ = ["CacheStore"]
