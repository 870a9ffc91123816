"""Background removal of expired multi-character subsets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
import logging
from pathlib import Path
import threading
import time

from fontslice.core.diagnostics import DiagnosticEmitter, ensure_emitter
from fontslice.fonts.keys import MULTI_DIR


logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=7)
DEFAULT_INTERVAL = timedelta(hours=24)


@dataclass(slots=True)
class SweepReport:
    """Outcome of one janitor pass."""

    scanned: int = 0
    removed: list[Path] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def is_expired(path: Path, retention: timedelta, *, now: float | None = None) -> bool:
    """Return True when ``path`` is older than ``retention``.

    Files whose modification time cannot be read count as expired.
    """
    try:
        modified = path.stat().st_mtime
    except OSError:
        return True
    current = time.time() if now is None else now
    return current - modified > retention.total_seconds()


def cleanup_expired(
    directory: Path,
    retention: timedelta,
    *,
    now: float | None = None,
    report: SweepReport | None = None,
) -> SweepReport:
    """Delete the expired regular files directly inside ``directory``."""
    report = report if report is not None else SweepReport()
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        logger.error("Unable to scan cache directory %s: %s", directory, exc)
        report.errors.append((directory, str(exc)))
        return report

    for entry in entries:
        try:
            if not entry.is_file() or entry.is_symlink():
                continue
        except OSError as exc:
            report.errors.append((entry, str(exc)))
            continue
        report.scanned += 1
        if not is_expired(entry, retention, now=now):
            continue
        try:
            entry.unlink()
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.warning("Unable to remove expired subset %s: %s", entry, exc)
            report.errors.append((entry, str(exc)))
            continue
        logger.info("Removed expired subset: %s", entry)
        report.removed.append(entry)
    return report


class CacheJanitor:
    """Sweep ``<static_root>/<font>/cache`` directories on a fixed interval.

    The janitor shares nothing with request handling but the filesystem; a
    failing sweep is logged and the next one runs on schedule.
    """

    def __init__(
        self,
        static_root: Path,
        *,
        retention: timedelta = DEFAULT_RETENTION,
        interval: timedelta = DEFAULT_INTERVAL,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if interval.total_seconds() <= 0:
            raise ValueError("Janitor interval must be positive.")
        self.static_root = static_root
        self.retention = retention
        self.interval = interval
        self.emitter = ensure_emitter(emitter)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def cache_dirs(self) -> list[Path]:
        try:
            font_dirs = sorted(entry for entry in self.static_root.iterdir() if entry.is_dir())
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.error("Unable to scan static directory %s: %s", self.static_root, exc)
            return []
        return [font_dir / MULTI_DIR for font_dir in font_dirs if (font_dir / MULTI_DIR).is_dir()]

    def sweep(self, *, now: float | None = None) -> SweepReport:
        """Run one cleanup pass over every per-font cache directory."""
        logger.info("Cleaning expired cached subsets under %s", self.static_root)
        report = SweepReport()
        for cache_dir in self.cache_dirs():
            before = report.removed_count
            cleanup_expired(cache_dir, self.retention, now=now, report=report)
            self.emitter.event(
                "sweep",
                {"directory": str(cache_dir), "removed": report.removed_count - before},
            )
        return report

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.sweep()
            except Exception as exc:
                self.emitter.error("Cache sweep failed", exc)
            self._stop.wait(self.interval.total_seconds())

    def start(self) -> threading.Thread:
        """Start the background sweeper; the first pass runs immediately."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="fontslice-janitor", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_RETENTION",
    "CacheJanitor",
    "SweepReport",
    "cleanup_expired",
    "is_expired",
]
