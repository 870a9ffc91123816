from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
import os
from pathlib import Path
import time
from typing import Any

import pytest

from fontslice.fonts.janitor import CacheJanitor, cleanup_expired, is_expired


DAY = 24 * 60 * 60


def _touch(path: Path, *, age_days: float, now: float) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"woff2")
    stamp = now - age_days * DAY
    os.utime(path, (stamp, stamp))
    return path


def test_is_expired_compares_against_retention(tmp_path: Path) -> None:
    now = time.time()
    old = _touch(tmp_path / "old.woff2", age_days=8, now=now)
    fresh = _touch(tmp_path / "fresh.woff2", age_days=1, now=now)
    future = _touch(tmp_path / "future.woff2", age_days=-3, now=now)

    retention = timedelta(days=7)
    assert is_expired(old, retention, now=now)
    assert not is_expired(fresh, retention, now=now)
    assert not is_expired(future, retention, now=now)
    assert is_expired(tmp_path / "vanished.woff2", retention, now=now)


def test_sweep_removes_only_expired_multi_character_subsets(static_root: Path) -> None:
    now = time.time()
    expired = _touch(static_root / "alpha" / "cache" / "65,66.woff2", age_days=8, now=now)
    recent = _touch(static_root / "alpha" / "cache" / "65,67.woff2", age_days=2, now=now)
    flat = _touch(static_root / "alpha" / "65.woff2", age_days=30, now=now)
    other = _touch(static_root / "beta" / "cache" / "1,2.woff2", age_days=10, now=now)

    report = CacheJanitor(static_root).sweep(now=now)

    assert sorted(report.removed) == sorted([expired, other])
    assert report.scanned == 3
    assert recent.exists()
    assert flat.exists()
    assert not expired.exists()


def test_sweep_is_idempotent(static_root: Path) -> None:
    now = time.time()
    _touch(static_root / "alpha" / "cache" / "1,2.woff2", age_days=9, now=now)
    janitor = CacheJanitor(static_root)

    assert janitor.sweep(now=now).removed_count == 1
    second = janitor.sweep(now=now)
    assert second.removed_count == 0
    assert second.errors == []


def test_sweep_skips_nested_directories(static_root: Path) -> None:
    now = time.time()
    nested = _touch(static_root / "alpha" / "cache" / "nested" / "1,2.woff2", age_days=9, now=now)

    report = CacheJanitor(static_root).sweep(now=now)

    assert report.removed == []
    assert nested.exists()


def test_sweep_without_static_root_is_a_noop(tmp_path: Path) -> None:
    report = CacheJanitor(tmp_path / "missing").sweep()
    assert report.scanned == 0
    assert report.removed == []


def test_cleanup_expired_reports_unreadable_directory(tmp_path: Path) -> None:
    report = cleanup_expired(tmp_path / "missing", timedelta(days=1))
    assert report.errors and report.errors[0][0] == tmp_path / "missing"


def test_zero_retention_removes_everything_older_than_now(static_root: Path) -> None:
    now = time.time()
    path = _touch(static_root / "alpha" / "cache" / "1,2.woff2", age_days=0.01, now=now)

    CacheJanitor(static_root, retention=timedelta(0)).sweep(now=now)

    assert not path.exists()


def test_sweep_emits_one_event_per_cache_directory(static_root: Path) -> None:
    now = time.time()
    _touch(static_root / "alpha" / "cache" / "1,2.woff2", age_days=9, now=now)
    _touch(static_root / "beta" / "cache" / "1,3.woff2", age_days=1, now=now)
    events: list[tuple[str, dict[str, Any]]] = []

    class Recorder:
        debug_enabled = False

        def warning(self, message: str, exc: BaseException | None = None) -> None: ...

        def error(self, message: str, exc: BaseException | None = None) -> None: ...

        def event(self, name: str, payload: Mapping[str, Any]) -> None:
            events.append((name, dict(payload)))

    CacheJanitor(static_root, emitter=Recorder()).sweep(now=now)

    assert [payload["removed"] for name, payload in events if name == "sweep"] == [1, 0]


def test_interval_must_be_positive(static_root: Path) -> None:
    with pytest.raises(ValueError):
        CacheJanitor(static_root, interval=timedelta(0))


def test_background_thread_sweeps_immediately_and_stops(static_root: Path) -> None:
    path = _touch(static_root / "alpha" / "cache" / "1,2.woff2", age_days=9, now=time.time())
    janitor = CacheJanitor(static_root, interval=timedelta(hours=1))

    thread = janitor.start()
    try:
        assert janitor.start() is thread
        deadline = time.monotonic() + 5
        while path.exists() and time.monotonic() < deadline:
            time.sleep(0.01)
        assert not path.exists()
        assert janitor.running
    finally:
        janitor.stop()

    assert not janitor.running
    assert not thread.is_alive()
