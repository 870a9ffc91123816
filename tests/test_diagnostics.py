from __future__ import annotations

import logging

import pytest

from fontslice.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    ensure_emitter,
    format_event_message,
)
from fontslice.core.exceptions import (
    CharacterNotFound,
    FontNotFound,
    InvalidInput,
    StorageDegraded,
    exception_hint,
    exception_messages,
)


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.ERROR):
        emitter.error("boom")
    assert any(record.message == "boom" for record in caplog.records)
    assert emitter.debug_enabled is True


def test_logging_emitter_inlines_exception_without_debug(
    caplog: pytest.LogCaptureFixture,
) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("Failed to save cached subset", StorageDegraded("disk full"))
    record = caplog.records[-1]
    assert record.getMessage() == "Failed to save cached subset: disk full"
    assert record.exc_info is None


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.INFO):
        emitter.event("cache_write", {"path": "static/a/65.woff2", "size": 12})
    assert caplog.records[-1].getMessage() == "Cached subset: static/a/65.woff2 (12 bytes)"


def test_format_event_message_variants() -> None:
    assert format_event_message("sweep", {"directory": "x", "removed": 0}) is None
    assert format_event_message("sweep", {"directory": "x", "removed": 2}) == (
        "Removed 2 expired subset(s) from x"
    )
    assert format_event_message("fonts_loaded", {"count": 3, "handles": 5}) == (
        "Loaded 3 font descriptor(s) backed by 5 file(s)"
    )
    assert format_event_message("unknown", {}) is None


def test_ensure_emitter_defaults_to_logging() -> None:
    assert isinstance(ensure_emitter(None), LoggingEmitter)
    emitter = NullEmitter()
    assert ensure_emitter(emitter) is emitter
    assert isinstance(emitter, DiagnosticEmitter)


def test_error_statuses_and_public_messages() -> None:
    assert InvalidInput("bad").status == 400
    assert FontNotFound("x").status == 404
    assert FontNotFound("x").font_id == "x"
    error = CharacterNotFound(40339)
    assert error.status == 404
    assert str(error) == "character not found: U+9D93 (40339)"
    assert isinstance(error, LookupError)


def test_exception_hint_returns_innermost_message() -> None:
    try:
        try:
            raise OSError("permission denied")
        except OSError as exc:
            raise StorageDegraded("cache unavailable") from exc
    except StorageDegraded as exc:
        assert exception_messages(exc) == ["cache unavailable", "permission denied"]
        assert exception_hint(exc) == "permission denied"
