"""Custom exception hierarchy for font resolution and subset caching."""

from __future__ import annotations


class FontSliceError(RuntimeError):
    """Base exception for font subsetting failures."""

    status: int = 500
    public_message: str = "Internal server error"


class InvalidInput(FontSliceError, ValueError):
    """Raised when a code-point request is malformed or empty."""

    status = 400
    public_message = "Invalid code point request"


class FontNotFound(FontSliceError, LookupError):
    """Raised when a font identity is not registered."""

    status = 404
    public_message = "Font not found"

    def __init__(self, font_id: str) -> None:
        super().__init__(f"font not found: {font_id}")
        self.font_id = font_id


class CharacterNotFound(FontSliceError, LookupError):
    """Raised when no font or fallback covers any requested character."""

    status = 404
    public_message = "Character not found"

    def __init__(self, codepoint: int) -> None:
        super().__init__(f"character not found: U+{codepoint:04X} ({codepoint})")
        self.codepoint = codepoint


class EngineFailure(FontSliceError):
    """Raised when subsetting or transcoding fails for a covered request."""


class NoCoverableGlyphs(EngineFailure):
    """Raised when the subsetting engine has nothing to extract."""


class StorageDegraded(FontSliceError):
    """Raised internally when a cache read or write fails."""


class DescriptorError(FontSliceError):
    """Raised when a font descriptor file cannot be read or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "CharacterNotFound",
    "DescriptorError",
    "EngineFailure",
    "FontNotFound",
    "FontSliceError",
    "InvalidInput",
    "NoCoverableGlyphs",
    "StorageDegraded",
    "exception_hint",
    "exception_messages",
]
