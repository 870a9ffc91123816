"""Code-point parsing and cache key derivation."""

from __future__ import annotations

from collections.abc import Iterable

from fontslice.core.exceptions import InvalidInput


ARTIFACT_SUFFIX = ".woff2"
MULTI_DIR = "cache"
# Requests carry unsigned 32-bit values; only real code points are ever covered.
MAX_REQUEST_VALUE = 0xFFFFFFFF


def parse_codepoints(chars: str) -> list[int]:
    """Parse a comma separated list of decimal code points.

    >>> parse_codepoints("40341, 40339,40340")
    [40341, 40339, 40340]
    """
    if chars is None or not chars.strip():
        raise InvalidInput("Code point list is empty")
    codepoints: list[int] = []
    for raw in chars.split(","):
        token = raw.strip()
        if not (token.isascii() and token.isdigit()):
            raise InvalidInput(f"Invalid code point: {raw!r}")
        codepoints.append(int(token))
    return validate_codepoints(codepoints)


def validate_codepoints(codepoints: Iterable[int]) -> list[int]:
    """Return ``codepoints`` as a list after checking the unsigned 32-bit bounds."""
    values = list(codepoints)
    if not values:
        raise InvalidInput("Code point list is empty")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput(f"Invalid code point: {value!r}")
        if value < 0 or value > MAX_REQUEST_VALUE:
            raise InvalidInput(f"Code point out of range: {value}")
    return values


def cache_key(codepoints: Iterable[int], *, collapse_duplicates: bool = False) -> str:
    """Return the storage key of a code-point request.

    A single code point is stored flat (``"40339.woff2"``); several are stored
    under ``cache/`` joined in ascending order
    (``"cache/40339,40340,40341.woff2"``). Input order never matters.
    Duplicates are kept unless ``collapse_duplicates`` is set.
    """
    values = set(codepoints) if collapse_duplicates else list(codepoints)
    ordered = sorted(values)
    if not ordered:
        raise InvalidInput("Code point list is empty")
    if len(ordered) == 1:
        return f"{ordered[0]}{ARTIFACT_SUFFIX}"
    joined = ",".join(str(value) for value in ordered)
    return f"{MULTI_DIR}/{joined}{ARTIFACT_SUFFIX}"


__all__ = [
    "ARTIFACT_SUFFIX",
    "MAX_REQUEST_VALUE",
    "MULTI_DIR",
    "cache_key",
    "parse_codepoints",
    "validate_codepoints",
]
