from __future__ import annotations

from itertools import permutations

import pytest

from fontslice.core.exceptions import InvalidInput
from fontslice.fonts.keys import cache_key, parse_codepoints, validate_codepoints


def test_parse_codepoints_single_and_multiple() -> None:
    assert parse_codepoints("40339") == [40339]
    assert parse_codepoints("40339,40340,40341") == [40339, 40340, 40341]
    assert parse_codepoints("40339, 40340, 40341") == [40339, 40340, 40341]


@pytest.mark.parametrize("raw", ["", "   ", "40339,", "abc", "-1", "40339;40340", "1.5", "4294967296"])
def test_parse_codepoints_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(InvalidInput):
        parse_codepoints(raw)


def test_validate_codepoints_rejects_empty_and_non_integers() -> None:
    with pytest.raises(InvalidInput):
        validate_codepoints([])
    with pytest.raises(InvalidInput):
        validate_codepoints([True])
    with pytest.raises(InvalidInput):
        validate_codepoints(["65"])  # type: ignore[list-item]


def test_cache_key_single_codepoint_is_flat() -> None:
    assert cache_key([40339]) == "40339.woff2"


def test_cache_key_sorts_multiple_codepoints() -> None:
    assert cache_key([40341, 40339, 40340]) == "cache/40339,40340,40341.woff2"
    assert cache_key(parse_codepoints("40341, 40339, 40340")) == "cache/40339,40340,40341.woff2"


def test_cache_key_is_order_independent() -> None:
    values = [65, 20013, 66, 65]
    keys = {cache_key(list(order)) for order in permutations(values)}
    assert keys == {"cache/65,65,66,20013.woff2"}


def test_cache_key_keeps_duplicates_unless_collapsed() -> None:
    assert cache_key([66, 65, 65]) != cache_key([65, 66])
    assert cache_key([66, 65, 65], collapse_duplicates=True) == cache_key([65, 66])
    assert cache_key([65, 65], collapse_duplicates=True) == "65.woff2"


def test_cache_key_differs_for_different_sequences() -> None:
    assert cache_key([1, 23]) != cache_key([12, 3])
    assert cache_key([1, 2]) != cache_key([1, 3])


def test_parse_codepoints_accepts_unsigned_32_bit_values() -> None:
    assert parse_codepoints("1114112") == [1114112]
    assert parse_codepoints("4294967295") == [0xFFFFFFFF]
    with pytest.raises(InvalidInput):
        validate_codepoints([0x100000000])
