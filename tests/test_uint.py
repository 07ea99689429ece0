from __future__ import annotations

import pytest

from cantor.exceptions import WidthOverflowError
from cantor.uint import (
    MAX_BITS,
    UINT_REGISTRY,
    Width,
    bits_for_count,
    log2,
    uint_for_bits,
    width_for_count,
)


@pytest.mark.parametrize(
    ("bits", "expected"),
    [
        (0, Width.W0),
        (1, Width.W8),
        (8, Width.W8),
        (9, Width.W16),
        (16, Width.W16),
        (17, Width.W32),
        (32, Width.W32),
        (33, Width.W64),
        (64, Width.W64),
        (65, Width.W128),
        (128, Width.W128),
    ],
)
def test_uint_for_bits_picks_smallest_width(bits: int, expected: Width) -> None:
    assert uint_for_bits(bits) is expected


def test_registry_covers_every_bit_count_monotonically() -> None:
    assert len(UINT_REGISTRY) == MAX_BITS + 1
    for bits, width in enumerate(UINT_REGISTRY):
        assert width.max_value >= (1 << bits) - 1
        smaller = [w for w in Width if w.bits < width.bits]
        assert all(w.max_value < (1 << bits) - 1 for w in smaller)
    for previous, current in zip(UINT_REGISTRY, UINT_REGISTRY[1:]):
        assert previous.bits <= current.bits


def test_uint_for_bits_rejects_out_of_range() -> None:
    with pytest.raises(WidthOverflowError):
        uint_for_bits(MAX_BITS + 1)
    with pytest.raises(ValueError):
        uint_for_bits(-1)


def test_zero_width_is_genuinely_empty() -> None:
    assert Width.W0.byte_size == 0
    assert Width.W0.max_value == 0
    assert Width.W0.to_bytes(0) == b""
    assert Width.W0.from_bytes(b"") == 0
    with pytest.raises(WidthOverflowError):
        Width.W0.from_int(1)


@pytest.mark.parametrize(
    ("n", "expected"),
    [(0, 0), (1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (7, 3), (8, 3), (9, 4), (256, 8), (257, 9)],
)
def test_log2_rounds_up(n: int, expected: int) -> None:
    assert log2(n) == expected
    assert bits_for_count(n) == expected


def test_seven_values_fit_in_three_bits_of_a_byte() -> None:
    assert bits_for_count(7) == 3
    assert width_for_count(7) is Width.W8
    assert width_for_count(1) is Width.W0
    assert width_for_count(1 << 64) is Width.W64
    assert width_for_count((1 << 64) + 1) is Width.W128


def test_ones_handles_full_width_without_overflow() -> None:
    for width in Width:
        assert width.ones(width.bits) == width.max_value
        assert width.ones(0) == 0
    assert Width.W8.ones(3) == 0b111
    with pytest.raises(WidthOverflowError):
        Width.W8.ones(9)


def test_one_at_and_bit_scans() -> None:
    width = Width.W128
    assert width.one_at(127) == 1 << 127
    with pytest.raises(WidthOverflowError):
        width.one_at(128)
    with pytest.raises(WidthOverflowError):
        Width.W0.one_at(0)
    value = (1 << 127) | (1 << 5) | 1
    assert width.count_ones(value) == 3
    assert width.first_one(value) == 0
    assert width.last_one(value) == 127
    assert width.first_one(0) is None
    assert width.last_one(0) is None
    assert Width.W8.first_one(0b1000_0000) == 7
    assert Width.W8.last_one(0b1) == 0


def test_byte_storage_is_little_endian_and_sized() -> None:
    assert Width.W16.to_bytes(0x0102) == b"\x02\x01"
    assert Width.W16.from_bytes(b"\x02\x01") == 0x0102
    assert len(Width.W128.to_bytes(1)) == 16
    with pytest.raises(ValueError):
        Width.W16.from_bytes(b"\x00")
    with pytest.raises(WidthOverflowError):
        Width.W8.to_bytes(256)
