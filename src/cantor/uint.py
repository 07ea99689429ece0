"""Unsigned-width registry and the bit operations bound to each width."""

from __future__ import annotations

from enum import Enum

from cantor.exceptions import WidthOverflowError

MAX_BITS = 128


class Width(Enum):
    """A concrete unsigned integer representation.

    ``W0`` is a genuine zero-bit width: it stores nothing and can only hold 0.
    """

    W0 = 0
    W8 = 8
    W16 = 16
    W32 = 32
    W64 = 64
    W128 = 128

    @property
    def bits(self) -> int:
        return self.value

    @property
    def byte_size(self) -> int:
        return self.value // 8

    @property
    def max_value(self) -> int:
        return (1 << self.value) - 1

    def holds(self, value: int) -> bool:
        return 0 <= value <= self.max_value

    def from_int(self, value: int) -> int:
        """Narrow ``value`` into this width, rejecting anything it cannot hold."""
        if not self.holds(value):
            raise WidthOverflowError(
                f"{value} does not fit in {self.bits} unsigned bits"
            )
        return value

    def ones(self, n: int) -> int:
        """The value with the low ``n`` bits set.

        ``n`` may equal the full width; the mask is built by shifting the full
        ``max_value`` right instead of computing ``1 << n``.
        """
        if n < 0 or n > self.value:
            raise WidthOverflowError(f"{n} ones do not fit in {self.bits} bits")
        if n == 0:
            return 0
        return self.max_value >> (self.value - n)

    def one_at(self, index: int) -> int:
        if index < 0 or index >= self.value:
            raise WidthOverflowError(
                f"bit {index} is outside a {self.bits}-bit width"
            )
        return 1 << index

    def count_ones(self, value: int) -> int:
        return (value & self.max_value).bit_count()

    def first_one(self, value: int) -> int | None:
        value &= self.max_value
        if value == 0:
            return None
        return (value & -value).bit_length() - 1

    def last_one(self, value: int) -> int | None:
        value &= self.max_value
        if value == 0:
            return None
        return value.bit_length() - 1

    def to_bytes(self, value: int) -> bytes:
        return self.from_int(value).to_bytes(self.byte_size, "little")

    def from_bytes(self, data: bytes) -> int:
        if len(data) != self.byte_size:
            raise ValueError(
                f"expected {self.byte_size} bytes for a {self.bits}-bit width, "
                f"got {len(data)}"
            )
        return int.from_bytes(data, "little")


_LADDER: tuple[Width, ...] = tuple(Width)


def _smallest_width(bits: int) -> Width:
    for width in _LADDER:
        if width.bits >= bits:
            return width
    raise WidthOverflowError(f"no unsigned width holds {bits} bits")


# Indexed by bit count; lookups never walk the ladder.
UINT_REGISTRY: tuple[Width, ...] = tuple(
    _smallest_width(bits) for bits in range(MAX_BITS + 1)
)


def uint_for_bits(bits: int) -> Width:
    """Return the smallest registered width holding ``bits`` bits."""
    if bits < 0:
        raise ValueError(f"bit count must be non-negative, got {bits}")
    if bits > MAX_BITS:
        raise WidthOverflowError(
            f"{bits} bits exceeds the largest supported width ({MAX_BITS})"
        )
    return UINT_REGISTRY[bits]


def log2(n: int) -> int:
    """Compute ``ceil(log2(n))``, treating 0 and 1 as needing zero bits."""
    if n < 0:
        raise ValueError(f"log2 of a negative number: {n}")
    if n <= 1:
        return 0
    return (n - 1).bit_length()


def bits_for_count(count: int) -> int:
    """Number of bits needed to store any index below ``count``."""
    return log2(count)


def width_for_count(count: int) -> Width:
    return uint_for_bits(bits_for_count(count))
