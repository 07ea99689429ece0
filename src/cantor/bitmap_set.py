"""Sets over a finite domain, one bit per possible value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, TypeVar

from cantor.absent import OUT_OF_RANGE, OutOfRange
from cantor.compress import Compressed, index_for_key
from cantor.derive import resolve_domain
from cantor.exceptions import DomainMismatchError, ValueOutsideDomainError
from cantor.finite import Finite, check_count
from cantor.invariants import require_index
from cantor.uint import Width, uint_for_bits

T = TypeVar("T")


class BitmapSet(Generic[T]):
    """A subset of ``domain``: bit ``i`` is set when ``domain.nth(i)`` is a member.

    The backing width is the narrowest registered width with at least
    ``domain.count`` bits, so domains larger than 128 values are rejected.
    Bits at or above ``domain.count`` are always clear.
    """

    __slots__ = ("_domain", "_width", "_bits")

    def __init__(self, domain: Finite[T] | type, bits: int = 0):
        resolved = resolve_domain(domain)
        width = uint_for_bits(resolved.count)
        if bits < 0 or bits > width.ones(resolved.count):
            raise ValueOutsideDomainError(
                f"bit pattern {bits:#x} has members outside {resolved!r}"
            )
        self._domain = resolved
        self._width = width
        self._bits = bits

    @classmethod
    def empty(cls, domain: Finite[T] | type) -> BitmapSet[T]:
        return cls(domain)

    @classmethod
    def everything(cls, domain: Finite[T] | type) -> BitmapSet[T]:
        resolved = resolve_domain(domain)
        return cls(resolved, uint_for_bits(resolved.count).ones(resolved.count))

    @classmethod
    def singleton(cls, value: T, domain: Finite[T] | type | None = None) -> BitmapSet[T]:
        resolved = resolve_domain(domain if domain is not None else type(value))
        result = cls(resolved)
        result.include(value)
        return result

    @classmethod
    def new(cls, predicate: Callable[[T], bool], domain: Finite[T] | type) -> BitmapSet[T]:
        """Membership decided by ``predicate``, called once per value in index order."""
        resolved = resolve_domain(domain)
        bits = 0
        for index, value in enumerate(resolved.values()):
            if predicate(value):
                bits |= 1 << index
        return cls(resolved, bits)

    @classmethod
    def from_bytes(cls, domain: Finite[T] | type, data: bytes) -> BitmapSet[T]:
        resolved = resolve_domain(domain)
        return cls(resolved, uint_for_bits(resolved.count).from_bytes(data))

    @property
    def domain(self) -> Finite[T]:
        return self._domain

    @property
    def width(self) -> Width:
        return self._width

    @property
    def bits(self) -> int:
        """The raw bit pattern; also this set's index in ``BitmapSetDomain``."""
        return self._bits

    def copy(self) -> BitmapSet[T]:
        return BitmapSet(self._domain, self._bits)

    def to_bytes(self) -> bytes:
        return self._width.to_bytes(self._bits)

    def _mask(self, value: T | Compressed[T]) -> int:
        return self._width.one_at(index_for_key(self._domain, value))

    def contains(self, value: T | Compressed[T]) -> bool:
        return self._bits & self._mask(value) != 0

    def include(self, value: T | Compressed[T]) -> None:
        self._bits |= self._mask(value)

    def exclude(self, value: T | Compressed[T]) -> None:
        self._bits &= ~self._mask(value)

    def size(self) -> int:
        return self._width.count_ones(self._bits)

    def issubset(self, other: BitmapSet[T]) -> bool:
        self._check_domain(other)
        return self._bits & ~other._bits == 0

    def issuperset(self, other: BitmapSet[T]) -> bool:
        return other.issubset(self)

    def isdisjoint(self, other: BitmapSet[T]) -> bool:
        self._check_domain(other)
        return self._bits & other._bits == 0

    def _check_domain(self, other: BitmapSet[T]) -> None:
        if other._domain != self._domain:
            raise DomainMismatchError(
                f"sets over {self._domain!r} and {other._domain!r} do not combine"
            )

    def _combine(self, other: object, op: Callable[[int, int], int]) -> BitmapSet[T]:
        if not isinstance(other, BitmapSet):
            return NotImplemented
        self._check_domain(other)
        return BitmapSet(self._domain, op(self._bits, other._bits))

    def __and__(self, other: object) -> BitmapSet[T]:
        return self._combine(other, lambda a, b: a & b)

    def __or__(self, other: object) -> BitmapSet[T]:
        return self._combine(other, lambda a, b: a | b)

    def __xor__(self, other: object) -> BitmapSet[T]:
        return self._combine(other, lambda a, b: a ^ b)

    def __sub__(self, other: object) -> BitmapSet[T]:
        return self._combine(other, lambda a, b: a & ~b)

    def __invert__(self) -> BitmapSet[T]:
        return BitmapSet(self._domain, self._bits ^ self._width.ones(self._domain.count))

    def _assign(self, result: BitmapSet[T]) -> BitmapSet[T]:
        if result is NotImplemented:
            return NotImplemented
        self._bits = result._bits
        return self

    def __iand__(self, other: object) -> BitmapSet[T]:
        return self._assign(self.__and__(other))

    def __ior__(self, other: object) -> BitmapSet[T]:
        return self._assign(self.__or__(other))

    def __ixor__(self, other: object) -> BitmapSet[T]:
        return self._assign(self.__xor__(other))

    def __isub__(self, other: object) -> BitmapSet[T]:
        return self._assign(self.__sub__(other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitmapSet):
            return NotImplemented
        return self._domain == other._domain and self._bits == other._bits

    # Mutable through include/exclude.
    __hash__ = None  # type: ignore[assignment]

    # Sets are totally ordered by raw bit pattern, which is also their index.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BitmapSet):
            return NotImplemented
        self._check_domain(other)
        return self._bits < other._bits

    def __le__(self, other: object) -> bool:
        if not isinstance(other, BitmapSet):
            return NotImplemented
        self._check_domain(other)
        return self._bits <= other._bits

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, BitmapSet):
            return NotImplemented
        self._check_domain(other)
        return self._bits > other._bits

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, BitmapSet):
            return NotImplemented
        self._check_domain(other)
        return self._bits >= other._bits

    def __contains__(self, value: object) -> bool:
        try:
            return self.contains(value)  # type: ignore[arg-type]
        except (ValueOutsideDomainError, DomainMismatchError):
            return False

    def __len__(self) -> int:
        return self.size()

    def __bool__(self) -> bool:
        return self._bits != 0

    def __iter__(self) -> BitmapIterator[T]:
        return BitmapIterator(self._domain, self._width, self._bits)

    def __reversed__(self) -> Iterator[T]:
        return BitmapIterator(self._domain, self._width, self._bits).backward()

    def __repr__(self) -> str:
        members = ", ".join(repr(value) for value in self)
        return f"BitmapSet({{{members}}})"


class BitmapIterator(Generic[T]):
    """Double-ended iteration over a snapshot of a set's bits.

    ``__next__`` yields the lowest remaining member, ``next_back`` the highest.
    Each consumed bit is cleared in the snapshot only, never in the set.
    """

    __slots__ = ("_domain", "_width", "_bits")

    def __init__(self, domain: Finite[T], width: Width, bits: int):
        self._domain = domain
        self._width = width
        self._bits = bits

    def __iter__(self) -> BitmapIterator[T]:
        return self

    def __next__(self) -> T:
        index = self._width.first_one(self._bits)
        if index is None:
            raise StopIteration
        self._bits &= ~(1 << index)
        return require_index(self._domain, index)

    def next_back(self) -> T | OutOfRange:
        index = self._width.last_one(self._bits)
        if index is None:
            return OUT_OF_RANGE
        self._bits &= ~(1 << index)
        return require_index(self._domain, index)

    def backward(self) -> Iterator[T]:
        while True:
            value = self.next_back()
            if value is OUT_OF_RANGE:
                return
            yield value  # type: ignore[misc]

    def __length_hint__(self) -> int:
        return self._width.count_ones(self._bits)


@dataclass(frozen=True)
class BitmapSetDomain(Finite[BitmapSet[T]]):
    """All subsets of ``inner``; a set's index is its raw bit pattern."""

    inner: Finite[T]

    def __post_init__(self) -> None:
        uint_for_bits(self.inner.count)
        check_count(1 << self.inner.count, domain="bitmap set")

    @property
    def count(self) -> int:
        return 1 << self.inner.count

    def index_of(self, value: BitmapSet[T]) -> int:
        if not isinstance(value, BitmapSet):
            raise ValueOutsideDomainError(f"{value!r} is not a bitmap set")
        if value.domain != self.inner:
            raise DomainMismatchError(
                f"set over {value.domain!r} used as one over {self.inner!r}"
            )
        return value.bits

    def nth(self, index: int) -> BitmapSet[T] | OutOfRange:
        if 0 <= index < self.count:
            return BitmapSet(self.inner, index)
        return OUT_OF_RANGE
