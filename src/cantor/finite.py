"""Finite domains: order-preserving bijections onto ``range(count)``.

A domain describes the values of some type ``T`` together with ``count``, the
number of those values, and two mutually inverse maps:

- ``index_of(value)`` gives the unique integer in ``[0, count)`` for a value;
- ``nth(index)`` gives the value back, or ``OUT_OF_RANGE`` for any index outside
  ``[0, count)``.

The bijection preserves order: whenever ``a < b`` for values of ``T``,
``index_of(a) < index_of(b)``. Products use mixed-radix encoding with the first
field varying slowest, and sums lay their variants out as contiguous sub-ranges
in declaration order, so both keep the natural lexicographic order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Generic, Iterator, Optional, Sequence, TypeVar

from cantor.absent import OUT_OF_RANGE, OutOfRange
from cantor.exceptions import CountOverflowError, NotFiniteError, ValueOutsideDomainError
from cantor.invariants import require_index
from cantor.uint import MAX_BITS

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")
E = TypeVar("E", bound=Enum)

# Every index must fit the widest registered unsigned width.
MAX_COUNT = 1 << MAX_BITS


def check_count(count: int, *, domain: str) -> int:
    if count < 0:
        raise ValueError(f"{domain}: count must be non-negative, got {count}")
    if count > MAX_COUNT:
        raise CountOverflowError(
            f"{domain}: count {count} exceeds the supported maximum 2**{MAX_BITS}"
        )
    return count


class Finite(ABC, Generic[T]):
    """The contract every finite domain implements."""

    # True when ``None`` is one of the domain's values.
    nullable: ClassVar[bool] = False

    @property
    @abstractmethod
    def count(self) -> int:
        """The number of values of this domain."""

    @abstractmethod
    def index_of(self, value: T) -> int:
        """Unique index of ``value`` in ``[0, count)``.

        Raises ``ValueOutsideDomainError`` when ``value`` is not a value of this
        domain.
        """

    @abstractmethod
    def nth(self, index: int) -> T | OutOfRange:
        """The value at ``index``, or ``OUT_OF_RANGE`` past either end."""

    def contains(self, value: object) -> bool:
        try:
            self.index_of(value)  # type: ignore[arg-type]
        except ValueOutsideDomainError:
            return False
        return True

    def values(self) -> Iterator[T]:
        """Every value of the domain in ascending index order."""
        for index in range(self.count):
            yield require_index(self, index)

    def __iter__(self) -> Iterator[T]:
        return self.values()


def _outside(domain: Finite[Any], value: object, detail: str = "") -> ValueOutsideDomainError:
    suffix = f": {detail}" if detail else ""
    return ValueOutsideDomainError(f"{value!r} is not a value of {domain!r}{suffix}")


@dataclass(frozen=True)
class UnitDomain(Finite[T]):
    """A single-valued domain; ``value`` defaults to the empty tuple."""

    value: Any = ()

    @property
    def nullable(self) -> bool:  # type: ignore[override]
        return self.value is None

    @property
    def count(self) -> int:
        return 1

    def index_of(self, value: T) -> int:
        if value != self.value:
            raise _outside(self, value)
        return 0

    def nth(self, index: int) -> T | OutOfRange:
        if index == 0:
            return self.value
        return OUT_OF_RANGE


@dataclass(frozen=True)
class BoolDomain(Finite[bool]):
    @property
    def count(self) -> int:
        return 2

    def index_of(self, value: bool) -> int:
        if not isinstance(value, bool):
            raise _outside(self, value, "expected a bool")
        return int(value)

    def nth(self, index: int) -> bool | OutOfRange:
        if index == 0:
            return False
        if index == 1:
            return True
        return OUT_OF_RANGE


@dataclass(frozen=True)
class UintDomain(Finite[int]):
    """Unsigned integers of ``bits`` bits, mapped by identity."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits < 0:
            raise ValueError(f"unsigned width must be non-negative, got {self.bits}")
        check_count(1 << self.bits, domain=f"u{self.bits}")

    @property
    def count(self) -> int:
        return 1 << self.bits

    def index_of(self, value: int) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise _outside(self, value, "expected an int")
        if not 0 <= value < self.count:
            raise _outside(self, value, f"expected 0 <= value < 2**{self.bits}")
        return value

    def nth(self, index: int) -> int | OutOfRange:
        if 0 <= index < self.count:
            return index
        return OUT_OF_RANGE


@dataclass(frozen=True)
class OptionalDomain(Finite[Optional[T]]):
    """``None`` at index 0, followed by the inner domain shifted by one."""

    inner: Finite[T]
    _count: int = field(init=False, repr=False)

    nullable: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if self.inner.nullable:
            raise NotFiniteError(
                f"optional over {self.inner!r} cannot tell None from a present None"
            )
        object.__setattr__(
            self, "_count", check_count(1 + self.inner.count, domain="optional")
        )

    @property
    def count(self) -> int:
        return self._count

    def index_of(self, value: T | None) -> int:
        if value is None:
            return 0
        return 1 + self.inner.index_of(value)

    def nth(self, index: int) -> T | None | OutOfRange:
        if index == 0:
            return None
        if 0 < index < self.count:
            return require_index(self.inner, index - 1)
        return OUT_OF_RANGE


@dataclass(frozen=True)
class PairDomain(Finite[tuple[A, B]]):
    """Row-major pairs: ``index_of((a, b)) == index_of(a) * B.count + index_of(b)``."""

    first: Finite[A]
    second: Finite[B]
    _count: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_count",
            check_count(self.first.count * self.second.count, domain="pair"),
        )

    @property
    def count(self) -> int:
        return self._count

    def index_of(self, value: tuple[A, B]) -> int:
        if not isinstance(value, tuple) or len(value) != 2:
            raise _outside(self, value, "expected a 2-tuple")
        a, b = value
        return self.first.index_of(a) * self.second.count + self.second.index_of(b)

    def nth(self, index: int) -> tuple[A, B] | OutOfRange:
        if not 0 <= index < self.count:
            return OUT_OF_RANGE
        high, low = divmod(index, self.second.count)
        return (require_index(self.first, high), require_index(self.second, low))


def _as_tuple(*parts: Any) -> tuple[Any, ...]:
    return parts


def _identity_split(value: Any) -> Sequence[Any]:
    if not isinstance(value, tuple):
        raise TypeError(f"expected a tuple, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ProductDomain(Finite[T]):
    """A product over ``fields`` in declaration order, first field slowest.

    ``split`` takes a value apart into its field values and ``build``
    reassembles one from them. Both default to plain tuples. An empty product
    has exactly one value, ``build()``.
    """

    fields: tuple[Finite[Any], ...]
    build: Callable[..., T] = _as_tuple  # type: ignore[assignment]
    split: Callable[[T], Sequence[Any]] = _identity_split
    name: str = "product"
    _count: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        count = 1
        for field_domain in self.fields:
            count *= field_domain.count
        object.__setattr__(self, "_count", check_count(count, domain=self.name))

    @property
    def count(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"ProductDomain({self.name}, fields={self.fields!r})"

    def index_of(self, value: T) -> int:
        try:
            parts = tuple(self.split(value))
        except (TypeError, AttributeError) as exc:
            raise _outside(self, value, str(exc)) from exc
        if len(parts) != len(self.fields):
            raise _outside(self, value, f"expected {len(self.fields)} fields")
        index = 0
        for field_domain, part in zip(self.fields, parts):
            index = index * field_domain.count + field_domain.index_of(part)
        return index

    def nth(self, index: int) -> T | OutOfRange:
        if not 0 <= index < self.count:
            return OUT_OF_RANGE
        parts: list[Any] = []
        for field_domain in reversed(self.fields):
            index, digit = divmod(index, field_domain.count)
            parts.append(require_index(field_domain, digit))
        parts.reverse()
        return self.build(*parts)


@dataclass(frozen=True)
class Variant(Generic[T]):
    """One arm of a sum: the class its values are instances of, and their domain."""

    cls: type
    domain: Finite[T]


@dataclass(frozen=True)
class SumDomain(Finite[T]):
    """Variants laid out as contiguous sub-ranges in declaration order."""

    variants: tuple[Variant[Any], ...]
    name: str = "sum"
    _count: int = field(init=False, repr=False)
    offsets: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))
        offsets: list[int] = []
        running = 0
        seen: set[type] = set()
        for variant in self.variants:
            if variant.cls in seen:
                raise ValueError(f"{self.name}: duplicate variant {variant.cls.__name__}")
            seen.add(variant.cls)
            offsets.append(running)
            running += variant.domain.count
        object.__setattr__(self, "offsets", tuple(offsets))
        object.__setattr__(self, "_count", check_count(running, domain=self.name))

    @property
    def count(self) -> int:
        return self._count

    def __repr__(self) -> str:
        names = ", ".join(variant.cls.__name__ for variant in self.variants)
        return f"SumDomain({self.name}, variants=[{names}])"

    def _locate(self, value: object) -> int:
        kind = type(value)
        for position, variant in enumerate(self.variants):
            if variant.cls is kind:
                return position
        for position, variant in enumerate(self.variants):
            if isinstance(value, variant.cls):
                return position
        raise _outside(self, value, "no matching variant")

    def index_of(self, value: T) -> int:
        position = self._locate(value)
        return self.offsets[position] + self.variants[position].domain.index_of(value)

    def nth(self, index: int) -> T | OutOfRange:
        for offset, variant in zip(self.offsets, self.variants):
            if offset <= index < offset + variant.domain.count:
                return require_index(variant.domain, index - offset)
        return OUT_OF_RANGE


@dataclass(frozen=True)
class EnumDomain(Finite[E]):
    """An ``enum.Enum`` as a sum of unit variants in declaration order."""

    enum_cls: type[E]
    members: tuple[E, ...] = field(init=False, repr=False)
    positions: dict[E, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        members = tuple(self.enum_cls)
        object.__setattr__(self, "members", members)
        object.__setattr__(
            self, "positions", {member: index for index, member in enumerate(members)}
        )

    @property
    def count(self) -> int:
        return len(self.members)

    def index_of(self, value: E) -> int:
        if not isinstance(value, self.enum_cls):
            raise _outside(self, value, f"expected a {self.enum_cls.__name__}")
        return self.positions[value]

    def nth(self, index: int) -> E | OutOfRange:
        if 0 <= index < len(self.members):
            return self.members[index]
        return OUT_OF_RANGE


UNIT: UnitDomain[tuple[()]] = UnitDomain()
NONE: UnitDomain[None] = UnitDomain(None)
BOOL = BoolDomain()
U8 = UintDomain(8)
U16 = UintDomain(16)
U32 = UintDomain(32)
U64 = UintDomain(64)


def optional(inner: Finite[T]) -> OptionalDomain[T]:
    return OptionalDomain(inner)


def pair(first: Finite[A], second: Finite[B]) -> PairDomain[A, B]:
    return PairDomain(first, second)


def product(*fields: Finite[Any]) -> ProductDomain[tuple[Any, ...]]:
    """Tuples over ``fields``; the n-ary generalisation of ``pair``."""
    return ProductDomain(tuple(fields))
