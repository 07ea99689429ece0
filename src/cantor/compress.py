"""Compressed values: a domain index stored in the narrowest registered width."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cantor.absent import OUT_OF_RANGE, OutOfRange
from cantor.derive import resolve_domain
from cantor.exceptions import DomainMismatchError, ValueOutsideDomainError
from cantor.finite import Finite
from cantor.invariants import require_index
from cantor.uint import Width, width_for_count

T = TypeVar("T")


class Compressed(Generic[T]):
    """A value of ``domain`` represented only by its index.

    The index is always below ``domain.count``; the constructor rejects
    anything else with ``ValueOutsideDomainError``. ``expand`` relies on that.
    """

    __slots__ = ("_domain", "_index")

    def __init__(self, domain: Finite[T], index: int):
        narrowed = width_for_count(domain.count).from_int(index)
        if narrowed >= domain.count:
            raise ValueOutsideDomainError(
                f"index {index} is outside {domain!r} (count {domain.count})"
            )
        self._domain = domain
        self._index = narrowed

    @property
    def domain(self) -> Finite[T]:
        return self._domain

    @property
    def index(self) -> int:
        return self._index

    @property
    def width(self) -> Width:
        return width_for_count(self._domain.count)

    @property
    def nbytes(self) -> int:
        """Storage size of the index in bytes; zero for single-valued domains."""
        return self.width.byte_size

    def expand(self) -> T:
        return require_index(self._domain, self._index)

    def to_bytes(self) -> bytes:
        return self.width.to_bytes(self._index)

    @classmethod
    def from_bytes(cls, domain: Finite[T] | type, data: bytes) -> Compressed[T]:
        resolved = resolve_domain(domain)
        return cls(resolved, width_for_count(resolved.count).from_bytes(data))

    def _same_domain(self, other: Compressed[Any]) -> None:
        if other._domain != self._domain:
            raise DomainMismatchError(
                f"cannot compare values of {self._domain!r} and {other._domain!r}"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Compressed):
            return NotImplemented
        return self._domain == other._domain and self._index == other._index

    def __hash__(self) -> int:
        return hash((self._domain, self._index))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Compressed):
            return NotImplemented
        self._same_domain(other)
        return self._index < other._index

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Compressed):
            return NotImplemented
        self._same_domain(other)
        return self._index <= other._index

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Compressed):
            return NotImplemented
        self._same_domain(other)
        return self._index > other._index

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Compressed):
            return NotImplemented
        self._same_domain(other)
        return self._index >= other._index

    def __repr__(self) -> str:
        return f"compress({self.expand()!r})"


def compress(value: T, domain: Finite[T] | type | None = None) -> Compressed[T]:
    """Compress ``value``; the domain defaults to the one registered for its type."""
    resolved = resolve_domain(domain if domain is not None else type(value))
    return Compressed(resolved, resolved.index_of(value))


@dataclass(frozen=True)
class CompressedDomain(Finite[Compressed[T]]):
    """Compressed values of ``inner``; same count, index is the stored index."""

    inner: Finite[T]

    @property
    def count(self) -> int:
        return self.inner.count

    def index_of(self, value: Compressed[T]) -> int:
        if not isinstance(value, Compressed):
            raise ValueOutsideDomainError(f"{value!r} is not a compressed value")
        if value.domain != self.inner:
            raise DomainMismatchError(
                f"compressed value of {value.domain!r} used as one of {self.inner!r}"
            )
        return value.index

    def nth(self, index: int) -> Compressed[T] | OutOfRange:
        if 0 <= index < self.inner.count:
            return Compressed(self.inner, index)
        return OUT_OF_RANGE


def index_for_key(domain: Finite[T], key: T | Compressed[T]) -> int:
    """Index of a live or compressed key; compressed keys are never expanded."""
    if isinstance(key, Compressed) and not isinstance(domain, CompressedDomain):
        if key.domain != domain:
            raise DomainMismatchError(
                f"compressed value of {key.domain!r} used as a key of {domain!r}"
            )
        return key.index
    return domain.index_of(key)  # type: ignore[arg-type]
