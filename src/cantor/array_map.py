"""A total map from a finite key domain to payloads, backed by a flat list."""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, TypeVar

from cantor.compress import Compressed, index_for_key
from cantor.derive import resolve_domain
from cantor.finite import Finite
from cantor.invariants import require_index

K = TypeVar("K")
V = TypeVar("V")
N = TypeVar("N")


class ArrayMap(Generic[K, V]):
    """Every key of ``domain`` maps to exactly one payload.

    Slot ``i`` holds the payload of ``domain.nth(i)``. There are no missing
    keys: lookups never fail for a value of the domain.
    """

    __slots__ = ("_domain", "_slots")

    def __init__(self, domain: Finite[K] | type, slots: Iterable[V]):
        resolved = resolve_domain(domain)
        materialized = list(slots)
        if len(materialized) != resolved.count:
            raise ValueError(
                f"{resolved!r} has {resolved.count} keys, got {len(materialized)} values"
            )
        self._domain = resolved
        self._slots = materialized

    @classmethod
    def new(cls, f: Callable[[K], V], domain: Finite[K] | type) -> ArrayMap[K, V]:
        """Populate the map by calling ``f`` once per key in ascending index order."""
        resolved = resolve_domain(domain)
        return cls(resolved, [f(key) for key in resolved.values()])

    @classmethod
    def from_values(cls, values: Iterable[V], domain: Finite[K] | type) -> ArrayMap[K, V]:
        """Build from payloads listed in key index order."""
        return cls(domain, values)

    @classmethod
    def default(cls, factory: Callable[[], V], domain: Finite[K] | type) -> ArrayMap[K, V]:
        resolved = resolve_domain(domain)
        return cls(resolved, [factory() for _ in range(resolved.count)])

    @property
    def domain(self) -> Finite[K]:
        return self._domain

    def __getitem__(self, key: K | Compressed[K]) -> V:
        return self._slots[index_for_key(self._domain, key)]

    def __setitem__(self, key: K | Compressed[K], value: V) -> None:
        self._slots[index_for_key(self._domain, key)] = value

    def map(self, f: Callable[[V], N]) -> ArrayMap[K, N]:
        return ArrayMap(self._domain, [f(value) for value in self._slots])

    def map_with_key(self, f: Callable[[K, V], N]) -> ArrayMap[K, N]:
        return ArrayMap(
            self._domain,
            [
                f(require_index(self._domain, index), value)
                for index, value in enumerate(self._slots)
            ],
        )

    def keys(self) -> Iterator[K]:
        return self._domain.values()

    def values(self) -> Iterator[V]:
        return iter(self._slots)

    def items(self) -> Iterator[tuple[K, V]]:
        return zip(self._domain.values(), self._slots)

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayMap):
            return NotImplemented
        return self._domain == other._domain and self._slots == other._slots

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"ArrayMap({{{body}}})"

