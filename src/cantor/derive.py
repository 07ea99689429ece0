"""Reflection-based derivation of finite domains for user-declared types.

``@finite`` turns an ``enum.Enum`` or a dataclass into a registered domain;
``finite_sum`` registers a sum over dataclass variants. Field domains are
resolved from type hints:

- ``bool`` and ``None``;
- any registered class;
- ``Optional[X]`` / ``X | None``;
- ``A | B`` over non-overlapping registered classes, a sum in hint order
  except that variants of one registered sum keep that sum's order;
- ``tuple[A, B, ...]`` (a product of tuples);
- ``Annotated[X, domain]`` for an explicit domain, e.g. ``Annotated[int, U8]``.
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from enum import Enum
from typing import Any, Callable, Sequence, TypeVar, Union, overload

from cantor.exceptions import NotFiniteError
from cantor.finite import (
    BOOL,
    NONE,
    EnumDomain,
    Finite,
    OptionalDomain,
    PairDomain,
    ProductDomain,
    SumDomain,
    Variant,
)

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)
T = TypeVar("T")

_REGISTRY: dict[type, Finite[Any]] = {
    bool: BOOL,
    type(None): NONE,
}

_ORDERING_MARKER = "__cantor_ordering__"


def register_domain(cls: type, domain: Finite[Any]) -> Finite[Any]:
    """Associate ``domain`` with ``cls`` so it can be resolved from the type."""
    existing = _REGISTRY.get(cls)
    if existing is not None and existing != domain:
        logger.debug("replacing domain for %s: %r -> %r", cls.__qualname__, existing, domain)
    _REGISTRY[cls] = domain
    logger.debug("registered %s with count %d", cls.__qualname__, domain.count)
    return domain


def unregister_domain(cls: type) -> None:
    _REGISTRY.pop(cls, None)


def domain_of(cls: type) -> Finite[Any]:
    domain = _REGISTRY.get(cls)
    if domain is None:
        raise NotFiniteError(f"{cls.__qualname__} has no registered finite domain")
    return domain


def is_finite(cls: type) -> bool:
    return cls in _REGISTRY


def resolve_domain(source: Finite[T] | type) -> Finite[T]:
    """Accept either a domain or a registered type."""
    if isinstance(source, Finite):
        return source
    if isinstance(source, type):
        return domain_of(source)
    raise NotFiniteError(f"cannot resolve a finite domain from {source!r}")


def domain_for_hint(hint: object) -> Finite[Any]:
    """Resolve a type hint to a domain; see the module docstring."""
    if hint is None:
        return NONE
    origin = typing.get_origin(hint)
    if origin is typing.Annotated:
        for extra in getattr(hint, "__metadata__", ()):
            if isinstance(extra, Finite):
                return extra
        return domain_for_hint(typing.get_args(hint)[0])
    if origin is Union or origin is types.UnionType:
        members = typing.get_args(hint)
        present = tuple(member for member in members if member is not type(None))
        if len(present) < len(members):
            inner = (
                domain_for_hint(present[0])
                if len(present) == 1
                else _union_domain(present)
            )
            return OptionalDomain(inner)
        return _union_domain(present)
    if origin is tuple:
        args = typing.get_args(hint)
        if args and args[-1] is Ellipsis:
            raise NotFiniteError(f"{hint!r} has no fixed arity")
        if args == ((),):
            args = ()
        field_domains = tuple(domain_for_hint(arg) for arg in args)
        if len(field_domains) == 2:
            return PairDomain(*field_domains)
        return ProductDomain(field_domains, name=repr(hint))
    if isinstance(hint, type) and hint in _REGISTRY:
        return _REGISTRY[hint]
    raise NotFiniteError(
        f"no finite domain for {hint!r}; register it or annotate an explicit domain"
    )


def _union_domain(members: Sequence[object]) -> SumDomain[Any]:
    classes: list[type] = []
    for member in members:
        if not isinstance(member, type):
            raise NotFiniteError(f"union member {member!r} is not a class")
        for seen in classes:
            if issubclass(member, seen) or issubclass(seen, member):
                raise NotFiniteError(
                    f"union members {seen.__name__} and {member.__name__} overlap"
                )
        classes.append(member)
    variants = tuple(Variant(cls, domain_of(cls)) for cls in _union_order(classes))
    return SumDomain(variants, name=" | ".join(v.cls.__name__ for v in variants))


def _ordering_kinds(cls: type) -> tuple[type, ...] | None:
    kinds = cls.__dict__.get(_ORDERING_MARKER)
    return kinds if isinstance(kinds, tuple) else None


def _union_order(classes: Sequence[type]) -> list[type]:
    """Hint order, except that variants of one registered sum keep that sum's order.

    The variants of a sum already compare by the sum's index, so the slots they
    occupy in the union are refilled in that order.
    """
    ordered = list(classes)
    groups: dict[tuple[type, ...], list[int]] = {}
    for slot, cls in enumerate(classes):
        kinds = _ordering_kinds(cls)
        if kinds is not None and cls in kinds:
            groups.setdefault(kinds, []).append(slot)
    for kinds, slots in groups.items():
        ranked = sorted((classes[slot] for slot in slots), key=kinds.index)
        for slot, cls in zip(slots, ranked):
            ordered[slot] = cls
    return ordered


def install_ordering(cls: type, domain: Finite[Any], kinds: tuple[type, ...]) -> None:
    """Give ``cls`` comparison methods that agree with ``domain``'s indices.

    Instances of any class in ``kinds`` compare with each other; anything else
    is ``NotImplemented``.
    """

    def _key(value: object) -> int:
        return domain.index_of(value)

    def __lt__(self: object, other: object) -> bool:
        if not isinstance(other, kinds):
            return NotImplemented
        return _key(self) < _key(other)

    def __le__(self: object, other: object) -> bool:
        if not isinstance(other, kinds):
            return NotImplemented
        return _key(self) <= _key(other)

    def __gt__(self: object, other: object) -> bool:
        if not isinstance(other, kinds):
            return NotImplemented
        return _key(self) > _key(other)

    def __ge__(self: object, other: object) -> bool:
        if not isinstance(other, kinds):
            return NotImplemented
        return _key(self) >= _key(other)

    for method in (__lt__, __le__, __gt__, __ge__):
        method.__qualname__ = f"{cls.__qualname__}.{method.__name__}"
        setattr(cls, method.__name__, method)
    setattr(cls, _ORDERING_MARKER, kinds)


def _owns_ordering(cls: type) -> bool:
    return "__lt__" in cls.__dict__ and not cls.__dict__.get(_ORDERING_MARKER, False)


def _field_builder(cls: type, names: tuple[str, ...]) -> Callable[..., Any]:
    def build(*parts: Any) -> Any:
        return cls(**dict(zip(names, parts)))

    build.__qualname__ = f"{cls.__qualname__}.<build>"
    return build


def _field_splitter(cls: type, names: tuple[str, ...]) -> Callable[[Any], tuple[Any, ...]]:
    def split(value: Any) -> tuple[Any, ...]:
        if not isinstance(value, cls):
            raise TypeError(f"expected a {cls.__qualname__}, got {type(value).__name__}")
        return tuple(getattr(value, name) for name in names)

    split.__qualname__ = f"{cls.__qualname__}.<split>"
    return split


def _dataclass_domain(cls: type) -> ProductDomain[Any]:
    hints = typing.get_type_hints(cls, include_extras=True)
    names: list[str] = []
    field_domains: list[Finite[Any]] = []
    for spec in dataclasses.fields(cls):
        if not spec.init:
            continue
        names.append(spec.name)
        try:
            field_domains.append(domain_for_hint(hints[spec.name]))
        except NotFiniteError as exc:
            raise NotFiniteError(f"{cls.__qualname__}.{spec.name}: {exc}") from exc
    ordered = tuple(names)
    return ProductDomain(
        tuple(field_domains),
        build=_field_builder(cls, ordered),
        split=_field_splitter(cls, ordered),
        name=cls.__qualname__,
    )


def derive_domain(cls: type) -> Finite[Any]:
    if isinstance(cls, type) and issubclass(cls, Enum):
        return EnumDomain(cls)
    if dataclasses.is_dataclass(cls):
        return _dataclass_domain(cls)
    raise NotFiniteError(
        f"cannot derive a finite domain for {getattr(cls, '__qualname__', cls)!r}; "
        "expected an Enum or a dataclass"
    )


@overload
def finite(cls: C) -> C: ...


@overload
def finite(cls: None = None, *, domain: Finite[Any] | None = None) -> Callable[[C], C]: ...


def finite(cls: Any = None, *, domain: Finite[Any] | None = None) -> Any:
    """Derive (or attach) a domain for a class and register it.

    Classes that do not define their own ``__lt__`` gain comparisons ordered by
    index, which for derived domains is declaration order then field order.
    """

    def wrap(target: C) -> C:
        resolved = domain if domain is not None else derive_domain(target)
        register_domain(target, resolved)
        if not _owns_ordering(target):
            install_ordering(target, resolved, (target,))
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def finite_sum(base: type, *variants: type, name: str | None = None) -> SumDomain[Any]:
    """Register ``base`` as the sum of ``variants`` in the given order.

    Each variant must already have a domain (usually via ``@finite``). Variants
    are re-ordered so that values compare across variants by index.
    """
    if not variants:
        raise ValueError("a sum needs at least one variant")
    domain: SumDomain[Any] = SumDomain(
        tuple(Variant(variant, domain_of(variant)) for variant in variants),
        name=name or base.__qualname__,
    )
    register_domain(base, domain)
    kinds = tuple(variants)
    for variant in variants:
        if not _owns_ordering(variant):
            install_ordering(variant, domain, kinds)
    if base not in kinds and not _owns_ordering(base):
        install_ordering(base, domain, kinds)
    return domain


def values(source: Finite[T] | type) -> typing.Iterator[T]:
    """Every value of a domain (or registered type) in ascending index order."""
    return resolve_domain(source).values()
