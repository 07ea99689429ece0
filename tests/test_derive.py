from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional, Union

import pytest

from cantor import (
    BOOL,
    NONE,
    U8,
    EnumDomain,
    OptionalDomain,
    PairDomain,
    ProductDomain,
    SumDomain,
    domain_for_hint,
    domain_of,
    finite,
    finite_sum,
    register_domain,
    values,
)
from cantor.derive import is_finite, unregister_domain
from cantor.exceptions import NotFiniteError, ValueOutsideDomainError
from tests.finite_helpers import validate
from tests.sample_types import (
    MY_TYPE,
    TILE,
    A,
    B,
    C,
    Color,
    Cross,
    Empty,
    Horizontal,
    MyType,
    Pixel,
    Tile,
    Vertical,
)


def test_enum_indices_follow_declaration_order() -> None:
    domain = domain_of(Color)
    assert isinstance(domain, EnumDomain)
    assert [domain.index_of(color) for color in Color] == [0, 1, 2]
    assert Color.RED < Color.GREEN < Color.BLUE
    assert max(Color) is Color.BLUE


def test_unit_variant_is_a_single_value() -> None:
    domain = domain_of(Empty)
    assert domain.count == 1
    assert domain.nth(0) == Empty()


def test_tile_has_twenty_five_values() -> None:
    # 1 empty, 3 horizontal, 3 vertical, 3 * 3 * 2 crosses.
    assert TILE.count == 25
    assert domain_of(Tile) is TILE
    validate(TILE, 25)


def test_tile_layout_is_declaration_order() -> None:
    assert TILE.index_of(Empty()) == 0
    assert TILE.index_of(Horizontal(Color.RED)) == 1
    assert TILE.index_of(Horizontal(Color.BLUE)) == 3
    assert TILE.index_of(Vertical(Color.RED)) == 4
    assert TILE.index_of(Cross(Color.RED, Color.RED, False)) == 7
    assert TILE.index_of(Cross(Color.RED, Color.RED, True)) == 8
    assert TILE.index_of(Cross(Color.RED, Color.GREEN, False)) == 9
    assert TILE.nth(24) == Cross(Color.BLUE, Color.BLUE, True)


def test_values_compare_across_variants() -> None:
    assert Empty() < Horizontal(Color.RED)
    assert Horizontal(Color.BLUE) < Vertical(Color.RED)
    assert Vertical(Color.BLUE) <= Cross(Color.RED, Color.RED, False)
    assert Cross(Color.GREEN, Color.RED, False) > Cross(Color.RED, Color.BLUE, True)
    assert sorted([Cross(Color.RED, Color.RED, False), Empty(), Vertical(Color.GREEN)]) == [
        Empty(),
        Vertical(Color.GREEN),
        Cross(Color.RED, Color.RED, False),
    ]


def test_comparison_with_foreign_types_is_unsupported() -> None:
    with pytest.raises(TypeError):
        _ = Empty() < 3


def test_sum_values_enumerate_in_order() -> None:
    listed = list(values(MyType))
    assert listed == [
        A(),
        B(False),
        B(True),
        C(False, False),
        C(False, True),
        C(True, False),
        C(True, True),
    ]
    assert MY_TYPE.count == 7


def test_variant_domain_is_still_usable_on_its_own() -> None:
    validate(domain_of(C), 4)
    assert domain_of(C).index_of(C(True, False)) == 2


def test_pixel_fields_resolve_from_hints() -> None:
    domain = domain_of(Pixel)
    assert isinstance(domain, ProductDomain)
    assert domain.count == 256 * 4 * 4
    assert domain.fields[0] is U8
    assert isinstance(domain.fields[1], OptionalDomain)
    assert isinstance(domain.fields[2], PairDomain)
    value = Pixel(level=200, tint=None, pair=(True, False))
    assert domain.index_of(value) == (200 * 4 + 0) * 4 + 2
    assert domain.nth(domain.index_of(value)) == value
    assert Pixel(1, Color.BLUE, (True, True)) < Pixel(2, None, (False, False))


def test_pixel_rejects_out_of_range_field() -> None:
    with pytest.raises(ValueOutsideDomainError):
        domain_of(Pixel).index_of(Pixel(level=300, tint=None, pair=(False, False)))


def test_hint_resolution() -> None:
    assert domain_for_hint(bool) is BOOL
    assert domain_for_hint(None) is NONE
    assert domain_for_hint(type(None)) is NONE
    assert domain_for_hint(Annotated[int, U8]) is U8
    assert domain_for_hint(Optional[Color]).count == 4
    assert domain_for_hint(Color | None).count == 4
    assert domain_for_hint(tuple[bool, bool, bool]).count == 8
    assert domain_for_hint(tuple[()]).count == 1


def test_union_hint_builds_a_sum_in_hint_order() -> None:
    domain = domain_for_hint(Union[Color, B])
    assert isinstance(domain, SumDomain)
    assert domain.count == 5
    assert domain.index_of(Color.BLUE) == 2
    assert domain.index_of(B(True)) == 4
    optional_union = domain_for_hint(Optional[Union[Color, B]])
    assert isinstance(optional_union, OptionalDomain)
    assert optional_union.count == 6


def test_union_of_sum_variants_keeps_the_sum_order() -> None:
    domain = domain_for_hint(Union[B, A])
    assert [variant.cls for variant in domain.variants] == [A, B]
    validate(domain, 3)
    assert list(domain.values()) == [A(), B(False), B(True)]


def test_union_variants_of_a_sum_fill_their_own_slots() -> None:
    domain = domain_for_hint(Union[C, Color, A])
    assert [variant.cls for variant in domain.variants] == [A, Color, C]
    listed = list(domain.values())
    for previous, current in zip(listed, listed[1:]):
        if isinstance(previous, MyType) and isinstance(current, MyType):
            assert previous < current
    assert domain.index_of(A()) == 0
    assert domain.index_of(Color.RED) == 1
    assert domain.index_of(C(False, False)) == 4


def test_overlapping_union_members_are_rejected() -> None:
    with pytest.raises(NotFiniteError, match="overlap"):
        domain_for_hint(Union[Horizontal, Tile])


@pytest.mark.parametrize(
    "hint",
    [
        int,
        str,
        tuple[bool, ...],
        list[bool],
        Annotated[int, "no domain here"],
    ],
)
def test_unsupported_hints_are_rejected(hint: object) -> None:
    with pytest.raises(NotFiniteError):
        domain_for_hint(hint)


def test_dataclass_with_unsupported_field_is_rejected() -> None:
    with pytest.raises(NotFiniteError, match="Broken.size"):

        @finite
        @dataclass(frozen=True)
        class Broken:
            size: int


def test_plain_class_is_rejected() -> None:
    class Plain:
        pass

    with pytest.raises(NotFiniteError):
        finite(Plain)
    with pytest.raises(NotFiniteError):
        domain_of(Plain)


def test_explicit_domain_is_registered() -> None:
    class Level:
        pass

    try:
        finite(domain=U8)(Level)
        assert is_finite(Level)
        assert domain_of(Level) is U8
    finally:
        unregister_domain(Level)
    assert not is_finite(Level)


def test_user_defined_ordering_is_kept() -> None:
    @finite
    @dataclass(frozen=True)
    class Reversed:
        flag: bool

        def __lt__(self, other: object) -> bool:
            if not isinstance(other, Reversed):
                return NotImplemented
            return self.flag and not other.flag

    try:
        assert Reversed(True) < Reversed(False)
        assert domain_of(Reversed).index_of(Reversed(True)) == 1
    finally:
        unregister_domain(Reversed)


def test_finite_sum_requires_registered_variants() -> None:
    class Base:
        pass

    @dataclass(frozen=True)
    class Loose(Base):
        flag: bool

    with pytest.raises(NotFiniteError):
        finite_sum(Base, Loose)
    with pytest.raises(ValueError):
        finite_sum(Base)


def test_register_domain_replaces_existing() -> None:
    class Slot:
        pass

    try:
        register_domain(Slot, BOOL)
        register_domain(Slot, U8)
        assert domain_of(Slot) is U8
    finally:
        unregister_domain(Slot)
