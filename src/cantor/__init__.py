"""Order-preserving bijections between finite types and integer ranges."""

from cantor.absent import OUT_OF_RANGE, Absent
from cantor.array_map import ArrayMap
from cantor.bitmap_set import BitmapIterator, BitmapSet, BitmapSetDomain
from cantor.compress import Compressed, CompressedDomain, compress
from cantor.derive import (
    domain_for_hint,
    domain_of,
    finite,
    finite_sum,
    register_domain,
    resolve_domain,
    values,
)
from cantor.exceptions import (
    CantorError,
    CountOverflowError,
    DomainMismatchError,
    NeverRaise,
    NeverThrown,
    NotFiniteError,
    ValueOutsideDomainError,
    WidthOverflowError,
)
from cantor.finite import (
    BOOL,
    NONE,
    U8,
    U16,
    U32,
    U64,
    UNIT,
    BoolDomain,
    EnumDomain,
    Finite,
    OptionalDomain,
    PairDomain,
    ProductDomain,
    SumDomain,
    UintDomain,
    UnitDomain,
    Variant,
    optional,
    pair,
    product,
)
from cantor.invariants import never
from cantor.uint import Width, log2, uint_for_bits, width_for_count

__all__ = [
    "__version__",
    "Absent",
    "ArrayMap",
    "BOOL",
    "BitmapIterator",
    "BitmapSet",
    "BitmapSetDomain",
    "BoolDomain",
    "CantorError",
    "Compressed",
    "CompressedDomain",
    "CountOverflowError",
    "DomainMismatchError",
    "EnumDomain",
    "Finite",
    "NONE",
    "NeverRaise",
    "NeverThrown",
    "NotFiniteError",
    "OUT_OF_RANGE",
    "OptionalDomain",
    "PairDomain",
    "ProductDomain",
    "SumDomain",
    "U16",
    "U32",
    "U64",
    "U8",
    "UNIT",
    "UintDomain",
    "UnitDomain",
    "ValueOutsideDomainError",
    "Variant",
    "Width",
    "WidthOverflowError",
    "compress",
    "domain_for_hint",
    "domain_of",
    "finite",
    "finite_sum",
    "log2",
    "never",
    "optional",
    "pair",
    "product",
    "register_domain",
    "resolve_domain",
    "uint_for_bits",
    "values",
    "width_for_count",
]

__version__ = "0.1.0"
