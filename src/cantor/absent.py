"""The absent-result sentinel returned by ``nth`` for out-of-range indices."""

from __future__ import annotations

from enum import Enum
from typing import Final, Literal, TypeAlias


class Absent(Enum):
    OUT_OF_RANGE = "out_of_range"

    def __repr__(self) -> str:
        return "OUT_OF_RANGE"

    def __bool__(self) -> bool:
        return False


# ``None`` is a legitimate value of optional domains, so absence needs its own
# singleton.
OUT_OF_RANGE: Final = Absent.OUT_OF_RANGE

OutOfRange: TypeAlias = Literal[Absent.OUT_OF_RANGE]
