from __future__ import annotations

from typing import List

from pydantic import BaseModel


class WidthEntryDTO(BaseModel):
    bits: int
    width: str
    width_bits: int
    byte_size: int


class WidthLadderDTO(BaseModel):
    entries: List[WidthEntryDTO]


class CountWidthDTO(BaseModel):
    count: int
    bits: int
    width: str
    byte_size: int
    bitmap_width: str | None = None
