"""National Dex ranges per generation."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

@dataclass(frozen=True)
class GenerationRange:
    gen: int
    start: int
    end: int
    region: str

    def __contains__(self, dex_id: object) -> bool:
        return isinstance(dex_id, int) and self.start <= dex_id <= self.end

GENERATION_RANGES: Tuple[GenerationRange, ...] = (
    GenerationRange(1, 1, 151, "Kanto"),
    GenerationRange(2, 152, 251, "Johto"),
    GenerationRange(3, 252, 386, "Hoenn"),
    GenerationRange(4, 387, 493, "Sinnoh"),
    GenerationRange(5, 494, 649, "Unova"),
    GenerationRange(6, 650, 721, "Kalos"),
    GenerationRange(7, 722, 809, "Alola"),
    GenerationRange(8, 810, 905, "Galar"),
    GenerationRange(9, 906, 1025, "Paldea"),
)

def generation_range(gen: int) -> Optional[GenerationRange]:
    for r in GENERATION_RANGES:
        if r.gen == gen:
            return r
    return None

def generation_for_id(dex_id: int) -> int:
    """Generation a dex number was introduced in; ids outside the ranges count as Gen 1."""
    for r in GENERATION_RANGES:
        if dex_id in r:
            return r.gen
    return 1

__all__ = ["GenerationRange","GENERATION_RANGES","generation_range","generation_for_id"]
