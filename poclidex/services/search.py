"""Fuzzy name search over the catalog list.

A candidate matches when it contains the query characters in order. Ranking
prefers exact and prefix matches, then contiguous substrings, then difflib's
similarity ratio.
"""
from __future__ import annotations
import difflib
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from rich.markup import escape

from poclidex.api.records import PokemonListItem

HIGHLIGHT_STYLE = "bold yellow"

@dataclass(frozen=True)
class SearchResult:
    name: str
    score: float
    indexes: Tuple[int, ...]
    highlight: str

def match_indexes(query: str, target: str) -> Optional[Tuple[int, ...]]:
    """Positions of `query` characters in `target`, preferring a contiguous run."""
    start = target.find(query)
    if start >= 0:
        return tuple(range(start, start + len(query)))
    out: List[int] = []
    pos = 0
    for ch in query:
        pos = target.find(ch, pos)
        if pos < 0:
            return None
        out.append(pos)
        pos += 1
    return tuple(out)

def score_match(query: str, target: str, indexes: Sequence[int]) -> float:
    score = difflib.SequenceMatcher(None, query, target).ratio()
    if target == query:
        score += 3.0
    elif target.startswith(query):
        score += 2.0
    elif query in target:
        score += 1.0
    # Penalise gaps between matched characters
    gaps = sum(b - a - 1 for a, b in zip(indexes, indexes[1:]))
    return score - 0.01 * gaps

def highlight(target: str, indexes: Sequence[int], style: str = HIGHLIGHT_STYLE) -> str:
    marked = set(indexes)
    parts = []
    for i, ch in enumerate(target):
        text = escape(ch)
        parts.append(f"[{style}]{text}[/{style}]" if i in marked else text)
    return "".join(parts)

class SearchService:
    def __init__(self):
        self._items: List[PokemonListItem] = []
        self._by_name: Dict[str, PokemonListItem] = {}
        self._by_id: Dict[int, PokemonListItem] = {}

    def index_pokemon(self, items: Sequence[PokemonListItem]):
        self._items = list(items)
        self._by_name = {p.name.lower(): p for p in self._items}
        self._by_id = {p.id: p for p in self._items if p.id}

    def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        q = (query or "").strip().lower()
        if not q:
            return []
        results: List[SearchResult] = []
        for item in self._items:
            target = item.name.lower()
            idx = match_indexes(q, target)
            if idx is None:
                continue
            results.append(SearchResult(item.name, score_match(q, target, idx), idx, highlight(item.name, idx)))
        results.sort(key=lambda r: (-r.score, r.name))
        return results[:limit]

    def autocomplete(self, query: str, limit: int = 10) -> List[str]:
        return [r.name for r in self.search(query, limit)]

    def search_by_id(self, pokemon_id: int) -> Optional[PokemonListItem]:
        return self._by_id.get(pokemon_id)

    def get_by_name(self, name: str) -> Optional[PokemonListItem]:
        return self._by_name.get((name or "").lower())

    @property
    def total(self) -> int:
        return len(self._items)

__all__ = ["SearchService","SearchResult","match_indexes","score_match","highlight"]
