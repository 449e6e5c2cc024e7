"""Generation-aware learnset resolution.

For each move a Pokemon can learn, keep only the learn records from releases
at or before the effective generation and pick the most advanced one. The
result is sorted for display and enriched with move metadata.
"""
from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from poclidex.api.records import LEARN_METHODS, LearnRecord, MoveDetail, Pokemon, PokemonMove
from poclidex.core.logging import logger
from poclidex.data.generations import generation_for_id
from poclidex.data.version_groups import generation_of, release_order
from poclidex.utils.cache import MISS, LRUCache

METHOD_PRIORITY: Dict[str, int] = {m: i for i, m in enumerate(LEARN_METHODS)}

@dataclass(frozen=True)
class LearnedMove:
    """A move plus the learn record chosen for the viewed generation."""
    name: str
    method: str
    level: int
    generation: int
    version_group: str

@dataclass(frozen=True)
class MoveRecord:
    name: str
    type: str
    category: str
    power: Optional[int]
    accuracy: Optional[int]
    pp: int
    learn_method: str
    level_learned: Optional[int]
    generation: Optional[int]
    description: str

def _record_rank(record: LearnRecord) -> Tuple[int, int, int]:
    # Higher is better: generation, then later release, then method priority
    return (
        generation_of(record.version_group),
        release_order(record.version_group),
        -METHOD_PRIORITY.get(record.method, len(METHOD_PRIORITY)),
    )

def select_learn_record(learns: Sequence[LearnRecord], generation: int) -> Optional[LearnRecord]:
    """Most advanced learn record still valid at `generation`, or None."""
    valid = [r for r in learns if generation_of(r.version_group) <= generation]
    if not valid:
        return None
    # max keeps the first maximal element, so full ties fall back to input order
    return max(valid, key=_record_rank)

def sort_key(move: LearnedMove):
    priority = METHOD_PRIORITY.get(move.method, len(METHOD_PRIORITY))
    level = move.level if move.method == "level-up" else 0
    return (priority, level, move.name)

def resolve_learnset(moves: Sequence[PokemonMove], generation: int) -> List[LearnedMove]:
    """Selection and ordering without any fetching."""
    learned: List[LearnedMove] = []
    for move in moves:
        record = select_learn_record(move.learns, generation)
        if record is None:
            continue
        learned.append(LearnedMove(
            name=move.name,
            method=record.method,
            level=record.level,
            generation=generation_of(record.version_group),
            version_group=record.version_group,
        ))
    learned.sort(key=sort_key)
    return learned

class MoveResolver:
    """Resolves and enriches a Pokemon's moves for a generation.

    `api` must provide `async get_move(name) -> MoveDetail`. Raw entities
    come from `pokemon_loader` (defaults to `api.get_pokemon`) so a caller
    with its own entity cache can share it.
    """
    def __init__(self, api, pokemon_loader: Optional[Callable[[int], Awaitable[Pokemon]]] = None,
                 cache_size: int = 500):
        self.api = api
        self._load_pokemon = pokemon_loader or api.get_pokemon
        self.cache: LRUCache[str, MoveDetail] = LRUCache(cache_size)

    async def resolve_moves(self, pokemon_id: int, generation: int,
                            introduced_generation: Optional[int] = None) -> List[MoveRecord]:
        introduced = introduced_generation or generation_for_id(pokemon_id)
        effective = max(generation, introduced)
        pokemon = await self._load_pokemon(pokemon_id)
        learned = resolve_learnset(pokemon.moves, effective)
        details = await asyncio.gather(*(self.get_move_detail(m.name) for m in learned))
        logger.debug("MovesResolved", pokemon=pokemon.name, generation=effective, count=len(learned))
        return [self._merge(m, d) for m, d in zip(learned, details)]

    async def get_move_detail(self, name: str) -> MoveDetail:
        cached = self.cache.get(name)
        if cached is not MISS:
            return cached
        detail = await self.api.get_move(name)
        self.cache.set(name, detail)
        return detail

    @staticmethod
    def _merge(move: LearnedMove, detail: MoveDetail) -> MoveRecord:
        return MoveRecord(
            name=move.name,
            type=detail.type,
            category=detail.category,
            power=detail.power,
            accuracy=detail.accuracy,
            pp=detail.pp,
            learn_method=move.method,
            level_learned=move.level if move.method == "level-up" else None,
            generation=detail.generation,
            description=detail.description,
        )

    def clear_cache(self):
        self.cache.clear()

__all__ = [
    "LearnedMove","MoveRecord","MoveResolver","METHOD_PRIORITY","select_learn_record",
    "resolve_learnset","sort_key",
]
