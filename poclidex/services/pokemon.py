"""Catalog and detail access with per-resource caches.

Every remote read goes through one of the LRU caches below. The service holds
no generation state itself; it asks the GenerationSession it was built with.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from poclidex.api.client import extract_evolution_chain_id
from poclidex.api.records import (
    AbilityDetail, ChainLink, EvolutionChain, Pokemon, PokemonListItem, Species, capitalize_name,
)
from poclidex.core.errors import NotFoundError, UpstreamFailure
from poclidex.core.logging import logger
from poclidex.data import generations
from poclidex.models.pokemon import DisplayEntity, introduced_generation, transform_pokemon
from poclidex.services.generation import GenerationSession
from poclidex.services.moves import MoveRecord, MoveResolver
from poclidex.utils.cache import MISS, LRUCache

NameOrId = Union[str, int]

ABILITY_UNAVAILABLE = "Ability details unavailable."

@dataclass(frozen=True)
class EvolutionStage:
    species: str
    method: str = ""
    evolves_to: Tuple["EvolutionStage", ...] = ()

def _cache_key(name_or_id: NameOrId) -> Union[str, int]:
    if isinstance(name_or_id, int):
        return name_or_id
    text = str(name_or_id).strip().lower()
    return int(text) if text.isdigit() else text

class PokemonService:
    def __init__(self, api, session: GenerationSession, resolver: Optional[MoveResolver] = None):
        self.api = api
        self.session = session
        self.pokemon_cache: LRUCache[Union[str, int], Pokemon] = LRUCache(200)
        self.species_cache: LRUCache[Union[str, int], Species] = LRUCache(200)
        self.ability_cache: LRUCache[Tuple[str, bool], AbilityDetail] = LRUCache(100)
        self.evolution_cache: LRUCache[int, EvolutionChain] = LRUCache(50)
        self.resolver = resolver or MoveResolver(api, pokemon_loader=self.get_pokemon)
        self._pokemon_list: List[PokemonListItem] = []

    # ---- catalog

    async def load_pokemon_list(self) -> List[PokemonListItem]:
        if not self._pokemon_list:
            self._pokemon_list = await self.api.get_pokemon_list(100000, 0)
            logger.info("PokemonListLoaded", count=len(self._pokemon_list))
        return self._pokemon_list

    async def get_pokemon_list(self, generation: Optional[int] = None, limit: Optional[int] = None,
                               offset: Optional[int] = None) -> List[PokemonListItem]:
        items = await self.load_pokemon_list()
        if generation is not None:
            rng = generations.generation_range(generation)
            if rng is not None:
                items = [p for p in items if p.id in rng]
        if limit is not None or offset is not None:
            start = offset or 0
            stop = start + (limit or len(items))
            items = items[start:stop]
        return list(items)

    # ---- entities

    async def get_pokemon(self, name_or_id: NameOrId) -> Pokemon:
        key = _cache_key(name_or_id)
        cached = self.pokemon_cache.get(key)
        if cached is not MISS:
            logger.debug("PokemonCacheHit", key=key)
            return cached
        pokemon = await self.api.get_pokemon(key)
        self.pokemon_cache.set(pokemon.name, pokemon)
        self.pokemon_cache.set(pokemon.id, pokemon)
        return pokemon

    async def get_species(self, name_or_id: NameOrId) -> Species:
        key = _cache_key(name_or_id)
        cached = self.species_cache.get(key)
        if cached is not MISS:
            return cached
        species = await self.api.get_pokemon_species(key)
        self.species_cache.set(species.name, species)
        self.species_cache.set(species.id, species)
        return species

    async def get_pokemon_details(self, name_or_id: NameOrId, generation: Optional[int] = None) -> DisplayEntity:
        pokemon = await self.get_pokemon(name_or_id)
        # Form entities (giratina-altered, deoxys-normal) share their species' record
        species = await self.get_species(pokemon.species_name or pokemon.id)
        if generation is None:
            generation = self.session.effective(introduced_generation(pokemon, species))
        return transform_pokemon(pokemon, species, generation)

    async def get_moves(self, pokemon_id: int, generation: Optional[int] = None,
                        introduced: Optional[int] = None) -> List[MoveRecord]:
        if generation is None:
            generation = self.session.current()
        return await self.resolver.resolve_moves(pokemon_id, generation, introduced)

    async def get_ability_details(self, name: str, is_hidden: bool = False) -> AbilityDetail:
        """Never raises on upstream failure; one missing ability should not block a view."""
        key = (name, is_hidden)
        cached = self.ability_cache.get(key)
        if cached is not MISS:
            return cached
        try:
            detail = await self.api.get_ability(name)
        except UpstreamFailure as e:
            logger.warn("AbilityFetchFailed", ability=name, error=str(e))
            return AbilityDetail(
                name=name,
                display_name=capitalize_name(name),
                description=ABILITY_UNAVAILABLE,
                effect="",
                generation=1,
                is_hidden=is_hidden,
            )
        if detail.is_hidden != is_hidden:
            detail = AbilityDetail(detail.name, detail.display_name, detail.description,
                                   detail.effect, detail.generation, is_hidden)
        self.ability_cache.set(key, detail)
        return detail

    # ---- evolution

    async def get_evolution_chain(self, display: DisplayEntity) -> EvolutionChain:
        if not display.evolution_chain_url:
            raise NotFoundError(f"evolution chain for {display.display_name}", "no evolution chain")
        chain_id = extract_evolution_chain_id(display.evolution_chain_url)
        cached = self.evolution_cache.get(chain_id)
        if cached is not MISS:
            return cached
        chain = await self.api.get_evolution_chain(chain_id)
        self.evolution_cache.set(chain_id, chain)
        return chain

    @staticmethod
    def parse_evolution_chain(chain: EvolutionChain) -> List[List[str]]:
        """Species names grouped by evolution depth."""
        stages: List[List[str]] = []

        def walk(link: ChainLink, depth: int):
            if len(stages) <= depth:
                stages.append([])
            stages[depth].append(link.species)
            for nxt in link.evolves_to:
                walk(nxt, depth + 1)

        walk(chain.chain, 0)
        return stages

    @classmethod
    def parse_evolution_chain_structured(cls, chain: EvolutionChain) -> EvolutionStage:
        def build(link: ChainLink) -> EvolutionStage:
            return EvolutionStage(
                species=link.species,
                method=cls.evolution_trigger(link),
                evolves_to=tuple(build(n) for n in link.evolves_to),
            )
        return build(chain.chain)

    @staticmethod
    def evolution_trigger(link: ChainLink) -> str:
        if not link.details:
            return ""
        d = link.details[0]
        parts: List[str] = []
        if d.min_level:
            parts.append(f"Lv.{d.min_level}")
        if d.item:
            parts.append(d.item.replace("-", " "))
        if d.trigger == "trade":
            parts.append("Trade")
        if d.min_happiness:
            parts.append(f"Happiness {d.min_happiness}")
        if d.time_of_day:
            parts.append(d.time_of_day)
        if d.known_move:
            parts.append(f"knows {d.known_move}")
        if d.location:
            parts.append(f"at {d.location}")
        return ", ".join(parts) if parts else d.trigger

    # ---- misc

    @staticmethod
    def generation_for_id(pokemon_id: int) -> int:
        return generations.generation_for_id(pokemon_id)

    def clear_cache(self):
        self.pokemon_cache.clear()
        self.species_cache.clear()
        self.ability_cache.clear()
        self.evolution_cache.clear()
        self.resolver.clear_cache()
        logger.debug("CachesCleared")

__all__ = ["PokemonService","EvolutionStage","ABILITY_UNAVAILABLE"]
