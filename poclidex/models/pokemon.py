"""Display model for a single Pokemon.

`transform_pokemon` turns a raw API record (plus optional species metadata)
into a DisplayEntity. When a generation is given, types and abilities are
rewritten to what that generation showed; everything else is generation
independent.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from poclidex.api.records import NO_DESCRIPTION, Pokemon, Species, StatEntry, TypeOverride, capitalize_name
from poclidex.data.ability_changes import ResolvedAbility, apply_overrides
from poclidex.data.generations import generation_for_id

# Hidden abilities exist from Generation V onward
HIDDEN_ABILITY_GENERATION = 5

STAT_KEYS: Dict[str, str] = {
    "hp": "hp",
    "attack": "attack",
    "defense": "defense",
    "special-attack": "special_attack",
    "special-defense": "special_defense",
    "speed": "speed",
}

@dataclass(frozen=True)
class StatBlock:
    hp: int = 0
    attack: int = 0
    defense: int = 0
    special_attack: int = 0
    special_defense: int = 0
    speed: int = 0

    @property
    def total(self) -> int:
        return self.hp + self.attack + self.defense + self.special_attack + self.special_defense + self.speed

    def items(self) -> Tuple[Tuple[str, int], ...]:
        return (
            ("HP", self.hp), ("Attack", self.attack), ("Defense", self.defense),
            ("Sp. Atk", self.special_attack), ("Sp. Def", self.special_defense), ("Speed", self.speed),
        )

@dataclass(frozen=True)
class DisplayEntity:
    id: int
    name: str
    display_name: str
    generation: int                         # introduced-in generation
    types: Tuple[str, ...]
    abilities: Tuple[ResolvedAbility, ...]
    stats: StatBlock
    ev_yield: StatBlock
    height: int                             # decimeters
    weight: int                             # hectograms
    sprite: Optional[str] = None
    shiny_sprite: Optional[str] = None
    artwork_sprite: Optional[str] = None
    is_legendary: bool = False
    is_mythical: bool = False
    genus: str = ""
    flavor_text: str = NO_DESCRIPTION
    evolution_chain_url: str = ""
    view_generation: Optional[int] = None    # generation the types and abilities reflect

    @property
    def stat_total(self) -> int:
        return self.stats.total

    @property
    def height_text(self) -> str:
        return format_height(self.height)

    @property
    def weight_text(self) -> str:
        return format_weight(self.weight)

def transform_pokemon(pokemon: Pokemon, species: Optional[Species] = None,
                      generation: Optional[int] = None) -> DisplayEntity:
    if generation is None:
        types = tuple(pokemon.types)
        abilities = tuple(ResolvedAbility(a.name, a.is_hidden) for a in pokemon.abilities)
    else:
        types = resolve_types(pokemon.types, pokemon.past_types, generation)
        abilities = resolve_abilities(pokemon, generation)
    return DisplayEntity(
        id=pokemon.id,
        name=pokemon.name,
        display_name=capitalize_name(pokemon.name),
        generation=introduced_generation(pokemon, species),
        types=types,
        abilities=abilities,
        stats=extract_stats(pokemon.stats),
        ev_yield=extract_ev_yield(pokemon.stats),
        height=pokemon.height,
        weight=pokemon.weight,
        sprite=pokemon.sprites.front_default,
        shiny_sprite=pokemon.sprites.front_shiny,
        artwork_sprite=pokemon.sprites.artwork,
        is_legendary=bool(species and species.is_legendary),
        is_mythical=bool(species and species.is_mythical),
        genus=species.genus if species else "",
        flavor_text=(species.flavor_text if species else "") or NO_DESCRIPTION,
        evolution_chain_url=species.evolution_chain_url if species else "",
        view_generation=generation,
    )

def resolve_types(current: Sequence[str], past_types: Sequence[TypeOverride], generation: int) -> Tuple[str, ...]:
    """Use the earliest override whose epoch is still in the future for `generation`."""
    applicable = [p for p in past_types if generation < p.epoch]
    if not applicable:
        return tuple(current)
    return tuple(min(applicable, key=lambda p: p.epoch).types)

def resolve_abilities(pokemon: Pokemon, generation: int) -> Tuple[ResolvedAbility, ...]:
    resolved = apply_overrides(pokemon.id, pokemon.name, pokemon.abilities, generation)
    if generation < HIDDEN_ABILITY_GENERATION:
        resolved = [a for a in resolved if not a.is_hidden]
    return tuple(resolved)

def introduced_generation(pokemon: Pokemon, species: Optional[Species] = None) -> int:
    if species is not None and species.generation:
        return species.generation
    return generation_for_id(pokemon.id)

def _stat_block(stats: Sequence[StatEntry], attr: str) -> StatBlock:
    values = {STAT_KEYS[s.name]: getattr(s, attr) for s in stats if s.name in STAT_KEYS}
    return StatBlock(**values)

def extract_stats(stats: Sequence[StatEntry]) -> StatBlock:
    return _stat_block(stats, "base")

def extract_ev_yield(stats: Sequence[StatEntry]) -> StatBlock:
    return _stat_block(stats, "effort")

def format_height(decimeters: int) -> str:
    return f"{decimeters / 10:.1f}m"

def format_weight(hectograms: int) -> str:
    return f"{hectograms / 10:.1f}kg"

__all__ = [
    "DisplayEntity","StatBlock","transform_pokemon","resolve_types","resolve_abilities",
    "introduced_generation","extract_stats","extract_ev_yield","format_height","format_weight",
    "HIDDEN_ABILITY_GENERATION",
]
