"""Historical ability changes across generations.

PokeAPI only returns current abilities. This table lists every species whose
ability in some slot was replaced, together with the generation in which the
new ability took effect. Viewing any earlier generation shows the old one.

Matching is by dex id or by name; each id has at most one record per slot
transition, so the two keys never disagree inside the table.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

AbilitySlotName = Literal["ability1", "ability2", "hidden"]

@dataclass(frozen=True)
class AbilityChange:
    pokemon_id: int
    pokemon_name: str
    old_ability: str
    new_ability: str
    slot: AbilitySlotName
    change_generation: int
    form: Optional[str] = None
    notes: str = ""

@dataclass(frozen=True)
class ResolvedAbility:
    name: str
    is_hidden: bool

POKEMON_ABILITY_CHANGES: Tuple[AbilityChange, ...] = (
    # Within Generation V (Black 2 / White 2)
    AbilityChange(550, "basculin", "reckless", "rock-head", "ability1", 5,
                  form="blue-striped", notes="Changed within Generation V (Black 2/White 2)"),

    # Generation V -> VI (hidden abilities)
    AbilityChange(145, "zapdos", "lightningrod", "static", "hidden", 6,
                  notes="Hidden ability was unobtainable in Gen 5"),
    AbilityChange(543, "venipede", "quick-feet", "speed-boost", "hidden", 6),
    AbilityChange(544, "whirlipede", "quick-feet", "speed-boost", "hidden", 6),
    AbilityChange(545, "scolipede", "quick-feet", "speed-boost", "hidden", 6,
                  notes="Speed Boost replaced Quick Feet"),
    AbilityChange(607, "litwick", "shadow-tag", "infiltrator", "hidden", 6,
                  notes="Hidden ability was unobtainable in Gen 5"),
    AbilityChange(608, "lampent", "shadow-tag", "infiltrator", "hidden", 6,
                  notes="Hidden ability was unobtainable in Gen 5"),
    AbilityChange(609, "chandelure", "shadow-tag", "infiltrator", "hidden", 6,
                  notes="Hidden ability was unobtainable in Gen 5"),

    # Generation VI -> VII
    AbilityChange(94, "gengar", "levitate", "cursed-body", "ability1", 7,
                  notes="Lost the Ground immunity"),
    AbilityChange(243, "raikou", "volt-absorb", "inner-focus", "hidden", 7,
                  notes="Hidden ability was unobtainable in Gen 5-6"),
    AbilityChange(244, "entei", "flash-fire", "inner-focus", "hidden", 7,
                  notes="Hidden ability was unobtainable in Gen 5-6"),
    AbilityChange(245, "suicune", "water-absorb", "inner-focus", "hidden", 7,
                  notes="Hidden ability was unobtainable in Gen 5-6"),

    # Generation VIII -> IX
    AbilityChange(275, "shiftry", "early-bird", "wind-rider", "hidden", 9),
    AbilityChange(393, "piplup", "defiant", "competitive", "hidden", 9),
    AbilityChange(394, "prinplup", "defiant", "competitive", "hidden", 9),
    AbilityChange(395, "empoleon", "defiant", "competitive", "hidden", 9,
                  notes="Raises Sp. Atk instead of Attack"),
)

def _validate(changes: Iterable[AbilityChange]) -> None:
    for c in changes:
        if c.old_ability == c.new_ability:
            raise ValueError(f"Ability change for {c.pokemon_name} does not change anything")
        if not 1 <= c.change_generation <= 9:
            raise ValueError(f"Ability change for {c.pokemon_name} has generation {c.change_generation}")

_validate(POKEMON_ABILITY_CHANGES)

def find_overrides(pokemon_id: int, pokemon_name: str, generation: int,
                   changes: Sequence[AbilityChange] = POKEMON_ABILITY_CHANGES) -> List[AbilityChange]:
    """Changes that have not happened yet as of `generation`."""
    found: List[AbilityChange] = []
    for change in changes:
        if change.pokemon_id != pokemon_id and change.pokemon_name != pokemon_name:
            continue
        if generation < change.change_generation:
            found.append(change)
    return found

def apply_overrides(pokemon_id: int, pokemon_name: str, abilities: Iterable, generation: int,
                    changes: Sequence[AbilityChange] = POKEMON_ABILITY_CHANGES) -> List[ResolvedAbility]:
    """Rewrite current abilities to what `generation` showed.

    `abilities` items need `name` and `is_hidden` attributes (slot is dropped).
    """
    replacements = {c.new_ability: c.old_ability
                    for c in find_overrides(pokemon_id, pokemon_name, generation, changes)}
    return [ResolvedAbility(name=replacements.get(a.name, a.name), is_hidden=a.is_hidden)
            for a in abilities]

__all__ = ["AbilityChange","ResolvedAbility","POKEMON_ABILITY_CHANGES","find_overrides","apply_overrides"]
