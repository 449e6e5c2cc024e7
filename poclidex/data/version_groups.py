"""Version group -> generation table.

PokeAPI scopes learnsets to version groups (one or more game releases). The
table below is in release order; unknown groups are assumed to be from the
latest generation.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

MIN_GENERATION = 1
MAX_GENERATION = 9

@dataclass(frozen=True)
class VersionGroup:
    name: str
    generation: int

VERSION_GROUPS: Tuple[VersionGroup, ...] = (
    # Generation I
    VersionGroup("red-blue", 1),
    VersionGroup("yellow", 1),
    # Generation II
    VersionGroup("gold-silver", 2),
    VersionGroup("crystal", 2),
    # Generation III
    VersionGroup("ruby-sapphire", 3),
    VersionGroup("emerald", 3),
    VersionGroup("firered-leafgreen", 3),
    VersionGroup("colosseum", 3),
    VersionGroup("xd", 3),
    # Generation IV
    VersionGroup("diamond-pearl", 4),
    VersionGroup("platinum", 4),
    VersionGroup("heartgold-soulsilver", 4),
    # Generation V
    VersionGroup("black-white", 5),
    VersionGroup("black-2-white-2", 5),
    # Generation VI
    VersionGroup("x-y", 6),
    VersionGroup("omega-ruby-alpha-sapphire", 6),
    # Generation VII
    VersionGroup("sun-moon", 7),
    VersionGroup("ultra-sun-ultra-moon", 7),
    VersionGroup("lets-go-pikachu-lets-go-eevee", 7),
    # Generation VIII
    VersionGroup("sword-shield", 8),
    VersionGroup("the-isle-of-armor", 8),
    VersionGroup("the-crown-tundra", 8),
    VersionGroup("brilliant-diamond-shining-pearl", 8),
    VersionGroup("legends-arceus", 8),
    # Generation IX
    VersionGroup("scarlet-violet", 9),
    VersionGroup("the-teal-mask", 9),
    VersionGroup("the-indigo-disk", 9),
)

VERSION_GROUP_TO_GENERATION: Dict[str, int] = {vg.name: vg.generation for vg in VERSION_GROUPS}
_RELEASE_ORDER: Dict[str, int] = {vg.name: i for i, vg in enumerate(VERSION_GROUPS)}

# Most complete release of each generation
LATEST_VERSION_GROUP_PER_GEN: Dict[int, str] = {
    1: "yellow",
    2: "crystal",
    3: "emerald",
    4: "platinum",
    5: "black-2-white-2",
    6: "omega-ruby-alpha-sapphire",
    7: "ultra-sun-ultra-moon",
    8: "sword-shield",
    9: "scarlet-violet",
}

GENERATION_NAME_TO_NUM: Dict[str, int] = {
    "generation-i": 1,
    "generation-ii": 2,
    "generation-iii": 3,
    "generation-iv": 4,
    "generation-v": 5,
    "generation-vi": 6,
    "generation-vii": 7,
    "generation-viii": 8,
    "generation-ix": 9,
}

def generation_of(version_group: str) -> int:
    return VERSION_GROUP_TO_GENERATION.get(version_group, MAX_GENERATION)

def is_at_or_before(version_group: str, max_generation: int) -> bool:
    return generation_of(version_group) <= max_generation

def latest_version_group(generation: int) -> Optional[str]:
    return LATEST_VERSION_GROUP_PER_GEN.get(generation)

def release_order(version_group: str) -> int:
    """Position in release order; unknown groups sort after every known one."""
    return _RELEASE_ORDER.get(version_group, len(VERSION_GROUPS))

def generation_from_name(name: str | None) -> Optional[int]:
    """Map 'generation-vi' style names to 6."""
    if not name:
        return None
    return GENERATION_NAME_TO_NUM.get(name)

__all__ = [
    "VersionGroup","VERSION_GROUPS","VERSION_GROUP_TO_GENERATION","LATEST_VERSION_GROUP_PER_GEN",
    "MIN_GENERATION","MAX_GENERATION","generation_of","is_at_or_before","latest_version_group",
    "release_order","generation_from_name",
]
