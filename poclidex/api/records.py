"""Typed records parsed from PokeAPI JSON.

Parsing happens once at the fetch boundary. Required entity fields raise
MalformedInput; optional species metadata falls back to defaults.
"""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from poclidex.core.errors import MalformedInput
from poclidex.data.version_groups import generation_from_name

LearnMethod = Literal["level-up", "machine", "egg", "tutor", "other"]
LEARN_METHODS: Tuple[str, ...] = ("level-up", "machine", "egg", "tutor", "other")

NO_DESCRIPTION = "No description available."

_ID_IN_URL = re.compile(r"/(\d+)/?$")

@dataclass(frozen=True)
class TypeOverride:
    epoch: int                 # types below applied before this generation
    types: Tuple[str, ...]

@dataclass(frozen=True)
class AbilitySlot:
    name: str
    is_hidden: bool
    slot: int

@dataclass(frozen=True)
class StatEntry:
    name: str
    base: int
    effort: int

@dataclass(frozen=True)
class Sprites:
    front_default: Optional[str] = None
    front_shiny: Optional[str] = None
    artwork: Optional[str] = None

@dataclass(frozen=True)
class LearnRecord:
    method: LearnMethod
    level: int
    version_group: str

@dataclass(frozen=True)
class PokemonMove:
    name: str
    learns: Tuple[LearnRecord, ...]

@dataclass(frozen=True)
class Pokemon:
    id: int
    name: str
    types: Tuple[str, ...]
    abilities: Tuple[AbilitySlot, ...] = ()
    past_types: Tuple[TypeOverride, ...] = ()
    stats: Tuple[StatEntry, ...] = ()
    moves: Tuple[PokemonMove, ...] = ()
    sprites: Sprites = field(default_factory=Sprites)
    height: int = 0
    weight: int = 0
    base_experience: Optional[int] = None
    species_name: str = ""

@dataclass(frozen=True)
class Species:
    id: int
    name: str
    generation: Optional[int] = None
    is_legendary: bool = False
    is_mythical: bool = False
    genus: str = ""
    flavor_text: str = NO_DESCRIPTION
    evolution_chain_url: str = ""

@dataclass(frozen=True)
class PokemonListItem:
    name: str
    url: str
    id: int

@dataclass(frozen=True)
class MoveDetail:
    name: str
    type: str
    category: str
    power: Optional[int]
    accuracy: Optional[int]
    pp: int
    generation: Optional[int]
    description: str

@dataclass(frozen=True)
class AbilityDetail:
    name: str
    display_name: str
    description: str
    effect: str
    generation: int
    is_hidden: bool = False

@dataclass(frozen=True)
class EvolutionDetail:
    trigger: str
    min_level: Optional[int] = None
    item: Optional[str] = None
    min_happiness: Optional[int] = None
    time_of_day: str = ""
    known_move: Optional[str] = None
    location: Optional[str] = None

@dataclass(frozen=True)
class ChainLink:
    species: str
    details: Tuple[EvolutionDetail, ...] = ()
    evolves_to: Tuple["ChainLink", ...] = ()

@dataclass(frozen=True)
class EvolutionChain:
    id: int
    chain: ChainLink

# ---------------------------------------------------------------- helpers

def id_from_url(url: str) -> Optional[int]:
    m = _ID_IN_URL.search(url or "")
    return int(m.group(1)) if m else None

def _name(resource: Any) -> Optional[str]:
    if isinstance(resource, Mapping):
        n = resource.get("name")
        return n if isinstance(n, str) else None
    return None

def _english(entries: Any, key: str) -> List[str]:
    out: List[str] = []
    for e in entries or []:
        if not isinstance(e, Mapping):
            continue
        if _name(e.get("language")) == "en" and isinstance(e.get(key), str):
            out.append(e[key])
    return out

def clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text.replace("\f", " ")).strip()

def _require(data: Mapping[str, Any], key: str, record: str) -> Any:
    if key not in data or data[key] is None:
        raise MalformedInput(record, f"missing '{key}'")
    return data[key]

def learn_method(name: Optional[str]) -> LearnMethod:
    return name if name in LEARN_METHODS else "other"  # type: ignore[return-value]

# ---------------------------------------------------------------- parsers

def parse_pokemon(data: Any) -> Pokemon:
    if not isinstance(data, Mapping):
        raise MalformedInput("pokemon", "expected an object")
    pid = _require(data, "id", "pokemon")
    name = _require(data, "name", "pokemon")
    raw_types = _require(data, "types", "pokemon")
    try:
        types = tuple(t["type"]["name"] for t in sorted(raw_types, key=lambda t: t.get("slot", 0)))
        abilities = tuple(
            AbilitySlot(name=a["ability"]["name"], is_hidden=bool(a.get("is_hidden")), slot=int(a.get("slot", 0)))
            for a in data.get("abilities") or []
        )
        past: List[TypeOverride] = []
        for p in data.get("past_types") or []:
            epoch = generation_from_name(_name(p.get("generation")))
            if epoch is None:
                continue
            past.append(TypeOverride(
                epoch=epoch,
                types=tuple(t["type"]["name"] for t in sorted(p.get("types") or [], key=lambda t: t.get("slot", 0))),
            ))
        stats = tuple(
            StatEntry(name=s["stat"]["name"], base=int(s.get("base_stat", 0)), effort=int(s.get("effort", 0)))
            for s in data.get("stats") or []
        )
        moves = tuple(
            PokemonMove(
                name=m["move"]["name"],
                learns=tuple(
                    LearnRecord(
                        method=learn_method(_name(d.get("move_learn_method"))),
                        level=int(d.get("level_learned_at") or 0),
                        version_group=_name(d.get("version_group")) or "",
                    )
                    for d in m.get("version_group_details") or []
                ),
            )
            for m in data.get("moves") or []
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise MalformedInput("pokemon", f"{name}: {e!r}") from e
    sprites_raw = data.get("sprites")
    if not isinstance(sprites_raw, Mapping):
        sprites_raw = {}
    other = sprites_raw.get("other") or {}
    artwork = (other.get("official-artwork") or {}).get("front_default")
    return Pokemon(
        id=int(pid),
        name=str(name),
        types=types,
        abilities=abilities,
        past_types=tuple(past),
        stats=stats,
        moves=moves,
        sprites=Sprites(
            front_default=sprites_raw.get("front_default"),
            front_shiny=sprites_raw.get("front_shiny"),
            artwork=artwork,
        ),
        height=int(data.get("height") or 0),
        weight=int(data.get("weight") or 0),
        base_experience=data.get("base_experience"),
        species_name=_name(data.get("species")) or str(name),
    )

def parse_species(data: Any) -> Species:
    """Species metadata never raises; absent fields take defaults."""
    if not isinstance(data, Mapping):
        data = {}
    genus = next(iter(_english(data.get("genera"), "genus")), "")
    flavors = _english(data.get("flavor_text_entries"), "flavor_text")
    flavor = clean_text(flavors[-1]) if flavors else NO_DESCRIPTION
    chain = data.get("evolution_chain")
    chain_url = chain.get("url", "") if isinstance(chain, Mapping) else ""
    try:
        sid = int(data.get("id") or 0)
    except (TypeError, ValueError):
        sid = 0
    return Species(
        id=sid,
        name=str(data.get("name") or ""),
        generation=generation_from_name(_name(data.get("generation"))),
        is_legendary=bool(data.get("is_legendary")),
        is_mythical=bool(data.get("is_mythical")),
        genus=genus,
        flavor_text=flavor or NO_DESCRIPTION,
        evolution_chain_url=chain_url or "",
    )

def parse_pokemon_list(data: Any) -> List[PokemonListItem]:
    if not isinstance(data, Mapping) or not isinstance(data.get("results"), list):
        raise MalformedInput("pokemon list", "missing 'results'")
    items: List[PokemonListItem] = []
    for r in data["results"]:
        if not isinstance(r, Mapping) or not r.get("name"):
            raise MalformedInput("pokemon list", f"bad entry {r!r}")
        url = r.get("url") or ""
        items.append(PokemonListItem(name=r["name"], url=url, id=id_from_url(url) or 0))
    return items

def parse_move(data: Any) -> MoveDetail:
    if not isinstance(data, Mapping):
        raise MalformedInput("move", "expected an object")
    name = _require(data, "name", "move")
    short = next(iter(_english(data.get("effect_entries"), "short_effect")), "")
    chance = data.get("effect_chance")
    if chance is not None:
        short = short.replace("$effect_chance", str(chance))
    return MoveDetail(
        name=name,
        type=_name(data.get("type")) or "normal",
        category=_name(data.get("damage_class")) or "status",
        power=data.get("power"),
        accuracy=data.get("accuracy"),
        pp=int(data.get("pp") or 0),
        generation=generation_from_name(_name(data.get("generation"))),
        description=clean_text(short),
    )

def parse_ability(data: Any, is_hidden: bool = False) -> AbilityDetail:
    if not isinstance(data, Mapping):
        raise MalformedInput("ability", "expected an object")
    name = _require(data, "name", "ability")
    names = _english(data.get("names"), "name")
    short = next(iter(_english(data.get("effect_entries"), "short_effect")), "")
    effect = next(iter(_english(data.get("effect_entries"), "effect")), "")
    flavors = _english(data.get("flavor_text_entries"), "flavor_text")
    return AbilityDetail(
        name=name,
        display_name=names[0] if names else capitalize_name(name),
        description=clean_text(short or (flavors[-1] if flavors else "")),
        effect=clean_text(effect),
        generation=generation_from_name(_name(data.get("generation"))) or 1,
        is_hidden=is_hidden,
    )

def _parse_detail(d: Mapping[str, Any]) -> EvolutionDetail:
    return EvolutionDetail(
        trigger=_name(d.get("trigger")) or "",
        min_level=d.get("min_level"),
        item=_name(d.get("item")),
        min_happiness=d.get("min_happiness"),
        time_of_day=d.get("time_of_day") or "",
        known_move=_name(d.get("known_move")),
        location=_name(d.get("location")),
    )

def _parse_link(link: Mapping[str, Any]) -> ChainLink:
    return ChainLink(
        species=_name(link.get("species")) or "",
        details=tuple(_parse_detail(d) for d in link.get("evolution_details") or []),
        evolves_to=tuple(_parse_link(n) for n in link.get("evolves_to") or []),
    )

def parse_evolution_chain(data: Any) -> EvolutionChain:
    if not isinstance(data, Mapping) or not isinstance(data.get("chain"), Mapping):
        raise MalformedInput("evolution chain", "missing 'chain'")
    return EvolutionChain(id=int(data.get("id") or 0), chain=_parse_link(data["chain"]))

def capitalize_name(name: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in name.split("-"))

__all__ = [
    "TypeOverride","AbilitySlot","StatEntry","Sprites","LearnRecord","PokemonMove","Pokemon","Species",
    "PokemonListItem","MoveDetail","AbilityDetail","EvolutionDetail","ChainLink","EvolutionChain",
    "LEARN_METHODS","NO_DESCRIPTION","parse_pokemon","parse_species","parse_pokemon_list","parse_move",
    "parse_ability","parse_evolution_chain","id_from_url","capitalize_name","clean_text","learn_method",
]
