import pytest

from builders import learn, raw_move, raw_pokemon
from poclidex.api.client import extract_evolution_chain_id, extract_pokemon_id
from poclidex.api.records import (
    capitalize_name, clean_text, id_from_url, parse_move, parse_pokemon, parse_pokemon_list, parse_species,
)
from poclidex.core.errors import MalformedInput

def test_parse_pokemon_basic_shape():
    p = parse_pokemon(raw_pokemon(
        1, "bulbasaur", types=("grass", "poison"),
        abilities=[("overgrow", False, 1), ("chlorophyll", True, 3)],
        moves=[("tackle", [learn("level-up", 1, "red-blue"), learn("stadium-surfing-pikachu", 0, "yellow")])],
    ))
    assert p.types == ("grass", "poison")
    assert p.abilities[1].is_hidden and p.abilities[1].slot == 3
    assert [r.method for r in p.moves[0].learns] == ["level-up", "other"]

def test_types_ordered_by_slot():
    raw = raw_pokemon(6, "charizard", types=("fire", "flying"))
    raw["types"].reverse()
    assert parse_pokemon(raw).types == ("fire", "flying")

@pytest.mark.parametrize("missing", ["id", "name", "types"])
def test_missing_required_field_is_malformed(missing):
    raw = raw_pokemon(1, "bulbasaur")
    del raw[missing]
    with pytest.raises(MalformedInput):
        parse_pokemon(raw)

def test_broken_nested_shape_is_malformed():
    raw = raw_pokemon(1, "bulbasaur")
    raw["abilities"] = [{"is_hidden": False}]
    with pytest.raises(MalformedInput):
        parse_pokemon(raw)
    with pytest.raises(MalformedInput):
        parse_pokemon(["not", "a", "dict"])

def test_unknown_past_type_generation_skipped():
    raw = raw_pokemon(35, "clefairy", types=("fairy",), past_types=[(6, ("normal",))])
    raw["past_types"].append({"generation": {"name": "generation-x"}, "types": []})
    assert [o.epoch for o in parse_pokemon(raw).past_types] == [6]

def test_species_never_raises():
    s = parse_species(None)
    assert s.generation is None and s.genus == "" and s.flavor_text == "No description available."
    s = parse_species({"id": "oops", "flavor_text_entries": [{"flavor_text": "x", "language": None}]})
    assert s.id == 0

def test_move_effect_chance_substituted():
    raw = raw_move("ember", "fire", effect="Has a $effect_chance% chance to burn the target.")
    raw["effect_chance"] = 10
    m = parse_move(raw)
    assert m.description == "Has a 10% chance to burn the target."
    assert m.type == "fire" and m.generation == 1

def test_pokemon_list():
    items = parse_pokemon_list({"results": [{"name": "bulbasaur", "url": "https://pokeapi.co/api/v2/pokemon/1/"}]})
    assert items[0].id == 1
    with pytest.raises(MalformedInput):
        parse_pokemon_list({"count": 0})

def test_url_helpers():
    assert id_from_url("https://pokeapi.co/api/v2/pokemon/25/") == 25
    assert id_from_url("nope") is None
    assert extract_evolution_chain_id("https://pokeapi.co/api/v2/evolution-chain/10/") == 10
    assert extract_pokemon_id("https://pokeapi.co/api/v2/pokemon-species/150/") == 150
    with pytest.raises(MalformedInput):
        extract_evolution_chain_id("https://pokeapi.co/api/v2/pokemon/1/")
    with pytest.raises(MalformedInput):
        extract_pokemon_id("https://pokeapi.co/api/v2/move/1/")

def test_text_helpers():
    assert capitalize_name("mr-mime") == "Mr Mime"
    assert capitalize_name("pikachu") == "Pikachu"
    assert clean_text("a\nb\fc   d ") == "a b c d"
