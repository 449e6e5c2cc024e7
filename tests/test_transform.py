from builders import raw_pokemon, raw_species
from poclidex.api.records import NO_DESCRIPTION, parse_pokemon, parse_species
from poclidex.data.ability_changes import ResolvedAbility
from poclidex.models.pokemon import format_height, format_weight, transform_pokemon

def gengar():
    return parse_pokemon(raw_pokemon(94, "gengar", types=("ghost", "poison"),
                                     abilities=[("cursed-body", False, 1)]))

def azumarill():
    return parse_pokemon(raw_pokemon(
        184, "azumarill", types=("water", "fairy"),
        abilities=[("thick-fat", False, 1), ("huge-power", False, 2), ("sap-sipper", True, 3)],
        past_types=[(6, ("water",))],
    ))

def test_scenario_a_gengar_ability():
    assert transform_pokemon(gengar(), generation=6).abilities == (ResolvedAbility("levitate", False),)
    assert transform_pokemon(gengar(), generation=7).abilities == (ResolvedAbility("cursed-body", False),)

def test_scenario_b_type_override():
    assert transform_pokemon(azumarill(), generation=5).types == ("water",)
    assert transform_pokemon(azumarill(), generation=6).types == ("water", "fairy")

def test_earliest_qualifying_override_wins():
    p = parse_pokemon(raw_pokemon(35, "clefairy", types=("fairy",),
                                  past_types=[(6, ("normal",)), (2, ("bug",))]))
    assert transform_pokemon(p, generation=1).types == ("bug",)
    assert transform_pokemon(p, generation=3).types == ("normal",)
    assert transform_pokemon(p, generation=9).types == ("fairy",)

def test_hidden_abilities_removed_before_gen_five():
    names = [a.name for a in transform_pokemon(azumarill(), generation=4).abilities]
    assert names == ["thick-fat", "huge-power"]
    names = [a.name for a in transform_pokemon(azumarill(), generation=5).abilities]
    assert names == ["thick-fat", "huge-power", "sap-sipper"]

def test_no_generation_passes_through():
    d = transform_pokemon(azumarill())
    assert d.types == ("water", "fairy")
    assert ResolvedAbility("sap-sipper", True) in d.abilities
    assert d.view_generation is None

def test_idempotent():
    p, s = azumarill(), parse_species(raw_species(184, "azumarill", generation=2))
    assert transform_pokemon(p, s, 3) == transform_pokemon(p, s, 3)

def test_derived_fields():
    p = parse_pokemon(raw_pokemon(
        25, "mr-mime", height=13, weight=545,
        stats={"hp": (40, 0), "attack": 45, "defense": 65, "special-attack": 100,
               "special-defense": (120, 2), "speed": 90},
    ))
    s = parse_species(raw_species(122, "mr-mime", generation=1, chain_id=61, genus="Barrier Pokémon",
                                  flavor=["Old text.", "If interrupted\nwhile it is\fmiming,  it slaps."]))
    d = transform_pokemon(p, s)
    assert d.display_name == "Mr Mime"
    assert d.stats.special_defense == 120
    assert d.stat_total == 460
    assert d.ev_yield.special_defense == 2
    assert d.ev_yield.total == 2
    assert d.height_text == "1.3m"
    assert d.weight_text == "54.5kg"
    assert d.genus == "Barrier Pokémon"
    assert d.flavor_text == "If interrupted while it is miming, it slaps."
    assert d.evolution_chain_url.endswith("/evolution-chain/61/")

def test_missing_species_metadata_defaults():
    p = gengar()
    s = parse_species({"id": 94})
    d = transform_pokemon(p, s)
    assert d.genus == ""
    assert d.flavor_text == NO_DESCRIPTION
    assert d.evolution_chain_url == ""
    assert d.generation == 1           # falls back to dex ranges
    assert transform_pokemon(p).flavor_text == NO_DESCRIPTION

def test_introduced_generation_prefers_species():
    p = parse_pokemon(raw_pokemon(10008, "rotom-heat"))
    assert transform_pokemon(p, parse_species(raw_species(479, "rotom", generation=4))).generation == 4
    assert transform_pokemon(p).generation == 1

def test_format_helpers():
    assert format_height(7) == "0.7m"
    assert format_weight(69) == "6.9kg"
    assert format_height(0) == "0.0m"
