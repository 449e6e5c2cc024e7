import pytest

from poclidex.api.records import AbilitySlot
from poclidex.data.ability_changes import (
    POKEMON_ABILITY_CHANGES, AbilityChange, ResolvedAbility, apply_overrides, find_overrides,
)

def test_table_has_sixteen_records():
    assert len(POKEMON_ABILITY_CHANGES) == 16
    assert all(c.old_ability != c.new_ability for c in POKEMON_ABILITY_CHANGES)

@pytest.mark.parametrize("change", POKEMON_ABILITY_CHANGES, ids=lambda c: c.pokemon_name)
def test_override_directionality(change: AbilityChange):
    hidden = change.slot == "hidden"
    current = [AbilitySlot(change.new_ability, hidden, 3 if hidden else 1)]
    before = apply_overrides(change.pokemon_id, change.pokemon_name, current, change.change_generation - 1)
    at = apply_overrides(change.pokemon_id, change.pokemon_name, current, change.change_generation)
    assert before == [ResolvedAbility(change.old_ability, hidden)]
    assert at == [ResolvedAbility(change.new_ability, hidden)]

def test_gengar_scenario():
    current = [AbilitySlot("cursed-body", False, 1)]
    assert apply_overrides(94, "gengar", current, 6) == [ResolvedAbility("levitate", False)]
    assert apply_overrides(94, "gengar", current, 7) == [ResolvedAbility("cursed-body", False)]

def test_no_abilities_gives_empty_list():
    assert apply_overrides(94, "gengar", [], 3) == []

def test_no_overrides_strips_slot_and_keeps_order():
    current = [AbilitySlot("overgrow", False, 1), AbilitySlot("chlorophyll", True, 3)]
    out = apply_overrides(1, "bulbasaur", current, 5)
    assert out == [ResolvedAbility("overgrow", False), ResolvedAbility("chlorophyll", True)]

def test_each_ability_resolved_independently():
    changes = (
        AbilityChange(9999, "testmon", "old-one", "new-one", "ability1", 6),
        AbilityChange(9999, "testmon", "old-two", "new-two", "hidden", 8),
    )
    current = [AbilitySlot("new-one", False, 1), AbilitySlot("new-two", True, 3)]
    assert [a.name for a in apply_overrides(9999, "testmon", current, 5, changes)] == ["old-one", "old-two"]
    assert [a.name for a in apply_overrides(9999, "testmon", current, 7, changes)] == ["new-one", "old-two"]
    assert [a.name for a in apply_overrides(9999, "testmon", current, 8, changes)] == ["new-one", "new-two"]

def test_find_overrides_matches_by_id_or_name():
    assert [c.new_ability for c in find_overrides(94, "not-gengar", 6)] == ["cursed-body"]
    assert [c.new_ability for c in find_overrides(0, "gengar", 6)] == ["cursed-body"]
    assert find_overrides(94, "gengar", 7) == []

def test_piplup_line_before_gen_nine():
    names = [c.pokemon_name for c in find_overrides(395, "empoleon", 8)]
    assert names == ["empoleon"]
