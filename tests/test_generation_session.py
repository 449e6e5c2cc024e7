import pytest

from poclidex.core.errors import InvalidGeneration
from poclidex.services.generation import GenerationSession

def test_default_is_nine(session):
    assert session.current() == 9

@pytest.mark.parametrize("bad", [0, 10, -1, 2.5, "3", True, None])
def test_invalid_values_rejected_and_state_kept(session, bad):
    session.set_current(4)
    with pytest.raises(InvalidGeneration):
        session.set_current(bad)
    assert session.current() == 4

def test_invalid_generation_is_a_value_error(session):
    with pytest.raises(ValueError):
        session.set_current(0)

def test_all_valid_values_accepted(session):
    for g in range(1, 10):
        session.set_current(g)
        assert session.current() == g

def test_effective_never_below_introduction():
    s = GenerationSession()
    for current in range(1, 10):
        s.set_current(current)
        for introduced in range(1, 10):
            assert s.effective(introduced) >= introduced
            assert s.effective(introduced) == max(current, introduced)

def test_scenario_c_late_introduction(session):
    session.set_current(3)
    assert session.effective(7) == 7

def test_listeners_notified_only_on_change(session):
    seen = []
    session.on_change(seen.append)
    session.set_current(9)
    session.set_current(2)
    session.set_current(2)
    with pytest.raises(InvalidGeneration):
        session.set_current(11)
    assert seen == [2]

def test_sessions_are_independent():
    a, b = GenerationSession(), GenerationSession()
    a.set_current(1)
    assert b.current() == 9
