import asyncio
import io
import time

from rich.console import Console

from builders import raw_pokemon, raw_species
from poclidex.services.pokemon import PokemonService
from poclidex.services.search import SearchService
from poclidex.ui.app import LoadTracker, PokedexApp
from poclidex.ui.keys import Key, KeyEvent

def _app(api, session) -> PokedexApp:
    console = Console(file=io.StringIO(), width=120)
    return PokedexApp(PokemonService(api, session), SearchService(), None, session, console=console)

def _seed(api):
    api.add(raw_pokemon(1, "bulbasaur", types=("grass", "poison")), raw_species(1, "bulbasaur", generation=1))
    api.add(raw_pokemon(25, "pikachu", types=("electric",)), raw_species(25, "pikachu", generation=1))
    api.add(raw_pokemon(94, "gengar", types=("ghost", "poison"), abilities=[("cursed-body", False, 1)]),
            raw_species(94, "gengar", generation=1))

def test_load_tracker_monotonic():
    t = LoadTracker()
    a, b = t.begin(), t.begin()
    assert b > a
    assert t.is_current(b) and not t.is_current(a)

def test_stale_load_is_discarded(api, session):
    _seed(api)
    app = _app(api, session)

    async def go():
        gate = asyncio.Event()
        api.gates["bulbasaur"] = gate
        slow = app.open_pokemon("bulbasaur")
        fast = app.open_pokemon("pikachu")
        fast_applied = await fast
        gate.set()
        return fast_applied, await slow

    assert asyncio.run(go()) == (True, False)
    assert app.detail.entity.name == "pikachu"
    assert app.screen == "detail"

def test_generation_key_reloads_detail(api, session):
    _seed(api)
    app = _app(api, session)

    async def go():
        await app.load_detail("gengar")
        assert [a.name for a in app.detail.abilities] == ["cursed-body"]
        app.handle_key(KeyEvent(Key.FUNCTION, number=6))
        await asyncio.gather(*list(app._tasks))

    asyncio.run(go())
    assert session.current() == 6
    assert app.detail.entity.view_generation == 6
    assert [a.name for a in app.detail.entity.abilities] == ["levitate"]

def test_invalid_generation_never_reaches_session(api, session):
    app = _app(api, session)
    app.set_generation(12)
    assert session.current() == 9
    assert "Invalid generation" in app.status

def test_typing_filters_results(api, session):
    _seed(api)
    app = _app(api, session)
    asyncio.run(app.load_list())
    for ch in "pika":
        app.handle_key(KeyEvent(Key.CHAR, ch, char=ch))
    assert [r.name for r in app.results] == ["pikachu"]
    app.handle_key(KeyEvent(Key.BACKSPACE))
    assert app.query == "pik"
    app.render()

def test_failed_load_shows_error(api, session):
    app = _app(api, session)
    assert asyncio.run(app.load_detail("missingno")) is False
    assert app.error and app.status == "Data unavailable"
    app.render()

def test_detail_tabs_and_escape(api, session):
    _seed(api)
    app = _app(api, session)
    asyncio.run(app.load_detail("bulbasaur"))
    app.handle_key(KeyEvent(Key.TAB))
    assert app.detail.tab == 1
    app.handle_key(KeyEvent(Key.CHAR, "4", char="4"))
    assert app.detail.tab == 3
    app.render()
    app.handle_key(KeyEvent(Key.ESC))
    assert app.screen == "home"
    app.handle_key(KeyEvent(Key.CTRL_C))
    assert not app.running

def _scripted(app, keys, until):
    """Feed `keys`, then hold the reader until `until()` holds and quit."""
    pending = list(keys)

    def reader():
        if pending:
            return pending.pop(0)
        deadline = time.monotonic() + 5
        while not until() and time.monotonic() < deadline:
            time.sleep(0.01)
        return KeyEvent(Key.CTRL_C)

    app.key_reader = reader

def test_enter_draws_detail_once_loaded(api, session):
    _seed(api)
    app = _app(api, session)
    keys = [KeyEvent(Key.CHAR, c, char=c) for c in "pika"] + [KeyEvent(Key.ENTER, "\r")]
    _scripted(app, keys, lambda: app.detail is not None)

    asyncio.run(app.run())
    assert app.screen == "detail"
    assert "#0025" in app.console.file.getvalue()

def test_generation_key_redraws_open_detail(api, session):
    _seed(api)
    app = _app(api, session)
    _scripted(app, [KeyEvent(Key.FUNCTION, "\x1b[17~", number=6)],
              lambda: app.detail is not None and app.detail.entity.view_generation == 6)

    asyncio.run(app.run("gengar"))
    out = app.console.file.getvalue()
    assert "(gen 9)" in out
    assert "(gen 6)" in out

def test_malformed_chain_url_reports_error(api, session):
    species = raw_species(133, "eevee", generation=1)
    species["evolution_chain"] = {"url": "https://pokeapi.co/api/v2/pokemon/133/"}
    api.add(raw_pokemon(133, "eevee"), species)
    app = _app(api, session)

    async def go():
        return await app.open_pokemon("eevee")

    assert asyncio.run(go()) is False
    assert app.status == "Data unavailable"
    assert "evolution chain" in app.error
