import asyncio

import aiohttp
import pytest

from builders import raw_pokemon
from poclidex.api.client import PokeAPIClient
from poclidex.core.errors import MalformedInput, NotFoundError, UpstreamFailure

class FakeResponse:
    def __init__(self, status, payload=None, exc=None):
        self.status = status
        self._payload = payload
        self._exc = exc

    async def __aenter__(self):
        if self._exc:
            raise self._exc
        return self

    async def __aexit__(self, *exc):
        return False

    async def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def read(self):
        return self._payload

class FakeSession:
    closed = False

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def get(self, url, params=None):
        self.requests.append((url, params))
        return self.routes[url]

BASE = "https://pokeapi.test/api/v2"

def _client(routes):
    return PokeAPIClient(BASE, session=FakeSession(routes))

def test_get_pokemon_parses_record():
    client = _client({f"{BASE}/pokemon/pikachu": FakeResponse(200, raw_pokemon(25, "pikachu"))})
    p = asyncio.run(client.get_pokemon(" Pikachu "))
    assert p.id == 25 and p.name == "pikachu"

def test_404_maps_to_not_found():
    client = _client({f"{BASE}/pokemon/missingno": FakeResponse(404)})
    with pytest.raises(NotFoundError) as exc:
        asyncio.run(client.get_pokemon("missingno"))
    assert exc.value.status == 404

def test_server_error_and_transport_errors():
    client = _client({
        f"{BASE}/move/tackle": FakeResponse(503),
        f"{BASE}/move/growl": FakeResponse(200, exc=aiohttp.ClientConnectionError("reset")),
        f"{BASE}/move/ember": FakeResponse(200, ValueError("bad json")),
    })
    for name in ("tackle", "growl", "ember"):
        with pytest.raises(UpstreamFailure):
            asyncio.run(client.get_move(name))

def test_malformed_body_raises_malformed_input():
    client = _client({f"{BASE}/pokemon/1": FakeResponse(200, {"name": "bulbasaur"})})
    with pytest.raises(MalformedInput):
        asyncio.run(client.get_pokemon(1))

def test_list_passes_paging_params():
    session = FakeSession({f"{BASE}/pokemon": FakeResponse(200, {"results": []})})
    client = PokeAPIClient(BASE, session=session)
    assert asyncio.run(client.get_pokemon_list(20, 40)) == []
    assert session.requests == [(f"{BASE}/pokemon", {"limit": 20, "offset": 40})]

def test_download_failure():
    client = _client({"https://img.test/1.png": FakeResponse(500)})
    with pytest.raises(UpstreamFailure):
        asyncio.run(client.download("https://img.test/1.png"))

def test_external_session_not_closed():
    session = FakeSession({})
    client = PokeAPIClient(BASE, session=session)
    asyncio.run(client.close())
    assert session.closed is False
