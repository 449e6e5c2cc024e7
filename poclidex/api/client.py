"""Async PokeAPI client.

Thin aiohttp wrapper: one shared ClientSession, JSON decoding, and mapping of
transport failures to UpstreamFailure. Parsing into records happens here so
callers only ever see typed data.
"""
from __future__ import annotations
import asyncio
import re
from typing import Any, List, Optional, Union

import aiohttp

from poclidex.api.records import (
    AbilityDetail, EvolutionChain, MoveDetail, Pokemon, PokemonListItem, Species,
    parse_ability, parse_evolution_chain, parse_move, parse_pokemon, parse_pokemon_list, parse_species,
)
from poclidex.core.errors import MalformedInput, NotFoundError, UpstreamFailure
from poclidex.core.logging import logger

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"
DEFAULT_TIMEOUT = 10.0
USER_AGENT = "poclidex/1.0"

_CHAIN_ID = re.compile(r"/evolution-chain/(\d+)/?")
_POKEMON_ID = re.compile(r"/pokemon/(\d+)/?")
_SPECIES_ID = re.compile(r"/pokemon-species/(\d+)/?")

NameOrId = Union[str, int]

def _key(name_or_id: NameOrId) -> str:
    return str(name_or_id).strip().lower()

def extract_evolution_chain_id(url: str) -> int:
    m = _CHAIN_ID.search(url or "")
    if not m:
        raise MalformedInput("evolution chain", f"no chain id in URL {url!r}")
    return int(m.group(1))

def extract_pokemon_id(url: str) -> int:
    m = _POKEMON_ID.search(url or "") or _SPECIES_ID.search(url or "")
    if not m:
        raise MalformedInput("pokemon", f"no id in URL {url!r}")
    return int(m.group(1))

class PokeAPIClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "PokeAPIClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers={"User-Agent": USER_AGENT})
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, path: str, **params: Any) -> Any:
        url = path if path.startswith("http") else f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("ApiRequest", url=url)
        try:
            async with self._ensure_session().get(url, params=params or None) as resp:
                if resp.status == 404:
                    raise NotFoundError(url)
                if resp.status != 200:
                    raise UpstreamFailure(url, f"HTTP {resp.status}", status=resp.status)
                return await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise UpstreamFailure(url, str(e) or type(e).__name__) from e

    async def download(self, url: str) -> bytes:
        try:
            async with self._ensure_session().get(url) as resp:
                if resp.status != 200:
                    raise UpstreamFailure(url, f"Failed to download image: {resp.status}", status=resp.status)
                return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamFailure(url, str(e) or type(e).__name__) from e

    async def get_pokemon_list(self, limit: int = 100000, offset: int = 0) -> List[PokemonListItem]:
        return parse_pokemon_list(await self._get_json("pokemon", limit=limit, offset=offset))

    async def get_pokemon(self, name_or_id: NameOrId) -> Pokemon:
        return parse_pokemon(await self._get_json(f"pokemon/{_key(name_or_id)}"))

    async def get_pokemon_species(self, name_or_id: NameOrId) -> Species:
        return parse_species(await self._get_json(f"pokemon-species/{_key(name_or_id)}"))

    async def get_evolution_chain(self, chain_id: int) -> EvolutionChain:
        return parse_evolution_chain(await self._get_json(f"evolution-chain/{chain_id}"))

    async def get_ability(self, name: str) -> AbilityDetail:
        return parse_ability(await self._get_json(f"ability/{_key(name)}"))

    async def get_move(self, name: str) -> MoveDetail:
        return parse_move(await self._get_json(f"move/{_key(name)}"))

__all__ = ["PokeAPIClient","DEFAULT_BASE_URL","DEFAULT_TIMEOUT","extract_evolution_chain_id","extract_pokemon_id"]
