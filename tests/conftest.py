import asyncio
from typing import Any, Dict, List, Optional, Set

import httpx
import pytest

from pokedex.config import Settings
from pokedex.services.pokeapi import PokeAPIClient

BASE = "https://pokeapi.test/api/v2"

NAMES = [
    "bulbasaur", "ivysaur", "venusaur",
    "charmander", "charmeleon", "charizard",
    "squirtle", "wartortle", "blastoise",
    "eevee", "vaporeon", "jolteon",
]


def chain_node(name: str, *children: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "species": {"name": name, "url": f"{BASE}/pokemon-species/{name}/"},
        "evolves_to": list(children),
        "evolution_details": [],
    }


CHAINS: Dict[int, Dict[str, Any]] = {
    1: chain_node("bulbasaur", chain_node("ivysaur", chain_node("venusaur"))),
    2: chain_node("charmander", chain_node("charmeleon", chain_node("charizard"))),
    3: chain_node("squirtle", chain_node("wartortle", chain_node("blastoise"))),
    67: chain_node("eevee", chain_node("vaporeon"), chain_node("jolteon")),
}


class FakePokeAPI:
    """In-memory PokeAPI served through httpx.MockTransport."""

    def __init__(self, names: Optional[List[str]] = None) -> None:
        self.names = list(names or NAMES)
        self.no_dream_world: Set[int] = set()
        self.no_sprites: Set[int] = set()
        self.fail_paths: Dict[str, int] = {}
        self.habitats: Dict[str, Optional[str]] = {"bulbasaur": "grassland", "eevee": "urban"}
        self.gates: Dict[str, asyncio.Event] = {}
        self.requests: List[httpx.Request] = []

    def gate(self, path: str) -> asyncio.Event:
        """Hold requests for ``path`` until the returned event is set."""
        event = asyncio.Event()
        self.gates[path] = event
        return event

    def ref(self, pid: int) -> Dict[str, str]:
        return {"name": self.names[pid - 1], "url": f"{BASE}/pokemon/{pid}/"}

    def pid_for(self, key: str) -> int:
        if key.isdigit():
            return int(key)
        return self.names.index(key) + 1

    def chain_id_for(self, name: str) -> Optional[int]:
        for cid, chain in CHAINS.items():
            stack = [chain]
            while stack:
                node = stack.pop()
                if node["species"]["name"] == name:
                    return cid
                stack.extend(node["evolves_to"])
        return None

    def detail(self, pid: int) -> Dict[str, Any]:
        name = self.names[pid - 1]
        dream = None if pid in self.no_dream_world else f"https://img.test/dream/{pid}.svg"
        artwork = f"https://img.test/artwork/{pid}.png"
        if pid in self.no_sprites:
            dream = artwork = None
        return {
            "id": pid,
            "name": name,
            "height": 7,
            "weight": 69,
            "sprites": {
                "front_default": f"https://img.test/front/{pid}.png",
                "other": {
                    "dream_world": {"front_default": dream},
                    "official-artwork": {"front_default": artwork},
                },
            },
            "types": [{"slot": 1, "type": {"name": "grass", "url": f"{BASE}/type/12/"}}],
            "abilities": [{"ability": {"name": "overgrow", "url": f"{BASE}/ability/65/"}}],
            "stats": [
                {"base_stat": 45, "stat": {"name": "hp"}},
                {"base_stat": 49, "stat": {"name": "attack"}},
                {"base_stat": 10, "stat": {"name": "accuracy"}},
            ],
            "species": {"name": name, "url": f"{BASE}/pokemon-species/{name}/"},
        }

    def species(self, name: str) -> Dict[str, Any]:
        habitat = self.habitats.get(name)
        chain_id = self.chain_id_for(name)
        return {
            "name": name,
            "habitat": {"name": habitat, "url": f"{BASE}/pokemon-habitat/{habitat}/"} if habitat else None,
            "flavor_text_entries": [
                {"flavor_text": f"{name} in english", "language": {"name": "en"}},
                {"flavor_text": f"{name} en español", "language": {"name": "es"}},
            ],
            "evolution_chain": {"url": f"{BASE}/evolution-chain/{chain_id}/"} if chain_id else None,
        }

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.rstrip("/")
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        if path in self.fail_paths:
            return httpx.Response(self.fail_paths[path], text="upstream says no")

        parts = path.split("/")[3:]  # drop "", "api", "v2"
        if parts == ["pokemon"]:
            limit = int(request.url.params.get("limit", 20))
            offset = int(request.url.params.get("offset", 0))
            ids = range(offset + 1, min(offset + limit, len(self.names)) + 1)
            return httpx.Response(200, json={
                "count": len(self.names),
                "next": None,
                "previous": None,
                "results": [self.ref(pid) for pid in ids],
            })
        if len(parts) == 2 and parts[0] == "pokemon":
            try:
                pid = self.pid_for(parts[1])
            except ValueError:
                return httpx.Response(404, text="Not Found")
            if not 1 <= pid <= len(self.names):
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json=self.detail(pid))
        if len(parts) == 2 and parts[0] == "pokemon-species":
            if parts[1] not in self.names:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json=self.species(parts[1]))
        if len(parts) == 2 and parts[0] == "evolution-chain":
            chain = CHAINS.get(int(parts[1]))
            if chain is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json={"id": int(parts[1]), "chain": chain})
        return httpx.Response(404, text="Not Found")


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {"base_url": BASE, "page_limit": 4, "full_catalog_limit": 10000}
    values.update(overrides)
    return Settings(**values)


def run_with_client(api: FakePokeAPI, fn, **overrides: Any) -> Any:
    """Run ``fn(client)`` on a fresh event loop against the fake API."""
    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(api.handler)) as http:
            client = PokeAPIClient(make_settings(**overrides), http=http)
            return await fn(client)
    return asyncio.run(main())


@pytest.fixture
def api() -> FakePokeAPI:
    return FakePokeAPI()
