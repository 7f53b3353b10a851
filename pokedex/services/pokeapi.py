"""Thin async client over PokeAPI that resolves resource URLs into typed records.

No retries are performed here; callers decide whether a failure aborts or degrades.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

import httpx
from pydantic import ValidationError

from ..config import Settings, load_settings
from ..errors import FetchError, NotFoundError, ShapeError
from ..schemas.catalog import (
    CatalogEntryRef,
    DetailRecord,
    EvolutionNode,
    SpeciesRecord,
    SpriteSet,
    StatValue,
)

log = logging.getLogger("pokedex.pokeapi")


class PokeAPIClient:
    def __init__(self, settings: Optional[Settings] = None, http: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings or load_settings()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(self.settings.http_timeout))

    async def __aenter__(self) -> "PokeAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.settings.base_url}/{path.lstrip('/')}"

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self.url_for(path)
        log.debug("GET %s params=%s", url, params)
        try:
            r = await self._http.get(url, params=params, headers=self._headers())
        except httpx.TimeoutException as e:
            raise FetchError(504, f"PokeAPI timeout: {e!s}", url) from e
        except httpx.RequestError as e:
            raise FetchError(502, f"PokeAPI upstream error: {e.__class__.__name__}: {e!s}", url) from e

        if r.status_code == 404:
            raise NotFoundError(r.text or "PokeAPI resource not found", url)
        if r.status_code != 200:
            raise FetchError(r.status_code, r.text or f"PokeAPI non-200: {r.status_code}", url)
        try:
            return r.json()
        except ValueError as e:
            raise ShapeError(f"invalid JSON from {url}") from e

    async def fetch_reference_page(self, offset: int, limit: int) -> Tuple[List[CatalogEntryRef], int]:
        data = await self.get_json("pokemon", params={"limit": limit, "offset": offset})
        try:
            refs = [CatalogEntryRef(name=r["name"], url=r["url"]) for r in data["results"]]
            return refs, int(data["count"])
        except (KeyError, TypeError, ValueError) as e:
            raise ShapeError(f"malformed catalog page: {e!s}") from e

    async def fetch_detail(self, url_or_id: Any) -> DetailRecord:
        path = url_or_id if isinstance(url_or_id, str) and "/" in url_or_id else f"pokemon/{url_or_id}"
        return parse_detail(await self.get_json(path))

    async def fetch_species(self, url_or_name: str) -> SpeciesRecord:
        path = url_or_name if "/" in url_or_name else f"pokemon-species/{url_or_name}"
        return parse_species(await self.get_json(path), self.settings.flavor_language)

    async def fetch_evolution_chain(self, url: str) -> EvolutionNode:
        data = await self.get_json(url)
        try:
            return parse_evolution_node(data["chain"])
        except (KeyError, TypeError, ValidationError) as e:
            raise ShapeError(f"malformed evolution chain: {e!s}") from e


def parse_sprites(raw: Dict[str, Any]) -> SpriteSet:
    other = raw.get("other") or {}
    dream = other.get("dream_world") or {}
    artwork = other.get("official-artwork") or {}
    return SpriteSet(
        front_default=raw.get("front_default"),
        dream_world=dream.get("front_default"),
        official_artwork=artwork.get("front_default"),
    )


def parse_detail(data: Dict[str, Any]) -> DetailRecord:
    try:
        return DetailRecord(
            id=data["id"],
            name=data["name"],
            height=data.get("height") or 0,
            weight=data.get("weight") or 0,
            sprites=parse_sprites(data["sprites"]),
            types=[t["type"]["name"] for t in data.get("types") or []],
            abilities=[a["ability"]["name"] for a in data.get("abilities") or []],
            stats=[StatValue(label=s["stat"]["name"], value=s["base_stat"]) for s in data.get("stats") or []],
            species=CatalogEntryRef(**data["species"]),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ShapeError(f"malformed detail record: {e!s}") from e


def parse_species(data: Dict[str, Any], language: str) -> SpeciesRecord:
    try:
        habitat = data.get("habitat")
        chain = data.get("evolution_chain")
        flavor = next(
            (e["flavor_text"] for e in data.get("flavor_text_entries") or [] if e["language"]["name"] == language),
            "",
        )
        return SpeciesRecord(
            name=data["name"],
            habitat=habitat.get("name") if habitat else None,
            flavor_text=flavor,
            evolution_chain_url=chain.get("url") if chain else None,
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ShapeError(f"malformed species record: {e!s}") from e


def parse_evolution_node(raw: Dict[str, Any]) -> EvolutionNode:
    # Built iteratively so deep chains never hit the recursion limit
    root = EvolutionNode(species=CatalogEntryRef(**raw["species"]))
    stack = [(raw, root)]
    while stack:
        node_raw, node = stack.pop()
        for child_raw in node_raw.get("evolves_to") or []:
            child = EvolutionNode(species=CatalogEntryRef(**child_raw["species"]))
            node.children.append(child)
            stack.append((child_raw, child))
    return root
