from typing import List, Sequence, Tuple
import asyncio
import logging

from ..schemas.catalog import CatalogEntryRef, CatalogPage, EnrichedEntry
from .pokeapi import PokeAPIClient

log = logging.getLogger("pokedex.catalog")


async def enrich_entries(client: PokeAPIClient, refs: Sequence[CatalogEntryRef]) -> List[EnrichedEntry]:
    """Resolve every ref's detail record concurrently and join them in input order.

    All-or-nothing: the first failing entry raises and nothing is returned, so a
    listing never holds a partially enriched entry.
    """
    if not refs:
        return []
    sem = asyncio.Semaphore(max(1, client.settings.detail_concurrency))

    async def enrich(ref: CatalogEntryRef) -> EnrichedEntry:
        async with sem:
            detail = await client.fetch_detail(ref.url)
        return EnrichedEntry(
            name=detail.name,
            url=ref.url,
            id=detail.id,
            sprites=detail.sprites,
            image=detail.sprites.resolve_image(),
        )

    # gather keeps argument order, regardless of completion order
    return list(await asyncio.gather(*(enrich(ref) for ref in refs)))


async def fetch_page(client: PokeAPIClient, offset: int, limit: int) -> CatalogPage:
    refs, total = await client.fetch_reference_page(offset, limit)
    entries = await enrich_entries(client, refs)
    log.info("Fetched catalog page offset=%s limit=%s (%s entries, total %s)", offset, limit, len(entries), total)
    return CatalogPage(entries=entries, total=total)


async def build_full_cache(client: PokeAPIClient) -> Tuple[EnrichedEntry, ...]:
    """Fetch and enrich the entire catalog in one reference page, for offline search."""
    refs, total = await client.fetch_reference_page(0, client.settings.full_catalog_limit)
    if total > len(refs):
        log.warning("Full catalog limit %s below catalog size %s; search covers a prefix only",
                    client.settings.full_catalog_limit, total)
    entries = await enrich_entries(client, refs)
    log.info("Full catalog cache built: %s entries", len(entries))
    return tuple(entries)
