from typing import Any, List
import logging

from ..errors import PokedexError
from ..schemas.catalog import CatalogEntryRef, DetailView, StatValue
from .evolution import resolve_lineage
from .labels import habitat_label, stat_label
from .pokeapi import PokeAPIClient

log = logging.getLogger("pokedex.detail")


async def build_detail_view(client: PokeAPIClient, id_or_name: Any) -> DetailView:
    """Assemble the detail view model for one entry.

    The entry record itself must load (errors propagate). Species and evolution
    lookups degrade: unknown habitat, empty description and empty lineage.
    """
    detail = await client.fetch_detail(id_or_name)
    sprites = detail.sprites

    habitat = None
    description = ""
    evolutions: List[CatalogEntryRef] = []
    try:
        species = await client.fetch_species(detail.species.url)
        habitat = species.habitat
        description = species.flavor_text
        if species.evolution_chain_url:
            try:
                root = await client.fetch_evolution_chain(species.evolution_chain_url)
                evolutions = resolve_lineage(root, client.settings.base_url)
            except PokedexError as e:
                log.warning("Evolution chain for %s unavailable: %s", detail.name, e)
    except PokedexError as e:
        log.warning("Species data for %s unavailable: %s", detail.name, e)

    return DetailView(
        id=detail.id,
        name=detail.name,
        image=sprites.official_artwork or sprites.dream_world or sprites.front_default,
        # PokeAPI reports decimetres and hectograms
        height_m=detail.height / 10,
        weight_kg=detail.weight / 10,
        types=list(detail.types),
        abilities=list(detail.abilities),
        stats=[StatValue(label=stat_label(s.label), value=s.value) for s in detail.stats],
        habitat=habitat_label(habitat),
        description=description,
        evolutions=evolutions,
    )
