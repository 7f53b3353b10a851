from typing import List, Sequence

from ..schemas.catalog import EnrichedEntry


def filter_listing(
    query: str,
    active_listing: Sequence[EnrichedEntry],
    full_cache: Sequence[EnrichedEntry],
) -> Sequence[EnrichedEntry]:
    """Return the active page for a blank query, else the cache entries whose name contains it.

    Matching is a plain case-sensitive substring test, in cache order. Neither
    input is mutated; a blank query hands back ``active_listing`` itself.
    """
    if query is None or query.strip() == "":
        return active_listing
    matches: List[EnrichedEntry] = [entry for entry in full_cache if query in entry.name]
    return matches
