"""Evolution chain traversal."""
from typing import List, Optional, Set

from ..config import DEFAULT_BASE_URL
from ..schemas.catalog import CatalogEntryRef, EvolutionNode


def resolve_lineage(root: Optional[EvolutionNode], base_url: str = DEFAULT_BASE_URL) -> List[CatalogEntryRef]:
    """Flatten an evolution tree into one root-to-leaf path.

    Branching families are approximated by always following the first child, so
    for e.g. eevee only the first listed evolution is kept. Each step points at
    the entry detail resource (``<base>/pokemon/<name>``) so it can be enriched
    like any catalog entry.
    """
    lineage: List[CatalogEntryRef] = []
    seen: Set[int] = set()
    node = root
    while node is not None and id(node) not in seen:
        seen.add(id(node))
        name = node.species.name
        lineage.append(CatalogEntryRef(name=name, url=f"{base_url.rstrip('/')}/pokemon/{name}"))
        node = node.children[0] if node.children else None
    return lineage
