from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ShapeError


class CatalogEntryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str  # canonical identity; names are not guaranteed stable for lookup


class SpriteSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    front_default: Optional[str] = None
    dream_world: Optional[str] = None
    official_artwork: Optional[str] = None

    def resolve_image(self) -> str:
        """Display image: dream world art first, official artwork second."""
        image = self.dream_world or self.official_artwork
        if not image:
            raise ShapeError("sprite set has neither dream_world nor official-artwork image")
        return image


class EnrichedEntry(CatalogEntryRef):
    id: int
    sprites: SpriteSet
    image: str


class StatValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: int


class DetailRecord(BaseModel):
    id: int
    name: str
    height: int = 0
    weight: int = 0
    sprites: SpriteSet
    types: List[str] = []
    abilities: List[str] = []
    stats: List[StatValue] = []
    species: CatalogEntryRef


class SpeciesRecord(BaseModel):
    name: str
    habitat: Optional[str] = None  # None is a valid "unknown habitat"
    flavor_text: str = ""
    evolution_chain_url: Optional[str] = None


class EvolutionNode(BaseModel):
    species: CatalogEntryRef
    children: List[EvolutionNode] = []


class CatalogPage(BaseModel):
    entries: List[EnrichedEntry]
    total: int


class PageState(BaseModel):
    offset: int = 0
    limit: int
    total: int = 0
    page: int = 1


class DetailView(BaseModel):
    id: int
    name: str
    image: Optional[str] = None
    height_m: float
    weight_kg: float
    types: List[str] = []
    abilities: List[str] = []
    stats: List[StatValue] = []
    habitat: str
    description: str = ""
    evolutions: List[CatalogEntryRef] = Field(default_factory=list)


EvolutionNode.model_rebuild()
