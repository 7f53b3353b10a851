from typing import Dict, Optional

STAT_LABELS: Dict[str, str] = {
    "hp": "Puntos de salud",
    "attack": "Ataque",
    "defense": "Defensa",
    "special-attack": "Ataque especial",
    "special-defense": "Defensa especial",
    "speed": "Velocidad",
}

HABITAT_LABELS: Dict[str, str] = {
    "cave": "Cueva",
    "forest": "Bosque",
    "grassland": "Pradera",
    "mountain": "Montaña",
    "rare": "Raro",
    "rough-terrain": "Terreno áspero",
    "sea": "Mar",
    "urban": "Urbano",
    "waters-edge": "Orilla de agua",
    "unknown": "Desconocido",
}

UNKNOWN_HABITAT = "unknown"


def stat_label(key: str) -> str:
    return STAT_LABELS.get(key, key)


def habitat_label(key: Optional[str]) -> str:
    # A species without habitat is a valid state, shown as "unknown"
    if not key:
        key = UNKNOWN_HABITAT
    return HABITAT_LABELS.get(key, HABITAT_LABELS.get(key.replace("_", "-"), key))
