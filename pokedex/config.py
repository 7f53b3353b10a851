import logging
import os
from typing import Any, Optional

from pydantic import BaseModel

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"


def _env(key: str, default: Optional[Any] = None) -> Any:
    """Read a setting from the environment; blank values count as unset."""
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value


class Settings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    page_limit: int = 20
    # Large enough to cover the whole catalog in one reference page
    full_catalog_limit: int = 10000
    http_timeout: float = 12.0
    detail_concurrency: int = 20
    flavor_language: str = "es"
    user_agent: str = "Pokedex/1.0 (+https://pokeapi.co)"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build settings from POKEAPI_* / POKEDEX_* env vars (a .env file is honoured)."""
    return Settings(
        base_url=_env("POKEAPI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        page_limit=_env("POKEDEX_PAGE_LIMIT", 20),
        full_catalog_limit=_env("POKEDEX_FULL_CATALOG_LIMIT", 10000),
        http_timeout=_env("POKEDEX_HTTP_TIMEOUT", 12.0),
        detail_concurrency=_env("POKEDEX_DETAIL_CONCURRENCY", 20),
        flavor_language=_env("POKEDEX_FLAVOR_LANGUAGE", "es"),
        user_agent=_env("POKEDEX_USER_AGENT", Settings().user_agent),
        log_level=_env("POKEDEX_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or load_settings()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger("pokedex").setLevel(settings.log_level)
