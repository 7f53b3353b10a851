"""Browse session: the single owner of listing, page state, search cache and detail view.

Presentation code drives a ``BrowseSession`` and renders its fields; every
network failure is caught and logged here and leaves the previous state in
place, so nothing raises past this boundary.

The package does not touch logging handlers; applications call
``pokedex.config.configure_logging()`` once at startup to get its output.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import asyncio
import logging

from .config import Settings
from .errors import PokedexError
from .schemas.catalog import CatalogPage, DetailView, EnrichedEntry, PageState
from .services.catalog import build_full_cache, fetch_page
from .services.detail import build_detail_view
from .services.navigator import PageNavigator, page_count, page_offset
from .services.pokeapi import PokeAPIClient
from .services.search import filter_listing

log = logging.getLogger("pokedex.session")

ListingListener = Callable[[List[EnrichedEntry]], None]


class BrowseSession:
    def __init__(self, client: Optional[PokeAPIClient] = None, settings: Optional[Settings] = None) -> None:
        self.client = client or PokeAPIClient(settings)
        self.settings = self.client.settings
        self.page_state = PageState(limit=self.settings.page_limit)
        self.page_listing: List[EnrichedEntry] = []
        self.listing: List[EnrichedEntry] = []
        self.full_cache: Optional[Tuple[EnrichedEntry, ...]] = None
        # None until a non-blank search ran; an empty match list is a real result
        self.query: Optional[str] = None
        self.detail: Optional[DetailView] = None
        self._total_known = False
        self._tokens: Dict[str, int] = {}
        self._listeners: List[ListingListener] = []
        self.navigator = PageNavigator(self._fetch_page, self.settings.page_limit, clear=self._clear_listing)

    async def __aenter__(self) -> "BrowseSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    # --- request tokens ---
    def _issue(self, slot: str) -> int:
        token = self._tokens.get(slot, 0) + 1
        self._tokens[slot] = token
        return token

    def _is_current(self, slot: str, token: int) -> bool:
        return self._tokens.get(slot) == token

    # --- listing updates ---
    def subscribe(self, listener: ListingListener) -> None:
        """Register a callback invoked with the displayed listing after every change."""
        self._listeners.append(listener)

    def _set_listing(self, entries: Sequence[EnrichedEntry]) -> None:
        self.listing = list(entries)
        for listener in list(self._listeners):
            listener(self.listing)

    def _clear_listing(self) -> None:
        self._set_listing([])

    async def _fetch_page(self, offset: int, limit: int) -> CatalogPage:
        return await fetch_page(self.client, offset, limit)

    @property
    def page_count(self) -> int:
        return page_count(self.page_state.total, self.page_state.limit)

    # --- operations ---
    async def start(self) -> None:
        """Initial load: first page and full search cache, concurrently and independently."""
        await asyncio.gather(self.go_to_page(1), self.load_full_cache())

    async def load_full_cache(self) -> bool:
        if self.full_cache is not None:
            return True
        try:
            cache = await build_full_cache(self.client)
        except PokedexError as e:
            log.warning("Full catalog cache build failed: %s", e)
            return False
        if self.full_cache is None:
            self.full_cache = cache
        return True

    async def go_to_page(self, page: int) -> bool:
        """Load a page (1-based) into the page state and the displayed listing.

        Two slots are stamped: "page" guards the page state and "listing" the
        displayed entries, so a search issued while the page is in flight keeps
        its results while the page data still lands for later use.
        """
        page_token = self._issue("page")
        listing_token = self._issue("listing")
        try:
            result = await self.navigator.go_to_page(page)
        except PokedexError as e:
            log.warning("Loading page %s failed: %s", page, e)
            if self._is_current("listing", listing_token):
                self._set_listing(self._applied_view())
            return False
        if not self._is_current("page", page_token):
            log.debug("Discarding stale result for page %s", page)
            return False

        if not self._total_known:
            self._total_known = True
            total = result.total
        else:
            total = self.page_state.total
        self.page_state = PageState(
            offset=page_offset(page, self.navigator.limit),
            limit=self.page_state.limit,
            total=total,
            page=page,
        )
        self.page_listing = result.entries
        # A newer search owns the display unless it was blank, i.e. it shows the active page
        if not self._is_current("listing", listing_token) and self.query is not None:
            log.debug("Page %s loaded behind a newer search; not displayed", page)
            return True
        self.query = None
        self._set_listing(result.entries)
        return True

    def _applied_view(self) -> Sequence[EnrichedEntry]:
        """Listing matching the last applied query against the current page data."""
        return filter_listing(self.query or "", self.page_listing, self.full_cache or ())

    async def search(self, query: str) -> List[EnrichedEntry]:
        """Apply a search query to the displayed listing (clear first, then set).

        A non-blank query before the full cache is built is not run: state is
        left untouched and ``query`` stays as it was.
        """
        blank = query is None or query.strip() == ""
        if not blank and self.full_cache is None:
            log.warning("Search for %r skipped: catalog cache not ready", query)
            return []
        token = self._issue("listing")
        result = filter_listing(query, self.page_listing, self.full_cache or ())
        self._clear_listing()
        # Let the cleared state be observed before the new listing lands
        await asyncio.sleep(0)
        if not self._is_current("listing", token):
            log.debug("Discarding stale search result for %r", query)
            return list(result)
        self.query = None if blank else query
        self._set_listing(result)
        return self.listing

    async def open_detail(self, id_or_name: Any) -> Optional[DetailView]:
        token = self._issue("detail")
        try:
            view = await build_detail_view(self.client, id_or_name)
        except PokedexError as e:
            log.warning("Loading detail for %s failed: %s", id_or_name, e)
            return None
        if not self._is_current("detail", token):
            log.debug("Discarding stale detail for %s", id_or_name)
            return None
        self.detail = view
        return view
