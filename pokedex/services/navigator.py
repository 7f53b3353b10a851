from typing import Awaitable, Callable, Optional
import logging

from ..schemas.catalog import CatalogPage

log = logging.getLogger("pokedex.navigator")


def page_offset(page: int, limit: int) -> int:
    return 0 if page == 1 else (page - 1) * limit


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return -(-total // limit)


class PageNavigator:
    """Maps page numbers onto pager offsets.

    ``clear`` runs before the fetch is issued so a stale page is never shown
    under the new page number. Out-of-range pages are passed through as is; the
    catalog answers them with an empty page.
    """

    def __init__(
        self,
        fetch_page: Callable[[int, int], Awaitable[CatalogPage]],
        limit: int,
        clear: Optional[Callable[[], None]] = None,
    ) -> None:
        self._fetch_page = fetch_page
        self.limit = limit
        self._clear = clear

    async def go_to_page(self, page: int) -> CatalogPage:
        offset = page_offset(page, self.limit)
        if self._clear is not None:
            self._clear()
        log.debug("Navigating to page %s (offset %s)", page, offset)
        return await self._fetch_page(offset, self.limit)
