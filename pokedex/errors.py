from typing import Optional


class PokedexError(Exception):
    """Base class for every error raised by the catalog layer."""


class FetchError(PokedexError):
    """Remote resource unreachable or answered with a non-success status."""

    def __init__(self, status_code: int, detail: str = "", url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.detail = detail
        self.url = url
        super().__init__(f"{status_code}: {detail}" if detail else str(status_code))


class NotFoundError(FetchError):
    def __init__(self, detail: str = "", url: Optional[str] = None) -> None:
        super().__init__(404, detail, url)


class ShapeError(PokedexError):
    """Payload is missing fields the catalog layer needs (e.g. no usable sprite)."""
