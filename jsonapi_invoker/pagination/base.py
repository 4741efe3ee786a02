"""Pagination interface for collection responses."""

from typing import Any


class PaginationBase:
    """Slice a collection and describe the slice with links and meta."""

    def paginate_queryset(self, items: list[Any], params: dict[str, Any]) -> list[Any]:
        raise NotImplementedError

    def get_links(self, *, total: int, params: dict[str, Any], base_url: str) -> dict[str, str]:
        """Return pagination links relative to the collection URL ``base_url``."""
        raise NotImplementedError

    def get_meta(self, *, total: int, params: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError
