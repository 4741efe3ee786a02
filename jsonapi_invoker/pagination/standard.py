"""Offset/limit pagination for collection responses."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from .base import PaginationBase

DEFAULT_LIMIT = 10


def _page_url(base_url: str, page: dict[str, Any], offset: int, limit: int) -> str:
    scheme, netloc, path, _, fragment = urlsplit(base_url)
    values = {**page, "offset": offset, "limit": limit}
    query = {f"page[{key}]": value for key, value in values.items()}
    return urlunsplit((scheme, netloc, path, urlencode(query), fragment))


class StandardPagination(PaginationBase):
    """page[offset]/page[limit] pagination."""

    def _window(self, params: dict[str, Any]) -> tuple[int, int] | None:
        page = params.get("page", {})
        offset, limit = int(page.get("offset", 0)), int(page.get("limit", DEFAULT_LIMIT))
        if offset < 0 or limit < 1:
            return None
        return offset, limit

    def paginate_queryset(self, items: list[Any], params: dict[str, Any]) -> list[Any]:
        window = self._window(params)
        if window is None:
            return items
        offset, limit = window
        return items[offset : offset + limit]

    def get_links(self, *, total: int, params: dict[str, Any], base_url: str) -> dict[str, str]:
        """Return self/first/last links, plus prev/next where those pages exist."""
        window = self._window(params)
        if window is None:
            return {}
        offset, limit = window
        page = params.get("page", {})
        last_offset = (max(total - 1, 0) // limit) * limit

        links = {
            "self": _page_url(base_url, page, offset, limit),
            "first": _page_url(base_url, page, 0, limit),
            "last": _page_url(base_url, page, last_offset, limit),
        }
        if offset - limit >= 0:
            links["prev"] = _page_url(base_url, page, offset - limit, limit)
        if offset + limit <= last_offset:
            links["next"] = _page_url(base_url, page, offset + limit, limit)
        return links

    def get_meta(self, *, total: int, params: dict[str, Any]) -> dict[str, Any]:
        window = self._window(params) or (0, total)
        offset, limit = window
        return {"total": total, "limit": limit, "offset": offset}
