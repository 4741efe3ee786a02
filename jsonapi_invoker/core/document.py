"""JSON:API document construction."""

from typing import Any, Iterable, Mapping


class JSONAPIDocumentBuilder:
    """Build JSON:API v1.1 documents from serialized data."""

    def build_single(
        self,
        resource: Mapping[str, Any] | None,
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a single resource object (or null)."""
        document: dict[str, Any] = {"data": dict(resource) if resource is not None else None}
        return self._add_top_level(document, included=included, links=links, meta=meta)

    def build_collection(
        self,
        resources: Iterable[Mapping[str, Any]],
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a collection of resources."""
        document: dict[str, Any] = {"data": [dict(item) for item in resources]}
        return self._add_top_level(document, included=included, links=links, meta=meta)

    def build_linkage(
        self, linkage: Any, *, links: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Return a relationship document holding resource identifiers."""
        document: dict[str, Any] = {"data": linkage}
        if links:
            document["links"] = dict(links)
        return document

    def build_error(self, errors: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        """Return a JSON:API error document from error objects."""
        return {"errors": [dict(error) for error in errors]}

    def _add_top_level(
        self,
        document: dict[str, Any],
        *,
        included: Iterable[Mapping[str, Any]] | None,
        links: Mapping[str, Any] | None,
        meta: Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        if included:
            document["included"] = [dict(item) for item in included]
        if links:
            document["links"] = dict(links)
        if meta:
            document["meta"] = dict(meta)
        return document
