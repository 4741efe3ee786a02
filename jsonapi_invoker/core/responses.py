"""Response objects returned by controllers and written by the data mapper."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResourceResponse:
    """A single primary resource (or ``None``)."""

    data: Any
    params: dict[str, Any] = field(default_factory=dict)
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None
    status: int = 200


@dataclass(frozen=True)
class CollectionResponse:
    """A collection of primary resources."""

    data: list[Any]
    params: dict[str, Any] = field(default_factory=dict)
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None
    status: int = 200


@dataclass(frozen=True)
class LinkageResponse:
    """Resource linkage of one relationship of ``resource``."""

    resource: Any
    relationship: str
    links: dict[str, Any] | None = None
    status: int = 200


@dataclass(frozen=True)
class ErrorResponse:
    errors: list[dict[str, Any]]
    status: int = 500


@dataclass(frozen=True)
class NoContentResponse:
    status: int = 204


BaseResponse = (
    ResourceResponse | CollectionResponse | LinkageResponse | ErrorResponse | NoContentResponse
)
