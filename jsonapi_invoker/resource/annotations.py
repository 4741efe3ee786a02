"""Class decorators that mark resources and their repositories for scanning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

C = TypeVar("C", bound=type)

RESOURCE_ATTR = "__jsonapi_resource__"
REPOSITORY_ATTR = "__jsonapi_repository__"


@dataclass(frozen=True)
class ResourceMeta:
    type_: str
    relationships: tuple[str, ...] = ()


def jsonapi_resource(type_: str, *, relationships: Iterable[str] = ()) -> Callable[[C], C]:
    """Mark a pydantic model as a JSON:API resource of the given type.

    Fields named in ``relationships`` are exposed as relationships; every other
    field except ``id`` becomes an attribute.
    """

    def decorate(cls: C) -> C:
        setattr(cls, RESOURCE_ATTR, ResourceMeta(type_=type_, relationships=tuple(relationships)))
        return cls

    return decorate


def jsonapi_repository(resource_class: type) -> Callable[[C], C]:
    """Mark a class as the repository serving ``resource_class``."""

    def decorate(cls: C) -> C:
        setattr(cls, REPOSITORY_ATTR, resource_class)
        return cls

    return decorate


def resource_meta(cls: type) -> ResourceMeta | None:
    # Only the class carrying the decorator itself counts, not its subclasses
    return cls.__dict__.get(RESOURCE_ATTR)


def is_resource(cls: type) -> bool:
    return resource_meta(cls) is not None


def repository_target(cls: type) -> type | None:
    return cls.__dict__.get(REPOSITORY_ATTR)


def is_repository(cls: type) -> bool:
    return repository_target(cls) is not None
