"""Repository protocol and simple implementations."""

from __future__ import annotations

import itertools
from typing import Any, Generic, Iterable, Protocol, TypeVar, runtime_checkable

from jsonapi_invoker.core.errors import RepositoryNotFoundError, ResourceNotFoundError

T = TypeVar("T")


@runtime_checkable
class ResourceRepository(Protocol):
    """Data access for one resource type."""

    async def find_one(self, resource_id: Any, params: dict[str, Any]) -> Any | None:
        ...

    async def find_all(self, params: dict[str, Any]) -> Iterable[Any]:
        ...

    async def find_all_with_ids(self, ids: Iterable[Any], params: dict[str, Any]) -> Iterable[Any]:
        ...

    async def save(self, resource: Any) -> Any:
        ...

    async def delete(self, resource_id: Any) -> None:
        ...


class InMemoryRepository(Generic[T]):
    """Dictionary-backed repository; assigns integer ids to unsaved resources."""

    def __init__(self, resources: Iterable[T] = ()) -> None:
        self._store: dict[Any, T] = {}
        self._ids = itertools.count(1)
        for resource in resources:
            self._store[getattr(resource, "id")] = resource

    async def find_one(self, resource_id: Any, params: dict[str, Any]) -> T | None:
        return self._store.get(resource_id)

    async def find_all(self, params: dict[str, Any]) -> list[T]:
        items = list(self._store.values())
        # Unknown sort fields are ignored; None sorts last in either direction
        for order in reversed(params.get("sort", [])):
            name = order["field"]
            if items and not hasattr(items[0], name):
                continue
            present = [item for item in items if getattr(item, name) is not None]
            missing = [item for item in items if getattr(item, name) is None]
            present.sort(key=lambda item: getattr(item, name), reverse=order["direction"] == "desc")
            items = present + missing
        return items

    async def find_all_with_ids(self, ids: Iterable[Any], params: dict[str, Any]) -> list[T]:
        return [self._store[resource_id] for resource_id in ids if resource_id in self._store]

    async def save(self, resource: T) -> T:
        resource_id = getattr(resource, "id")
        if resource_id is None:
            resource_id = next(self._ids)
            while resource_id in self._store:
                resource_id = next(self._ids)
            resource = resource.model_copy(update={"id": resource_id})
        self._store[resource_id] = resource
        return resource

    async def delete(self, resource_id: Any) -> None:
        if self._store.pop(resource_id, None) is None:
            raise ResourceNotFoundError(f"resource with id '{resource_id}' not found")


class NotFoundRepository:
    """Stand-in for resources registered without a repository."""

    def __init__(self, resource_type: str) -> None:
        self.resource_type = resource_type

    def _missing(self) -> RepositoryNotFoundError:
        return RepositoryNotFoundError(f"no repository registered for '{self.resource_type}'")

    async def find_one(self, resource_id: Any, params: dict[str, Any]) -> Any:
        raise self._missing()

    async def find_all(self, params: dict[str, Any]) -> Any:
        raise self._missing()

    async def find_all_with_ids(self, ids: Iterable[Any], params: dict[str, Any]) -> Any:
        raise self._missing()

    async def save(self, resource: Any) -> Any:
        raise self._missing()

    async def delete(self, resource_id: Any) -> None:
        raise self._missing()
