"""Controllers handling one kind of JSON:API request each."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from jsonapi_invoker.core.errors import BadRequestError, ConflictError, ResourceNotFoundError
from jsonapi_invoker.core.responses import (
    CollectionResponse,
    LinkageResponse,
    NoContentResponse,
    ResourceResponse,
)
from jsonapi_invoker.dispatcher.path import JsonPath
from jsonapi_invoker.mapper.data_mapper import DataMapper
from jsonapi_invoker.pagination.base import PaginationBase
from jsonapi_invoker.pagination.standard import StandardPagination
from jsonapi_invoker.resource.information import ResourceField, ResourceInformation
from jsonapi_invoker.resource.registry import RegistryEntry, ResourceRegistry
from jsonapi_invoker.schemas.resource import (
    JSONAPIRelationship,
    JSONAPIRequestDocument,
    JSONAPIResource,
)
from jsonapi_invoker.utils.type_parser import TypeParser

logger = logging.getLogger(__name__)


def _input_key(resource_class: type, name: str) -> str:
    field_info = resource_class.model_fields[name]
    if isinstance(field_info.validation_alias, str):
        return field_info.validation_alias
    return field_info.alias or name


class BaseController:
    """Shared lookups for controllers; subclasses implement the action."""

    method: str = ""

    def __init__(
        self,
        resource_registry: ResourceRegistry,
        type_parser: TypeParser,
        data_mapper: DataMapper,
    ) -> None:
        self.resource_registry = resource_registry
        self.type_parser = type_parser
        self.data_mapper = data_mapper

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        raise NotImplementedError

    async def handle(
        self, json_path: JsonPath, params: dict[str, Any], body: Any
    ) -> Any:
        raise NotImplementedError

    def get_entry(self, resource_type: str) -> RegistryEntry:
        entry = self.resource_registry.get_entry(resource_type)
        if entry is None:
            raise ResourceNotFoundError(
                f"resource type '{resource_type}' not found", code="unknown_resource_type"
            )
        return entry

    def resource_url(self, info: ResourceInformation, resource_id: Any | None = None) -> str:
        url = self.resource_registry.get_resource_url(info)
        return url if resource_id is None else f"{url}/{resource_id}"

    def parse_id(self, info: ResourceInformation, resource_id: str) -> Any:
        return self.type_parser.parse(resource_id, info.id_field.annotation)

    async def find_resource(
        self, entry: RegistryEntry, resource_id: str, params: dict[str, Any]
    ) -> Any:
        info = entry.resource_information
        resource = await entry.repository.find_one(self.parse_id(info, resource_id), params)
        if resource is None:
            raise ResourceNotFoundError(
                f"resource '{info.resource_type}' with id '{resource_id}' not found"
            )
        return resource

    def resolve_sort(self, info: ResourceInformation, params: dict[str, Any]) -> dict[str, Any]:
        """Return ``params`` with sort fields translated to model attribute names.

        Only the id and attributes are sortable; relationships and unknown names are
        rejected with 400.
        """
        resolved = []
        for order in params.get("sort", []):
            name = order["field"]
            field = info.id_field if name == info.id_field.json_name else info.find_attribute(name)
            if field is None:
                reason = "a relationship" if info.find_relationship(name) else "not an attribute"
                raise BadRequestError(
                    f"cannot sort '{info.resource_type}' by '{name}': {reason}",
                    code="invalid_sort",
                    source={"parameter": "sort"},
                )
            resolved.append({**order, "field": field.underlying_name})
        return {**params, "sort": resolved}

    def get_relationship_field(self, info: ResourceInformation, name: str) -> ResourceField:
        field = info.find_relationship(name)
        if field is None:
            raise ResourceNotFoundError(
                f"'{info.resource_type}' has no relationship '{name}'",
                code="unknown_relationship",
            )
        return field


class CollectionGetController(BaseController):
    """GET /{type}"""

    method = "GET"
    pagination_class: type[PaginationBase] = StandardPagination

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return method == self.method and json_path.is_collection and not json_path.is_field

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        query = self.resolve_sort(entry.resource_information, params)
        items = list(await entry.repository.find_all(query))
        url = self.resource_url(entry.resource_information)
        links: dict[str, Any] = {"self": url}
        meta = None
        if params.get("page"):
            paginator = self.pagination_class()
            total = len(items)
            items = paginator.paginate_queryset(items, params)
            links.update(paginator.get_links(total=total, params=params, base_url=url))
            meta = paginator.get_meta(total=total, params=params)
        return CollectionResponse(items, params, links=links, meta=meta)


class ResourceGetController(BaseController):
    """GET /{type}/{id} and GET /{type}/{id1},{id2}"""

    method = "GET"

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return method == self.method and not json_path.is_collection and not json_path.is_field

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        info = entry.resource_information
        if json_path.single_id is not None:
            resource = await self.find_resource(entry, json_path.single_id, params)
            return ResourceResponse(
                resource, params, links={"self": self.resource_url(info, json_path.single_id)}
            )
        ids = [self.parse_id(info, resource_id) for resource_id in json_path.ids]
        items = list(
            await entry.repository.find_all_with_ids(ids, self.resolve_sort(info, params))
        )
        return CollectionResponse(
            items, params, links={"self": self.resource_url(info, ",".join(json_path.ids))}
        )


class _ResourceWriteController(BaseController):
    """Turns request documents into validated resource instances."""

    def read_document(self, body: Any) -> JSONAPIResource:
        if body is None:
            raise BadRequestError("request body is required", code="missing_body")
        try:
            return JSONAPIRequestDocument.model_validate(body).data
        except ValidationError as exc:
            raise BadRequestError(
                "request body must be a JSON:API document with a data object",
                code="invalid_document",
                source={"pointer": "/data"},
            ) from exc

    def check_type(self, info: ResourceInformation, data: JSONAPIResource) -> None:
        if data.type != info.resource_type:
            raise ConflictError(
                f"document type '{data.type}' does not match endpoint type '{info.resource_type}'",
                source={"pointer": "/data/type"},
            )

    async def build_resource(
        self, info: ResourceInformation, data: JSONAPIResource, existing: Any = None
    ) -> Any:
        resource_class = info.resource_class
        values: dict[str, Any] = {}
        if existing is not None:
            values = {
                _input_key(resource_class, name): getattr(existing, name)
                for name in resource_class.model_fields
            }
        elif data.id is not None:
            values[_input_key(resource_class, "id")] = data.id

        for json_name, value in (data.attributes or {}).items():
            field = info.find_attribute(json_name)
            if field is None:
                raise BadRequestError(
                    f"unknown attribute '{json_name}'",
                    source={"pointer": f"/data/attributes/{json_name}"},
                )
            values[_input_key(resource_class, field.underlying_name)] = value

        for json_name, relationship in (data.relationships or {}).items():
            field = info.find_relationship(json_name)
            if field is None:
                raise BadRequestError(
                    f"unknown relationship '{json_name}'",
                    source={"pointer": f"/data/relationships/{json_name}"},
                )
            values[_input_key(resource_class, field.underlying_name)] = await self.resolve_linkage(
                field, relationship
            )

        return self.data_mapper.convert_value(values, resource_class)

    async def resolve_linkage(self, field: ResourceField, relationship: JSONAPIRelationship) -> Any:
        """Load the resources a relationship object points at."""
        data = relationship.data
        if field.to_many:
            identifiers = data if isinstance(data, list) else [data] if data else []
            return [
                await self.find_resource(self.get_entry(item.type), item.id, {})
                for item in identifiers
            ]
        if isinstance(data, list):
            raise BadRequestError(
                f"relationship '{field.json_name}' is to-one",
                source={"pointer": f"/data/relationships/{field.json_name}/data"},
            )
        if data is None:
            return None
        return await self.find_resource(self.get_entry(data.type), data.id, {})


class ResourcePostController(_ResourceWriteController):
    """POST /{type}"""

    method = "POST"

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return method == self.method and json_path.is_collection and not json_path.is_field

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        info = entry.resource_information
        data = self.read_document(body)
        self.check_type(info, data)
        resource = await self.build_resource(info, data)
        saved = await entry.repository.save(resource)
        logger.info(
            "Created %s %s", info.resource_type, saved.id, extra={"resource_type": info.resource_type}
        )
        return ResourceResponse(
            saved, params, links={"self": self.resource_url(info, saved.id)}, status=201
        )


class ResourcePatchController(_ResourceWriteController):
    """PATCH /{type}/{id}"""

    method = "PATCH"

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return (
            method == self.method
            and json_path.single_id is not None
            and not json_path.is_field
        )

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        info = entry.resource_information
        data = self.read_document(body)
        self.check_type(info, data)
        if data.id is not None and data.id != json_path.single_id:
            raise ConflictError(
                f"document id '{data.id}' does not match endpoint id '{json_path.single_id}'",
                source={"pointer": "/data/id"},
            )
        existing = await self.find_resource(entry, json_path.single_id, params)
        resource = await self.build_resource(info, data, existing)
        saved = await entry.repository.save(resource)
        return ResourceResponse(
            saved, params, links={"self": self.resource_url(info, json_path.single_id)}
        )


class ResourceDeleteController(BaseController):
    """DELETE /{type}/{id}[,{id}...]"""

    method = "DELETE"

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return method == self.method and not json_path.is_collection and not json_path.is_field

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        info = entry.resource_information
        for resource_id in json_path.ids:
            await entry.repository.delete(self.parse_id(info, resource_id))
        return NoContentResponse()


class RelationshipsGetController(BaseController):
    """GET /{type}/{id}/relationships/{relationship}"""

    method = "GET"

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return method == self.method and json_path.is_field and json_path.relationship_linkage

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        info = entry.resource_information
        field = self.get_relationship_field(info, json_path.field_name)
        resource = await self.find_resource(entry, json_path.single_id, params)
        resource_path = self.resource_url(info, json_path.single_id)
        return LinkageResponse(
            resource,
            field.json_name,
            links={
                "self": f"{resource_path}/relationships/{field.json_name}",
                "related": f"{resource_path}/{field.json_name}",
            },
        )


class RelatedGetController(BaseController):
    """GET /{type}/{id}/{relationship}"""

    method = "GET"

    def is_acceptable(self, json_path: JsonPath, method: str) -> bool:
        return method == self.method and json_path.is_field and not json_path.relationship_linkage

    async def handle(self, json_path: JsonPath, params: dict[str, Any], body: Any) -> Any:
        entry = self.get_entry(json_path.resource_type)
        info = entry.resource_information
        field = self.get_relationship_field(info, json_path.field_name)
        resource = await self.find_resource(entry, json_path.single_id, params)
        related = getattr(resource, field.underlying_name, None)
        links = {"self": f"{self.resource_url(info, json_path.single_id)}/{field.json_name}"}
        if field.to_many:
            return CollectionResponse(list(related or []), params, links=links)
        return ResourceResponse(related, params, links=links)


DEFAULT_CONTROLLERS: tuple[type[BaseController], ...] = (
    CollectionGetController,
    ResourceGetController,
    ResourcePostController,
    ResourcePatchController,
    ResourceDeleteController,
    RelationshipsGetController,
    RelatedGetController,
)
