"""The JSON:API data-binding module installed on a :class:`DataMapper`."""

from __future__ import annotations

from typing import Any

from jsonapi_invoker.core.document import JSONAPIDocumentBuilder
from jsonapi_invoker.core.errors import JSONAPIError
from jsonapi_invoker.core.responses import (
    CollectionResponse,
    ErrorResponse,
    LinkageResponse,
    ResourceResponse,
)
from jsonapi_invoker.mapper.data_mapper import DataMapper
from jsonapi_invoker.mapper.serializer import ResourceSerializer
from jsonapi_invoker.resource.registry import ResourceRegistry

MODULE_NAME = "JsonApiModule"


def _resource_fields(
    resource_type: str | None, fields_map: dict[str, list[str]], include_paths: list[str]
) -> list[str] | None:
    """Sparse fieldset for primary data; included relationships are always kept."""
    resource_fields = fields_map.get(resource_type or "") or None
    if resource_fields and include_paths:
        first_level = {path.split(".")[0] for path in include_paths}
        resource_fields = list(set(resource_fields) | first_level)
    return resource_fields


class DataBindingModule:
    """Serializers for resources and controller responses."""

    def __init__(
        self,
        resource_registry: ResourceRegistry,
        *,
        document_builder: JSONAPIDocumentBuilder | None = None,
        name: str = MODULE_NAME,
    ) -> None:
        self.name = name
        self.resource_registry = resource_registry
        self.serializer = ResourceSerializer(resource_registry)
        self.document_builder = document_builder or JSONAPIDocumentBuilder()

    def setup(self, mapper: DataMapper) -> None:
        for entry in self.resource_registry:
            mapper.add_serializer(
                entry.resource_information.resource_class, self.serializer.to_resource
            )
        mapper.add_serializer(ResourceResponse, self.serialize_resource_response)
        mapper.add_serializer(CollectionResponse, self.serialize_collection_response)
        mapper.add_serializer(LinkageResponse, self.serialize_linkage_response)
        mapper.add_serializer(ErrorResponse, self.serialize_error_response)

    def serialize_resource_response(self, response: ResourceResponse) -> dict[str, Any]:
        fields_map = response.params.get("fields", {})
        include_paths = response.params.get("include", [])
        if response.data is None:
            return self.document_builder.build_single(None, links=response.links, meta=response.meta)
        resource_type = self.resource_registry.get_resource_type(type(response.data))
        resource = self.serializer.to_resource(
            response.data, fields=_resource_fields(resource_type, fields_map, include_paths)
        )
        included = (
            self.serializer.build_included([response.data], include_paths, fields_map=fields_map)
            if include_paths
            else None
        )
        return self.document_builder.build_single(
            resource, included=included, links=response.links, meta=response.meta
        )

    def serialize_collection_response(self, response: CollectionResponse) -> dict[str, Any]:
        fields_map = response.params.get("fields", {})
        include_paths = response.params.get("include", [])
        resources = [
            self.serializer.to_resource(
                item,
                fields=_resource_fields(
                    self.resource_registry.get_resource_type(type(item)), fields_map, include_paths
                ),
            )
            for item in response.data
        ]
        included = (
            self.serializer.build_included(response.data, include_paths, fields_map=fields_map)
            if include_paths
            else None
        )
        return self.document_builder.build_collection(
            resources, included=included, links=response.links, meta=response.meta
        )

    def serialize_linkage_response(self, response: LinkageResponse) -> dict[str, Any]:
        info = self.serializer.get_information(response.resource)
        field = info.find_relationship(response.relationship)
        if field is None:
            raise JSONAPIError(
                f"'{info.resource_type}' has no relationship '{response.relationship}'"
            )
        return self.document_builder.build_linkage(
            self.serializer.linkage(response.resource, field), links=response.links
        )

    def serialize_error_response(self, response: ErrorResponse) -> dict[str, Any]:
        return self.document_builder.build_error(response.errors)


class JSONAPIModuleBuilder:
    """Build the data-binding module for a resource registry."""

    def build(self, resource_registry: ResourceRegistry) -> DataBindingModule:
        return DataBindingModule(resource_registry)
