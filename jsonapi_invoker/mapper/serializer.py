"""Serialize registered resources into JSON:API resource objects."""

from __future__ import annotations

from typing import Any, Iterable

from jsonapi_invoker.core.errors import JSONAPIError
from jsonapi_invoker.resource.information import ResourceField, ResourceInformation
from jsonapi_invoker.resource.registry import ResourceRegistry


class ResourceSerializer:
    """Serialize resource instances using metadata from the resource registry."""

    def __init__(self, resource_registry: ResourceRegistry) -> None:
        self.resource_registry = resource_registry

    def get_information(self, instance: Any) -> ResourceInformation:
        entry = self.resource_registry.get_entry_for_class(type(instance))
        if entry is None:
            raise JSONAPIError(f"{type(instance).__name__} is not a registered resource")
        return entry.resource_information

    def to_resource(self, instance: Any, *, fields: list[str] | None = None) -> dict[str, Any]:
        """Serialize a resource instance into a JSON:API resource object."""
        info = self.get_information(instance)
        resource_id = self.get_id(instance)
        base_url = self.resource_registry.get_resource_url(info)
        resource: dict[str, Any] = {"type": info.resource_type, "id": resource_id}
        attributes = self.get_attributes(instance, info, fields=fields)
        if attributes:
            resource["attributes"] = attributes
        relationships = self.get_relationships(instance, info, base_url, fields=fields)
        if relationships:
            resource["relationships"] = relationships
        resource["links"] = {"self": f"{base_url}/{resource_id}"}
        return resource

    def to_many(
        self, instances: Iterable[Any], *, fields: list[str] | None = None
    ) -> list[dict[str, Any]]:
        return [self.to_resource(instance, fields=fields) for instance in instances]

    def get_id(self, instance: Any) -> str:
        """Return the resource id as a string."""
        value = getattr(instance, "id", None)
        return "" if value is None else str(value)

    def get_attributes(
        self, instance: Any, info: ResourceInformation, *, fields: list[str] | None = None
    ) -> dict[str, Any]:
        allowed_fields = set(fields) if fields else None
        return {
            field.json_name: getattr(instance, field.underlying_name)
            for field in info.attribute_fields
            if allowed_fields is None or field.json_name in allowed_fields
        }

    def get_relationships(
        self,
        instance: Any,
        info: ResourceInformation,
        base_url: str,
        *,
        fields: list[str] | None = None,
    ) -> dict[str, Any]:
        """Return relationship objects, honouring sparse fieldsets."""
        allowed_fields = set(fields) if fields else None
        resource_path = f"{base_url}/{self.get_id(instance)}"
        relationships: dict[str, Any] = {}
        for field in info.relationship_fields:
            if allowed_fields is not None and field.json_name not in allowed_fields:
                continue
            relationships[field.json_name] = {
                "links": self.relationship_links(resource_path, field.json_name),
                "data": self.linkage(instance, field),
            }
        return relationships

    def relationship_links(self, resource_path: str, relationship: str) -> dict[str, str]:
        return {
            "self": f"{resource_path}/relationships/{relationship}",
            "related": f"{resource_path}/{relationship}",
        }

    def linkage(self, instance: Any, field: ResourceField) -> Any:
        """Return resource identifier(s) for a relationship field."""
        related = getattr(instance, field.underlying_name, None)
        if field.to_many:
            return [self.identifier(item) for item in related or []]
        if related is None:
            return None
        return self.identifier(related)

    def identifier(self, related: Any) -> dict[str, str]:
        type_name = self.resource_registry.get_resource_type(type(related))
        if type_name is None:
            type_name = getattr(related, "__tablename__", related.__class__.__name__.lower())
        return {"type": type_name, "id": self.get_id(related)}

    def build_included(
        self,
        instances: Iterable[Any],
        include_paths: list[str],
        *,
        fields_map: dict[str, list[str]] | None = None,
    ) -> list[dict[str, Any]]:
        """Build included resource objects by walking dotted include paths."""
        fields_map = fields_map or {}
        primary = list(instances)
        included: list[dict[str, Any]] = []
        seen: set[tuple[str, str]] = {
            (self.get_information(item).resource_type, self.get_id(item)) for item in primary
        }

        for include_path in include_paths:
            parts = [part for part in include_path.split(".") if part]
            current_objects = primary
            for relationship in parts:
                next_objects: list[Any] = []
                for current in current_objects:
                    field = self._relationship_field(current, relationship)
                    if field is None:
                        continue
                    related = getattr(current, field.underlying_name, None)
                    if related is None:
                        continue
                    if field.to_many:
                        next_objects.extend(related)
                    else:
                        next_objects.append(related)
                current_objects = next_objects

                for related_instance in current_objects:
                    entry = self.resource_registry.get_entry_for_class(type(related_instance))
                    if entry is None:
                        continue
                    resource_type = entry.resource_information.resource_type
                    key = (resource_type, self.get_id(related_instance))
                    if key in seen:
                        continue
                    seen.add(key)
                    included.append(
                        self.to_resource(
                            related_instance, fields=fields_map.get(resource_type) or None
                        )
                    )
        return included

    def _relationship_field(self, instance: Any, json_name: str) -> ResourceField | None:
        entry = self.resource_registry.get_entry_for_class(type(instance))
        if entry is None:
            return None
        return entry.resource_information.find_relationship(json_name)
