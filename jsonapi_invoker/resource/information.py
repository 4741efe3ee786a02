"""Resource metadata derived from decorated pydantic models."""

from __future__ import annotations

import types
import typing
from collections import abc
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from jsonapi_invoker.core.errors import ConfigurationError
from jsonapi_invoker.resource.annotations import resource_meta

ID_FIELD = "id"


@dataclass(frozen=True)
class ResourceField:
    """A model field and the name it carries in JSON:API documents."""

    underlying_name: str
    json_name: str
    annotation: Any = None
    to_many: bool = False
    target_class: type | None = None


@dataclass(frozen=True)
class ResourceInformation:
    resource_class: type
    resource_type: str
    id_field: ResourceField
    attribute_fields: tuple[ResourceField, ...]
    relationship_fields: tuple[ResourceField, ...]

    def find_attribute(self, json_name: str) -> ResourceField | None:
        for field in self.attribute_fields:
            if field.json_name == json_name:
                return field
        return None

    def find_relationship(self, json_name: str) -> ResourceField | None:
        for field in self.relationship_fields:
            if field.json_name == json_name:
                return field
        return None


class ResourceFieldNameTransformer:
    """Map model field names to their JSON names (serialization alias, alias, name)."""

    def get_name(self, name: str, field_info: FieldInfo) -> str:
        return field_info.serialization_alias or field_info.alias or name


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _relationship_shape(annotation: Any) -> tuple[bool, type | None]:
    """Return (to_many, target class) for a relationship annotation."""
    annotation = _unwrap_optional(annotation)
    origin = typing.get_origin(annotation)
    if origin in (list, tuple, set, frozenset, abc.Sequence, abc.Iterable):
        args = typing.get_args(annotation)
        target = _unwrap_optional(args[0]) if args else None
        return True, target if isinstance(target, type) else None
    return False, annotation if isinstance(annotation, type) else None


class ResourceInformationBuilder:
    """Build :class:`ResourceInformation` for classes marked with ``jsonapi_resource``."""

    def __init__(self, field_name_transformer: ResourceFieldNameTransformer | None = None) -> None:
        self.field_name_transformer = field_name_transformer or ResourceFieldNameTransformer()

    def accept(self, cls: type) -> bool:
        return resource_meta(cls) is not None

    def build(self, resource_class: type) -> ResourceInformation:
        meta = resource_meta(resource_class)
        if meta is None:
            raise ConfigurationError(f"{resource_class.__name__} is not a JSON:API resource")
        if not (isinstance(resource_class, type) and issubclass(resource_class, BaseModel)):
            raise ConfigurationError(f"resource {resource_class.__name__} must be a pydantic model")

        model_fields = resource_class.model_fields
        if ID_FIELD not in model_fields:
            raise ConfigurationError(f"resource {resource_class.__name__} has no id field")

        unknown = set(meta.relationships) - set(model_fields)
        if unknown:
            raise ConfigurationError(
                f"resource {resource_class.__name__} declares unknown relationships: "
                f"{', '.join(sorted(unknown))}"
            )

        id_info = model_fields[ID_FIELD]
        id_field = ResourceField(ID_FIELD, ID_FIELD, _unwrap_optional(id_info.annotation))
        attributes: list[ResourceField] = []
        relationships: list[ResourceField] = []
        for name, field_info in model_fields.items():
            if name == ID_FIELD:
                continue
            json_name = self.field_name_transformer.get_name(name, field_info)
            if name in meta.relationships:
                to_many, target = _relationship_shape(field_info.annotation)
                relationships.append(
                    ResourceField(name, json_name, field_info.annotation, to_many, target)
                )
            else:
                attributes.append(ResourceField(name, json_name, field_info.annotation))

        return ResourceInformation(
            resource_class=resource_class,
            resource_type=meta.type_,
            id_field=id_field,
            attribute_fields=tuple(attributes),
            relationship_fields=tuple(relationships),
        )
