"""Resource metadata, registry and repositories."""

from .annotations import jsonapi_repository, jsonapi_resource
from .information import (
    ResourceField,
    ResourceFieldNameTransformer,
    ResourceInformation,
    ResourceInformationBuilder,
)
from .registry import RegistryEntry, ResourceRegistry, ResourceRegistryBuilder
from .repository import InMemoryRepository, NotFoundRepository, ResourceRepository

__all__ = [
    "InMemoryRepository",
    "NotFoundRepository",
    "RegistryEntry",
    "ResourceField",
    "ResourceFieldNameTransformer",
    "ResourceInformation",
    "ResourceInformationBuilder",
    "ResourceRegistry",
    "ResourceRegistryBuilder",
    "ResourceRepository",
    "jsonapi_repository",
    "jsonapi_resource",
]
