"""Resource registry and its package-scanning builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator

from jsonapi_invoker.core.errors import ConfigurationError
from jsonapi_invoker.locator import ServiceLocator
from jsonapi_invoker.resource.annotations import is_repository, is_resource, repository_target
from jsonapi_invoker.resource.information import ResourceInformation, ResourceInformationBuilder
from jsonapi_invoker.resource.repository import NotFoundRepository
from jsonapi_invoker.utils.scanning import scan_package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    resource_information: ResourceInformation
    repository: Any


class ResourceRegistry:
    """Map resource types and classes to their metadata and repositories."""

    def __init__(self, service_url: str) -> None:
        self.service_url = service_url.rstrip("/")
        self._by_class: dict[type, RegistryEntry] = {}
        self._by_type: dict[str, RegistryEntry] = {}

    def add_entry(self, entry: RegistryEntry) -> None:
        info = entry.resource_information
        self._by_class[info.resource_class] = entry
        self._by_type[info.resource_type] = entry

    def get_entry(self, resource_type: str) -> RegistryEntry | None:
        return self._by_type.get(resource_type)

    def get_entry_for_class(self, cls: type) -> RegistryEntry | None:
        """Return the entry for ``cls`` or its nearest registered base class."""
        for klass in cls.__mro__:
            entry = self._by_class.get(klass)
            if entry is not None:
                return entry
        return None

    def get_resource_type(self, cls: type) -> str | None:
        entry = self.get_entry_for_class(cls)
        return entry.resource_information.resource_type if entry else None

    def get_resource_url(self, resource_information: ResourceInformation) -> str:
        return f"{self.service_url}/{resource_information.resource_type}"

    @property
    def resource_types(self) -> list[str]:
        return list(self._by_type)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._by_type.values())

    def __len__(self) -> int:
        return len(self._by_type)

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._by_type


class ResourceRegistryBuilder:
    """Scan packages for resources and bind each to a repository instance."""

    def __init__(
        self,
        service_locator: ServiceLocator,
        resource_information_builder: ResourceInformationBuilder,
    ) -> None:
        self.service_locator = service_locator
        self.resource_information_builder = resource_information_builder

    def build(self, search_package: str, service_url: str) -> ResourceRegistry:
        classes = scan_package(
            search_package, lambda cls: is_resource(cls) or is_repository(cls)
        )
        repositories = {
            repository_target(cls): cls for cls in classes if is_repository(cls)
        }

        registry = ResourceRegistry(service_url)
        for resource_class in (cls for cls in classes if is_resource(cls)):
            info = self.resource_information_builder.build(resource_class)
            existing = registry.get_entry(info.resource_type)
            if existing is not None:
                raise ConfigurationError(
                    f"resource type '{info.resource_type}' is declared by both "
                    f"{existing.resource_information.resource_class.__name__} "
                    f"and {resource_class.__name__}"
                )
            repository_class = repositories.get(resource_class)
            if repository_class is None:
                logger.warning(
                    "No repository found for resource %s",
                    info.resource_type,
                    extra={"resource_type": info.resource_type},
                )
                repository: Any = NotFoundRepository(info.resource_type)
            else:
                repository = self.service_locator.get_instance(repository_class)
            registry.add_entry(RegistryEntry(info, repository))
            logger.info(
                "Registered resource %s -> %s",
                info.resource_type,
                resource_class.__name__,
                extra={"resource_type": info.resource_type},
            )
        return registry
