"""Assemble a :class:`JSONAPIInvoker` from optional, pre-built collaborators.

Missing collaborators are built from defaults in a fixed order:

1. resource registry (scans ``resource_search_package`` for resources and
   repositories; needs a service locator),
2. data mapper (its data-binding module reads the registry),
3. request dispatcher (exception mapper registry first, then controllers over
   the registry and the mapper).

All configuration problems are reported as :class:`ConfigurationError` before
any collaborator is constructed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Generic, NamedTuple, TypeVar, Union

from jsonapi_invoker.config import InvokerSettings
from jsonapi_invoker.core.errors import ConfigurationError
from jsonapi_invoker.dispatcher.dispatcher import RequestDispatcher
from jsonapi_invoker.dispatcher.registry import ControllerRegistryBuilder
from jsonapi_invoker.errorhandling.registry import (
    ExceptionMapperRegistry,
    ExceptionMapperRegistryBuilder,
)
from jsonapi_invoker.invoker.invoker import JSONAPIInvoker
from jsonapi_invoker.locator import ServiceLocator
from jsonapi_invoker.mapper.data_mapper import DataMapper, Module
from jsonapi_invoker.mapper.module import JSONAPIModuleBuilder
from jsonapi_invoker.resource.information import (
    ResourceFieldNameTransformer,
    ResourceInformationBuilder,
)
from jsonapi_invoker.resource.registry import ResourceRegistry, ResourceRegistryBuilder
from jsonapi_invoker.utils.type_parser import TypeParser

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Provided(Generic[T]):
    value: T


@dataclass(frozen=True)
class NeedsDefault:
    pass


NEEDS_DEFAULT = NeedsDefault()

Resolution = Union[Provided[T], NeedsDefault]


def resolution(value: T | None) -> Resolution[T]:
    return NEEDS_DEFAULT if value is None else Provided(value)


@dataclass(frozen=True)
class InvokerConfig:
    """Immutable invoker configuration; ``with_*`` returns an updated copy."""

    data_mapper: DataMapper | None = None
    resource_registry: ResourceRegistry | None = None
    request_dispatcher: RequestDispatcher | None = None
    service_locator: ServiceLocator | None = None
    exception_mapper_registry: ExceptionMapperRegistry | None = None
    resource_search_package: str | None = None
    resource_default_domain: str | None = None

    @classmethod
    def from_settings(cls, settings: InvokerSettings, **overrides: Any) -> "InvokerConfig":
        values: dict[str, Any] = {
            "resource_search_package": settings.resource_search_package,
            "resource_default_domain": settings.resource_default_domain,
        }
        values.update(overrides)
        return cls(**values)

    def with_data_mapper(self, data_mapper: DataMapper | None) -> "InvokerConfig":
        return replace(self, data_mapper=data_mapper)

    def with_resource_registry(self, resource_registry: ResourceRegistry | None) -> "InvokerConfig":
        return replace(self, resource_registry=resource_registry)

    def with_request_dispatcher(
        self, request_dispatcher: RequestDispatcher | None
    ) -> "InvokerConfig":
        return replace(self, request_dispatcher=request_dispatcher)

    def with_service_locator(self, service_locator: ServiceLocator | None) -> "InvokerConfig":
        return replace(self, service_locator=service_locator)

    def with_exception_mapper_registry(
        self, exception_mapper_registry: ExceptionMapperRegistry | None
    ) -> "InvokerConfig":
        return replace(self, exception_mapper_registry=exception_mapper_registry)

    def with_resource_search_package(self, resource_search_package: str | None) -> "InvokerConfig":
        return replace(self, resource_search_package=resource_search_package)

    def with_resource_default_domain(self, resource_default_domain: str | None) -> "InvokerConfig":
        return replace(self, resource_default_domain=resource_default_domain)


class ResolvedAssembly(NamedTuple):
    data_mapper: DataMapper
    resource_registry: ResourceRegistry
    request_dispatcher: RequestDispatcher


class InvokerDefaults:
    """Default construction of each collaborator; override a method to customize one."""

    def build_resource_registry(
        self,
        service_locator: ServiceLocator,
        resource_search_package: str,
        resource_default_domain: str,
    ) -> ResourceRegistry:
        registry_builder = ResourceRegistryBuilder(
            service_locator, ResourceInformationBuilder(ResourceFieldNameTransformer())
        )
        return registry_builder.build(resource_search_package, resource_default_domain)

    def create_data_mapper(self, resource_registry: ResourceRegistry) -> DataMapper:
        mapper = DataMapper()
        mapper.register_module(self.create_data_binding_module(resource_registry))
        return mapper

    def create_data_binding_module(self, resource_registry: ResourceRegistry) -> Module:
        return JSONAPIModuleBuilder().build(resource_registry)

    def build_exception_mapper_registry(self, resource_search_package: str) -> ExceptionMapperRegistry:
        return ExceptionMapperRegistryBuilder().build(resource_search_package)

    def create_request_dispatcher(
        self,
        resource_registry: ResourceRegistry,
        data_mapper: DataMapper,
        exception_mapper_registry: ExceptionMapperRegistry,
    ) -> RequestDispatcher:
        controller_registry = ControllerRegistryBuilder(
            resource_registry, TypeParser(), data_mapper
        ).build()
        return RequestDispatcher(controller_registry, exception_mapper_registry)


def validate_config(config: InvokerConfig) -> None:
    """Raise :class:`ConfigurationError` if the missing parts cannot be defaulted."""
    needs_scanning = any(
        isinstance(resolved, NeedsDefault)
        for resolved in (
            resolution(config.resource_registry),
            resolution(config.request_dispatcher),
            resolution(config.exception_mapper_registry),
        )
    )
    if needs_scanning:
        if not config.resource_search_package:
            raise ConfigurationError("resource search location required")
        if not config.resource_default_domain:
            raise ConfigurationError("default domain required")

    if config.resource_registry is None and config.service_locator is None:
        raise ConfigurationError("service locator required")


def assemble(config: InvokerConfig, defaults: InvokerDefaults | None = None) -> ResolvedAssembly:
    """Resolve the data mapper, resource registry and request dispatcher for ``config``."""
    validate_config(config)
    defaults = defaults or InvokerDefaults()

    registry_resolution = resolution(config.resource_registry)
    if isinstance(registry_resolution, Provided):
        resource_registry = registry_resolution.value
    else:
        resource_registry = defaults.build_resource_registry(
            config.service_locator,
            config.resource_search_package,
            config.resource_default_domain,
        )
        logger.info(
            "Built resource registry with %d resources from %s",
            len(resource_registry),
            config.resource_search_package,
        )

    mapper_resolution = resolution(config.data_mapper)
    if isinstance(mapper_resolution, Provided):
        data_mapper = mapper_resolution.value
    else:
        data_mapper = defaults.create_data_mapper(resource_registry)

    dispatcher_resolution = resolution(config.request_dispatcher)
    if isinstance(dispatcher_resolution, Provided):
        request_dispatcher = dispatcher_resolution.value
    else:
        exception_resolution = resolution(config.exception_mapper_registry)
        if isinstance(exception_resolution, Provided):
            exception_mapper_registry = exception_resolution.value
        else:
            exception_mapper_registry = defaults.build_exception_mapper_registry(
                config.resource_search_package
            )
        request_dispatcher = defaults.create_request_dispatcher(
            resource_registry, data_mapper, exception_mapper_registry
        )

    return ResolvedAssembly(data_mapper, resource_registry, request_dispatcher)


class JSONAPIInvokerBuilder:
    """Fluent builder over :class:`InvokerConfig`.

    Example::

        invoker = (
            JSONAPIInvokerBuilder()
            .service_locator(DefaultServiceLocator())
            .resource_search_package("myapp.resources")
            .resource_default_domain("https://api.example.com")
            .build()
        )
    """

    def __init__(
        self,
        config: InvokerConfig | None = None,
        *,
        defaults: InvokerDefaults | None = None,
    ) -> None:
        self._config = config or InvokerConfig()
        self._defaults = defaults or InvokerDefaults()

    @classmethod
    def from_settings(cls, settings: InvokerSettings, **overrides: Any) -> "JSONAPIInvokerBuilder":
        return cls(InvokerConfig.from_settings(settings, **overrides))

    @property
    def config(self) -> InvokerConfig:
        return self._config

    def data_mapper(self, data_mapper: DataMapper | None) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_data_mapper(data_mapper)
        return self

    def resource_registry(self, resource_registry: ResourceRegistry | None) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_resource_registry(resource_registry)
        return self

    def request_dispatcher(
        self, request_dispatcher: RequestDispatcher | None
    ) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_request_dispatcher(request_dispatcher)
        return self

    def service_locator(self, service_locator: ServiceLocator | None) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_service_locator(service_locator)
        return self

    def exception_mapper_registry(
        self, exception_mapper_registry: ExceptionMapperRegistry | None
    ) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_exception_mapper_registry(exception_mapper_registry)
        return self

    def resource_search_package(self, resource_search_package: str | None) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_resource_search_package(resource_search_package)
        return self

    def resource_default_domain(self, resource_default_domain: str | None) -> "JSONAPIInvokerBuilder":
        self._config = self._config.with_resource_default_domain(resource_default_domain)
        return self

    def build(self) -> JSONAPIInvoker:
        data_mapper, resource_registry, request_dispatcher = assemble(self._config, self._defaults)
        return JSONAPIInvoker(data_mapper, resource_registry, request_dispatcher)
