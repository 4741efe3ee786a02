"""Assemble and run a JSON:API request-handling pipeline."""

from .core.errors import ConfigurationError, JSONAPIError
from .errorhandling import ExceptionMapper, exception_mapper
from .invoker import (
    InvokerConfig,
    InvokerContext,
    InvokerDefaults,
    JSONAPIInvoker,
    JSONAPIInvokerBuilder,
    assemble,
)
from .locator import DefaultServiceLocator, ServiceLocator
from .resource import InMemoryRepository, jsonapi_repository, jsonapi_resource
from .routers import JSONAPIRouter

__all__ = [
    "ConfigurationError",
    "DefaultServiceLocator",
    "ExceptionMapper",
    "InMemoryRepository",
    "InvokerConfig",
    "InvokerContext",
    "InvokerDefaults",
    "JSONAPIError",
    "JSONAPIInvoker",
    "JSONAPIInvokerBuilder",
    "JSONAPIRouter",
    "ServiceLocator",
    "assemble",
    "exception_mapper",
    "jsonapi_repository",
    "jsonapi_resource",
]
