"""Exception mapper registry and its package-scanning builder."""

from __future__ import annotations

import logging
from typing import Iterable

from jsonapi_invoker.core.responses import ErrorResponse
from jsonapi_invoker.errorhandling.mapper import (
    ExceptionMapper,
    JSONAPIExceptionMapper,
    is_exception_mapper,
)
from jsonapi_invoker.utils.scanning import scan_package

logger = logging.getLogger(__name__)


class ExceptionMapperRegistry:
    """Find the closest mapper for an exception along its MRO."""

    def __init__(self, mappers: Iterable[ExceptionMapper] = ()) -> None:
        self._mappers: dict[type[BaseException], ExceptionMapper] = {}
        for mapper in mappers:
            self.register(mapper)

    def register(self, mapper: ExceptionMapper) -> None:
        self._mappers[mapper.exception_class] = mapper

    @property
    def exception_classes(self) -> list[type[BaseException]]:
        return list(self._mappers)

    def find_mapper(self, exception_class: type[BaseException]) -> ExceptionMapper | None:
        for klass in exception_class.__mro__:
            mapper = self._mappers.get(klass)
            if mapper is not None:
                return mapper
        return None

    def to_error_response(self, exc: BaseException) -> ErrorResponse | None:
        mapper = self.find_mapper(type(exc))
        if mapper is None:
            return None
        return mapper.to_error_response(exc)


class ExceptionMapperRegistryBuilder:
    """Build a registry holding the default mapper plus every scanned mapper."""

    def build(self, search_package: str) -> ExceptionMapperRegistry:
        registry = ExceptionMapperRegistry([JSONAPIExceptionMapper()])
        for mapper_class in scan_package(search_package, is_exception_mapper):
            registry.register(mapper_class())
            logger.info(
                "Registered exception mapper %s for %s",
                mapper_class.__name__,
                mapper_class.exception_class.__name__,
            )
        return registry
