"""Exception mappers turn exceptions into JSON:API error responses."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from jsonapi_invoker.core.errors import JSONAPIError, JSONAPIErrorBuilder
from jsonapi_invoker.core.responses import ErrorResponse

E = TypeVar("E", bound=BaseException)
C = TypeVar("C", bound=type)

MAPPER_ATTR = "__jsonapi_exception_mapper__"


class ExceptionMapper(Generic[E]):
    """Map one exception class (and its subclasses) to an error response."""

    exception_class: type[BaseException] = Exception

    def __init__(self, error_builder: JSONAPIErrorBuilder | None = None) -> None:
        self.error_builder = error_builder or JSONAPIErrorBuilder()

    def to_error_response(self, exc: E) -> ErrorResponse:
        raise NotImplementedError


def exception_mapper(exception_class: type[BaseException]) -> Callable[[C], C]:
    """Mark an :class:`ExceptionMapper` subclass for discovery by package scanning."""

    def decorate(cls: C) -> C:
        cls.exception_class = exception_class
        setattr(cls, MAPPER_ATTR, True)
        return cls

    return decorate


def is_exception_mapper(cls: type) -> bool:
    return bool(cls.__dict__.get(MAPPER_ATTR)) and issubclass(cls, ExceptionMapper)


class JSONAPIExceptionMapper(ExceptionMapper[JSONAPIError]):
    """Default mapper for the library's own request errors."""

    exception_class = JSONAPIError

    def to_error_response(self, exc: JSONAPIError) -> ErrorResponse:
        return ErrorResponse(errors=[self.error_builder.from_exception(exc)], status=exc.status)
