"""Coerce string values from paths and query strings into typed values."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable

from pydantic import TypeAdapter, ValidationError

from jsonapi_invoker.core.errors import BadRequestError


@lru_cache(maxsize=256)
def type_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


class TypeParser:
    """Parse strings into ``int``, ``UUID``, ``datetime``, enums and friends."""

    def parse(self, value: str, target: Any) -> Any:
        if target is None or target is str or target is Any:
            return value
        try:
            return type_adapter(target).validate_python(value)
        except ValidationError as exc:
            raise BadRequestError(
                f"cannot parse '{value}' as {getattr(target, '__name__', target)}",
                code="parse_error",
            ) from exc

    def parse_many(self, values: Iterable[str], target: Any) -> list[Any]:
        return [self.parse(value, target) for value in values]
