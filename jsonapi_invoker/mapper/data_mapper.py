"""Data mapper: converts domain objects to and from JSON."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from pydantic import ValidationError
from pydantic_core import from_json, to_json, to_jsonable_python

from jsonapi_invoker.core.errors import BadRequestError
from jsonapi_invoker.utils.type_parser import type_adapter

logger = logging.getLogger(__name__)

Serializer = Callable[[Any], Any]


class Module(Protocol):
    """An extension that installs serializers on a :class:`DataMapper`."""

    name: str

    def setup(self, mapper: "DataMapper") -> None:
        ...


class DataMapper:
    """Serialization engine with pluggable per-type serializers."""

    def __init__(self) -> None:
        self._serializers: dict[type, Serializer] = {}
        self._modules: list[Module] = []

    @property
    def registered_modules(self) -> tuple[Module, ...]:
        return tuple(self._modules)

    def register_module(self, module: Module) -> "DataMapper":
        """Install a module once; registering a module name twice is a no-op."""
        if any(existing.name == module.name for existing in self._modules):
            logger.debug("Module %s already registered", module.name)
            return self
        module.setup(self)
        self._modules.append(module)
        return self

    def add_serializer(self, cls: type, serializer: Serializer) -> None:
        self._serializers[cls] = serializer

    def find_serializer(self, cls: type) -> Serializer | None:
        for klass in cls.__mro__:
            serializer = self._serializers.get(klass)
            if serializer is not None:
                return serializer
        return None

    def _fallback(self, value: Any) -> Any:
        serializer = self.find_serializer(type(value))
        if serializer is None:
            raise TypeError(f"cannot serialize value of type {type(value).__name__}")
        return serializer(value)

    def to_jsonable(self, value: Any) -> Any:
        """Return ``value`` as plain JSON-compatible Python data."""
        serializer = self.find_serializer(type(value))
        if serializer is not None:
            value = serializer(value)
        return to_jsonable_python(value, fallback=self._fallback)

    def write_value_as_bytes(self, value: Any) -> bytes:
        return to_json(self.to_jsonable(value))

    def read_value(self, raw: bytes | str | None) -> Any:
        """Parse a JSON payload; an empty payload reads as ``None``."""
        if not raw:
            return None
        try:
            return from_json(raw)
        except ValueError as exc:
            raise BadRequestError("request body is not valid JSON", code="invalid_json") from exc

    def convert_value(self, value: Any, target: Any) -> Any:
        """Validate plain data into ``target`` (usually a resource model)."""
        try:
            return type_adapter(target).validate_python(value)
        except ValidationError as exc:
            first = exc.errors()[0]
            pointer = "/data/attributes/" + "/".join(str(part) for part in first["loc"])
            raise BadRequestError(
                first["msg"], code="validation_error", source={"pointer": pointer}
            ) from exc
