"""Service locators used to obtain user-defined repository instances."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ServiceLocator(Protocol):
    """Look up an instance of a user-provided class."""

    def get_instance(self, cls: type[T]) -> T:
        ...


class DefaultServiceLocator:
    """Instantiate classes without arguments, one cached instance per class.

    Instances that need constructor arguments (sessions, clients) can be handed
    in up front through ``instances``.
    """

    def __init__(self, instances: Mapping[type, Any] | None = None) -> None:
        self._instances: dict[type, Any] = dict(instances or {})

    def register(self, cls: type, instance: Any) -> None:
        self._instances[cls] = instance

    def get_instance(self, cls: type[T]) -> T:
        if cls not in self._instances:
            self._instances[cls] = cls()
        return self._instances[cls]
