"""Controller registry: picks the controller for a path and method."""

from __future__ import annotations

from typing import Iterable

from jsonapi_invoker.core.errors import MethodNotAllowedError
from jsonapi_invoker.dispatcher.controllers import DEFAULT_CONTROLLERS, BaseController
from jsonapi_invoker.dispatcher.path import JsonPath
from jsonapi_invoker.mapper.data_mapper import DataMapper
from jsonapi_invoker.resource.registry import ResourceRegistry
from jsonapi_invoker.utils.type_parser import TypeParser


class ControllerRegistry:
    def __init__(self, controllers: Iterable[BaseController] = ()) -> None:
        self._controllers: list[BaseController] = list(controllers)

    def add_controller(self, controller: BaseController) -> None:
        self._controllers.append(controller)

    @property
    def controllers(self) -> tuple[BaseController, ...]:
        return tuple(self._controllers)

    def get_controller(self, json_path: JsonPath, method: str) -> BaseController:
        for controller in self._controllers:
            if controller.is_acceptable(json_path, method):
                return controller
        raise MethodNotAllowedError(f"{method} is not allowed on this path")


class ControllerRegistryBuilder:
    """Create one instance of each default controller sharing the same collaborators."""

    def __init__(
        self,
        resource_registry: ResourceRegistry,
        type_parser: TypeParser,
        data_mapper: DataMapper,
    ) -> None:
        self.resource_registry = resource_registry
        self.type_parser = type_parser
        self.data_mapper = data_mapper

    def build(self) -> ControllerRegistry:
        return ControllerRegistry(
            controller_class(self.resource_registry, self.type_parser, self.data_mapper)
            for controller_class in DEFAULT_CONTROLLERS
        )
