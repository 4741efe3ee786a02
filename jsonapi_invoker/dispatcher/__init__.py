"""Request dispatching: paths, controllers and the dispatcher."""

from .controllers import BaseController
from .dispatcher import RequestDispatcher
from .path import JsonPath, parse_path
from .registry import ControllerRegistry, ControllerRegistryBuilder

__all__ = [
    "BaseController",
    "ControllerRegistry",
    "ControllerRegistryBuilder",
    "JsonPath",
    "RequestDispatcher",
    "parse_path",
]
