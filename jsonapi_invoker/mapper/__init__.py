"""Data mapper and the JSON:API data-binding module."""

from .data_mapper import DataMapper, Module
from .module import DataBindingModule, JSONAPIModuleBuilder
from .serializer import ResourceSerializer

__all__ = [
    "DataBindingModule",
    "DataMapper",
    "JSONAPIModuleBuilder",
    "Module",
    "ResourceSerializer",
]
