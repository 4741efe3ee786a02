"""Exception mappers and their registry."""

from .mapper import ExceptionMapper, JSONAPIExceptionMapper, exception_mapper
from .registry import ExceptionMapperRegistry, ExceptionMapperRegistryBuilder

__all__ = [
    "ExceptionMapper",
    "ExceptionMapperRegistry",
    "ExceptionMapperRegistryBuilder",
    "JSONAPIExceptionMapper",
    "exception_mapper",
]
