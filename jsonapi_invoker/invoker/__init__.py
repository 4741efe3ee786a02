"""Invoker assembly and request invocation."""

from .builder import (
    InvokerConfig,
    InvokerDefaults,
    JSONAPIInvokerBuilder,
    NeedsDefault,
    Provided,
    ResolvedAssembly,
    assemble,
    validate_config,
)
from .invoker import InvokerContext, InvokerResponse, JSONAPIInvoker

__all__ = [
    "InvokerConfig",
    "InvokerContext",
    "InvokerDefaults",
    "InvokerResponse",
    "JSONAPIInvoker",
    "JSONAPIInvokerBuilder",
    "NeedsDefault",
    "Provided",
    "ResolvedAssembly",
    "assemble",
    "validate_config",
]
