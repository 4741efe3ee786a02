"""Core JSON:API document, error and response helpers."""

from .document import JSONAPIDocumentBuilder
from .errors import (
    BadRequestError,
    ConfigurationError,
    ConflictError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    MethodNotAllowedError,
    RepositoryNotFoundError,
    ResourceNotFoundError,
)
from .responses import (
    CollectionResponse,
    ErrorResponse,
    LinkageResponse,
    NoContentResponse,
    ResourceResponse,
)

__all__ = [
    "BadRequestError",
    "CollectionResponse",
    "ConfigurationError",
    "ConflictError",
    "ErrorResponse",
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "LinkageResponse",
    "MethodNotAllowedError",
    "NoContentResponse",
    "RepositoryNotFoundError",
    "ResourceNotFoundError",
    "ResourceResponse",
]
