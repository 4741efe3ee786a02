"""JSON:API error objects and the exception hierarchy."""

from typing import Any


class ConfigurationError(ValueError):
    """Raised when an invoker cannot be assembled from the given configuration."""


class JSONAPIError(Exception):
    """Base class for errors that map onto a JSON:API error object."""

    status: int = 500
    title: str = "Internal Server Error"

    def __init__(
        self,
        detail: str | None = None,
        *,
        status: int | None = None,
        code: str | None = None,
        source: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail or self.title)
        self.detail = detail
        if status is not None:
            self.status = status
        self.code = code
        self.source = source


class BadRequestError(JSONAPIError):
    status = 400
    title = "Bad Request"


class ResourceNotFoundError(JSONAPIError):
    status = 404
    title = "Not Found"


class MethodNotAllowedError(JSONAPIError):
    status = 405
    title = "Method Not Allowed"


class ConflictError(JSONAPIError):
    status = 409
    title = "Conflict"


class RepositoryNotFoundError(JSONAPIError):
    """A resource was registered without a repository to serve it."""

    status = 500
    title = "Repository Not Found"


class JSONAPIErrorBuilder:
    """Build JSON:API error objects and error documents."""

    def error_object(
        self,
        *,
        status: str | None = None,
        code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        source: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error object."""
        error: dict[str, Any] = {}
        if status is not None:
            error["status"] = status
        if code is not None:
            error["code"] = code
        if title is not None:
            error["title"] = title
        if detail is not None:
            error["detail"] = detail
        if source is not None:
            error["source"] = source
        if meta is not None:
            error["meta"] = meta
        if not error:
            raise ValueError("Error object must include at least one field.")
        return error

    def from_exception(self, exc: JSONAPIError) -> dict[str, Any]:
        """Return the error object describing a JSON:API exception."""
        return self.error_object(
            status=str(exc.status),
            code=exc.code,
            title=exc.title,
            detail=exc.detail,
            source=exc.source,
        )

    def error_document(self, errors: list[dict[str, Any]]) -> dict[str, Any]:
        """Return a JSON:API document with an errors array."""
        return {"errors": errors}
