"""The invoker: one entry point from a raw request to a serialized response."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from jsonapi_invoker.core.errors import JSONAPIError, JSONAPIErrorBuilder
from jsonapi_invoker.core.responses import NoContentResponse
from jsonapi_invoker.dispatcher.dispatcher import RequestDispatcher
from jsonapi_invoker.mapper.data_mapper import DataMapper
from jsonapi_invoker.resource.registry import ResourceRegistry
from jsonapi_invoker.utils.content_negotiation import (
    JSONAPI_MEDIA_TYPE,
    accepts_jsonapi,
    is_jsonapi_content_type,
)
from jsonapi_invoker.utils.query_params import parse_query_params

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PATCH"})


@dataclass(frozen=True)
class InvokerContext:
    """Transport-neutral description of an incoming request."""

    method: str
    path: str
    query_params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str) -> str:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return ""


@dataclass(frozen=True)
class InvokerResponse:
    status: int
    body: bytes = b""
    media_type: str = JSONAPI_MEDIA_TYPE


class JSONAPIInvoker:
    """Owns the data mapper, resource registry and request dispatcher it was built with."""

    def __init__(
        self,
        data_mapper: DataMapper,
        resource_registry: ResourceRegistry,
        request_dispatcher: RequestDispatcher,
    ) -> None:
        self._data_mapper = data_mapper
        self._resource_registry = resource_registry
        self._request_dispatcher = request_dispatcher

    @property
    def data_mapper(self) -> DataMapper:
        return self._data_mapper

    @property
    def resource_registry(self) -> ResourceRegistry:
        return self._resource_registry

    @property
    def request_dispatcher(self) -> RequestDispatcher:
        return self._request_dispatcher

    async def invoke(self, context: InvokerContext) -> InvokerResponse:
        method = context.method.upper()
        rejection = self._negotiate(context, method)
        if rejection is not None:
            return rejection

        try:
            body = self._data_mapper.read_value(context.body) if method in BODY_METHODS else None
            params = parse_query_params(context.query_params)
        except JSONAPIError as exc:
            return self._error(exc)

        response = await self._request_dispatcher.dispatch_request(
            context.path, method, params, body
        )
        logger.info(
            "%s %s -> %s",
            method,
            context.path,
            response.status,
            extra={"method": method, "path": context.path, "status": response.status},
        )
        if isinstance(response, NoContentResponse):
            return InvokerResponse(status=response.status)
        try:
            content = self._data_mapper.write_value_as_bytes(response)
        except JSONAPIError as exc:
            logger.warning(
                "Failed to serialize response for %s %s: %s",
                method,
                context.path,
                exc,
                extra={"method": method, "path": context.path, "status": exc.status},
            )
            return self._error(exc)
        return InvokerResponse(status=response.status, body=content)

    def _negotiate(self, context: InvokerContext, method: str) -> InvokerResponse | None:
        if method in BODY_METHODS and not is_jsonapi_content_type(context.header("content-type")):
            return self._status_error(415, "Unsupported Media Type")
        if not accepts_jsonapi(context.header("accept")):
            return self._status_error(406, "Not Acceptable")
        return None

    def _status_error(self, status: int, title: str) -> InvokerResponse:
        builder = JSONAPIErrorBuilder()
        document = builder.error_document([builder.error_object(status=str(status), title=title)])
        return InvokerResponse(status=status, body=self._data_mapper.write_value_as_bytes(document))

    def _error(self, exc: JSONAPIError) -> InvokerResponse:
        builder = JSONAPIErrorBuilder()
        document = builder.error_document([builder.from_exception(exc)])
        return InvokerResponse(
            status=exc.status, body=self._data_mapper.write_value_as_bytes(document)
        )
