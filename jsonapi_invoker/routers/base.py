"""FastAPI router that forwards JSON:API requests to an invoker."""

import logging
from typing import Any, Callable

from fastapi import APIRouter, Request
from starlette.responses import Response

from jsonapi_invoker.core.errors import JSONAPIErrorBuilder
from jsonapi_invoker.invoker.invoker import InvokerContext, JSONAPIInvoker
from jsonapi_invoker.utils.content_negotiation import JSONAPI_MEDIA_TYPE

logger = logging.getLogger(__name__)

JSONAPI_METHODS = ["GET", "POST", "PATCH", "DELETE"]


class JSONAPIRouter(APIRouter):
    """APIRouter wrapper for JSON:API invokers."""

    def register_invoker(
        self,
        invoker: JSONAPIInvoker,
        *,
        prefix: str = "",
        name: str = "jsonapi",
        dependencies: list[Any] | None = None,
    ) -> None:
        """Serve every resource path under ``prefix`` through ``invoker``.

        Args:
            invoker: A built :class:`JSONAPIInvoker`.
            prefix: URL prefix stripped before the path reaches the invoker
                    (e.g. "/api" serves "/api/articles/1" as "/articles/1").
            name: Route name for OpenAPI documentation.
            dependencies: FastAPI dependencies to run before each request,
                          e.g. ``[Depends(check_permission)]``.

        Examples:
            router = JSONAPIRouter()
            router.register_invoker(invoker, prefix="/api")
            app.include_router(router)
        """

        async def invoke(request: Request, path: str) -> Response:
            context = InvokerContext(
                method=request.method,
                path=path,
                query_params=dict(request.query_params),
                headers=dict(request.headers),
                body=await request.body(),
            )
            try:
                result = await invoker.invoke(context)
            except Exception:  # noqa: BLE001 - last-resort JSON:API 500
                logger.exception(
                    "Unhandled error for %s %s",
                    request.method,
                    path,
                    extra={"method": request.method, "path": path, "status": 500},
                )
                return internal_error_response(invoker)
            return Response(
                content=result.body,
                status_code=result.status,
                media_type=result.media_type if result.body else None,
            )

        self.add_jsonapi_route(
            f"{prefix.rstrip('/')}/{{path:path}}",
            invoke,
            methods=JSONAPI_METHODS,
            name=name,
            dependencies=dependencies,
        )

    def add_jsonapi_route(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        methods: list[str],
        name: str | None = None,
        dependencies: list[Any] | None = None,
    ) -> None:
        """Add a route excluded from the response model machinery."""
        self.add_api_route(
            path,
            endpoint,
            methods=methods,
            name=name,
            dependencies=dependencies if dependencies else None,
            response_model=None,
        )


def internal_error_response(invoker: JSONAPIInvoker) -> Response:
    """Return a JSON:API 500 document for an exception no mapper handled."""
    builder = JSONAPIErrorBuilder()
    document = builder.error_document(
        [
            builder.error_object(
                status="500",
                title="Internal Server Error",
                detail="An unexpected error occurred.",
            )
        ]
    )
    return Response(
        content=invoker.data_mapper.write_value_as_bytes(document),
        status_code=500,
        media_type=JSONAPI_MEDIA_TYPE,
    )
