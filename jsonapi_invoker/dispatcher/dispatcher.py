"""Route requests to controllers and map failures to error responses."""

from __future__ import annotations

import logging
from typing import Any

from jsonapi_invoker.dispatcher.path import parse_path
from jsonapi_invoker.dispatcher.registry import ControllerRegistry
from jsonapi_invoker.errorhandling.registry import ExceptionMapperRegistry

logger = logging.getLogger(__name__)


class RequestDispatcher:
    def __init__(
        self,
        controller_registry: ControllerRegistry,
        exception_mapper_registry: ExceptionMapperRegistry,
    ) -> None:
        self.controller_registry = controller_registry
        self.exception_mapper_registry = exception_mapper_registry

    async def dispatch_request(
        self,
        path: str,
        method: str,
        params: dict[str, Any],
        body: Any = None,
    ) -> Any:
        """Return the controller's response, or the mapped error response.

        Exceptions without a registered mapper propagate to the caller.
        """
        method = method.upper()
        try:
            json_path = parse_path(path)
            controller = self.controller_registry.get_controller(json_path, method)
            return await controller.handle(json_path, params, body)
        except Exception as exc:
            error_response = self.exception_mapper_registry.to_error_response(exc)
            if error_response is None:
                raise
            error_code = error_response.errors[0].get("code") if error_response.errors else None
            logger.info(
                "Mapped %s to status %s",
                type(exc).__name__,
                error_response.status,
                extra={
                    "method": method,
                    "path": path,
                    "status": error_response.status,
                    "error_code": error_code,
                },
            )
            return error_response
