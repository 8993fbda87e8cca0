"""
Request context middleware.
Binds a request id to the log context and records API metrics.
"""

import time
from collections.abc import Callable
from uuid import uuid4

from fastapi import Request

from turn_dispatch.constants import REQUEST_ID_HEADER
from turn_dispatch.observability.logging import bind_context, clear_context
from turn_dispatch.observability.metrics import get_metrics

# Probe endpoints are not counted
UNTRACKED_PATHS = frozenset({"/health", "/live", "/ready", "/metrics", "/docs", "/openapi.json"})


def route_template(request: Request) -> str:
    """Get the matched route path, falling back to the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def create_request_context_middleware(app_instance: Callable) -> Callable:
    """
    Create request context middleware for FastAPI.

    Args:
        app_instance: The FastAPI application.

    Returns:
        The middleware function.
    """

    async def request_context_middleware(request: Request, call_next: Callable):
        """Bind request context for logging and time the request."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id

        clear_context()
        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path not in UNTRACKED_PATHS:
            get_metrics().record_api_request(
                method=request.method,
                endpoint=route_template(request),
                status=response.status_code,
                duration_seconds=time.perf_counter() - started,
            )
        return response

    return request_context_middleware
