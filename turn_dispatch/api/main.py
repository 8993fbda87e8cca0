"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from turn_dispatch import __version__
from turn_dispatch.api.request_context import create_request_context_middleware
from turn_dispatch.api.routes import (
    dispatch_router,
    health_router,
    queue_router,
    tickets_router,
)
from turn_dispatch.config import get_settings
from turn_dispatch.errors import AppError
from turn_dispatch.observability.logging import setup_logging
from turn_dispatch.observability.metrics import setup_metrics
from turn_dispatch.observability.tracing import instrument_fastapi, setup_tracing
from turn_dispatch.store.lifecycle import close_store, init_store
from turn_dispatch.types.api import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    setup_logging()
    setup_metrics()
    setup_tracing(enable_console_export=get_settings().otel_console_export)
    init_store()

    logger.info("Application started")

    yield

    # Shutdown
    close_store()
    logger.info("Application shutdown")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as an ErrorResponse."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"error": exc.code, "detail": exc.message},
        )
    body = ErrorResponse(
        error=exc.code,
        detail=exc.message,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render a malformed request (bad query parameter, unparsable JSON) as an ErrorResponse."""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    body = ErrorResponse(
        error="invalid_request",
        detail=detail or "Invalid request",
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=422,
        content=body.model_dump(),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title="Turn Dispatch API",
        description="Three-class ticket queue with durable state",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        BaseHTTPMiddleware,
        dispatch=create_request_context_middleware(app),
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(health_router)
    app.include_router(tickets_router)
    app.include_router(dispatch_router)
    app.include_router(queue_router)

    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    app = create_app()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    run()
