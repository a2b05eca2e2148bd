"""FastAPI application for Inkwell.

This module provides the application factory with the HTML pages, the
JSON API, health endpoint, storage error handlers and lifecycle
management.

Run with:
    uvicorn inkwell.main:app --reload

Examples:
    >>> # Health check
    >>> curl http://localhost:8000/health

    >>> # Build an app around a specific backend (tests)
    >>> app = create_app(settings, backend)

Tests:
    - tests/unit/test_main.py
    - tests/integration/test_pages.py
    - tests/integration/test_api_blogs.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell import __version__
from inkwell.api.v1 import router as v1_router
from inkwell.config import Settings, get_settings
from inkwell.routers.pages import render_error
from inkwell.routers.pages import router as pages_router
from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.errors import (
    ConcurrentlyDeleted,
    InvalidName,
    NameTaken,
    NotFound,
    StorageError,
    StorageFailure,
    TitleTaken,
)
from inkwell.storage.service import create_backend

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 2


# Response models
class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    backend: str
    storage: bool


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: str | None = None


def storage_error_status(exc: StorageError) -> int:
    """HTTP status for a storage error kind."""
    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (NameTaken, TitleTaken)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, InvalidName):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, ConcurrentlyDeleted):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _page_message(exc: StorageError) -> str:
    if isinstance(exc, NotFound):
        return exc.message
    if isinstance(exc, ConcurrentlyDeleted):
        return "Something changed while we were working on that. Try again shortly."
    return "Something went wrong on our side."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown tasks:
    - Prepare the storage backend on startup
    - Release backend resources on shutdown
    """
    backend: StorageBackend = app.state.backend

    # Startup
    logger.info(f"Starting Inkwell v{__version__} ({backend.name} storage)")
    await backend.startup()

    yield

    # Shutdown
    logger.info("Shutting down Inkwell")
    await backend.shutdown()


def create_app(
    settings: Settings | None = None,
    backend: StorageBackend | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to ``get_settings()``.
        backend: Storage backend. Defaults to the one the settings select.

    Returns:
        Configured application; the backend is started by its lifespan.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)

    app = FastAPI(
        title="Inkwell",
        description="Multi-user blogging service",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.backend = backend or create_backend(settings)

    app.include_router(v1_router)
    app.include_router(pages_router)

    # Exception handlers
    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        """Map storage error kinds to JSON or HTML responses."""
        status_code = storage_error_status(exc)
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if exc.retryable else None

        if isinstance(exc, StorageFailure):
            logger.exception(f"Storage failure on {request.method} {request.url.path}: {exc}")
        elif exc.retryable:
            logger.warning(f"Retryable storage error on {request.url.path}: {exc}")

        if _wants_json(request):
            return JSONResponse(
                status_code=status_code,
                content=ErrorResponse(error=exc.message, detail=exc.kind).model_dump(),
                headers=headers,
            )

        # A name that can never be stored names nothing on a page URL
        if isinstance(exc, InvalidName):
            status_code = status.HTTP_404_NOT_FOUND
            return render_error(request, status_code, exc.message)
        return render_error(request, status_code, _page_message(exc), headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent response format."""
        if _wants_json(request):
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.detail, "detail": None},
                headers=getattr(exc, "headers", None),
            )
        return render_error(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")

        if not _wants_json(request):
            return render_error(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Something went wrong on our side.",
            )

        if settings.DEBUG:
            detail = str(exc)
        else:
            detail = None

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": detail},
        )

    # Health endpoints
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        """Check application health.

        Returns:
            HealthResponse with the backend name and whether it is usable.
        """
        current: StorageBackend = request.app.state.backend
        storage_healthy = await current.check()

        return HealthResponse(
            status="healthy" if storage_healthy else "degraded",
            version=__version__,
            backend=current.name,
            storage=storage_healthy,
        )

    return app


app = create_app()


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inkwell.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().DEBUG,
    )
