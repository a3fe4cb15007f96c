"""FastAPI application for the ragcrawl REST API.

Provides endpoints for crawling, vectorizing sites into Qdrant, answering
questions from the indexed content and health monitoring.

Example:
    uvicorn ragcrawl.api.app:app --host 0.0.0.0 --port 8000
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ragcrawl import __version__
from ragcrawl.api.dependencies import verify_api_key
from ragcrawl.api.models.responses import ErrorResponse
from ragcrawl.api.routes.crawl import router as crawl_router
from ragcrawl.api.routes.health import router as health_router
from ragcrawl.api.routes.rag import router as rag_router
from ragcrawl.api.routes.vectorize import router as vectorize_router
from ragcrawl.core.config import Settings
from ragcrawl.core.errors import ErrorKind, RagCrawlError
from ragcrawl.core.logger import configure_logging
from ragcrawl.services.container import ServiceContainer, build_container

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGES = {
    ErrorKind.UPSTREAM: "An upstream service failed to process the request",
    ErrorKind.INTERNAL: "An unexpected error occurred",
}


def error_payload(error: RagCrawlError, settings: Settings) -> ErrorResponse:
    """Render a RagCrawlError for clients.

    Provider diagnostics are only exposed in development.
    """
    fields = error.details.get("fields") if error.kind is ErrorKind.VALIDATION else None
    detail = error.message
    if error.kind in GENERIC_ERROR_MESSAGES:
        diagnostic = error.details.get("diagnostic")
        if settings.is_development and diagnostic:
            detail = diagnostic
        elif not settings.is_development:
            detail = GENERIC_ERROR_MESSAGES[error.kind]
    return ErrorResponse(message=error.message, error=detail, fields=fields)


def create_app(
    settings: Settings | None = None,
    container_factory: Callable[[Settings], ServiceContainer] = build_container,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service configuration, read from the environment when omitted
        container_factory: Builds provider clients and services at startup

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build services on startup and close provider clients on shutdown."""
        configure_logging(settings.log_level, settings.log_file)
        container = container_factory(settings)
        app.state.container = container
        logger.info("ragcrawl API started (%s)", settings.environment)
        try:
            yield
        finally:
            await container.aclose()
            logger.info("ragcrawl API stopped")

    app = FastAPI(
        title="ragcrawl API",
        description="Crawl websites into a vector index and answer questions over them",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.exception_handler(RagCrawlError)
    async def handle_ragcrawl_error(request: Request, exc: RagCrawlError) -> JSONResponse:
        if exc.kind in GENERIC_ERROR_MESSAGES:
            logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.message, exc.details)
        payload = error_payload(exc, settings)
        return JSONResponse(
            status_code=exc.status_code,
            content=payload.model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = [
            ".".join(str(part) for part in error["loc"] if part != "body")
            for error in exc.errors()
        ]
        payload = ErrorResponse(
            message="Validation Error",
            error="; ".join(str(error["msg"]) for error in exc.errors()),
            fields=fields,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=payload.model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s failed unexpectedly", request.method, request.url.path)
        error = RagCrawlError(
            ErrorKind.INTERNAL,
            "Internal server error",
            {"diagnostic": f"{type(exc).__name__}: {exc}"},
        )
        payload = error_payload(error, settings)
        return JSONResponse(
            status_code=error.status_code,
            content=payload.model_dump(exclude_none=True),
        )

    # Health endpoint is public; everything under /api requires the key when set
    app.include_router(health_router)
    protected = [Depends(verify_api_key)]
    app.include_router(crawl_router, dependencies=protected)
    app.include_router(vectorize_router, dependencies=protected)
    app.include_router(rag_router, dependencies=protected)

    return app


app = create_app()
