"""Product Catalog API main application module.

This module builds the FastAPI application and wires the database
handle, repository and pagination engine into application state.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.health import router as health_router
from app.api.middleware import setup_middleware
from app.api.products import router as products_router
from app.catalog.pagination import PaginationEngine
from app.catalog.repository import ProductRepository
from app.infrastructure.config import Settings, get_settings
from app.infrastructure.database import Database
from app.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    app_settings: Settings = app.state.settings
    configure_logging(app_settings.log_level, app_settings.log_format)

    logger.info(
        "Starting Product Catalog API",
        version=app_settings.api_version,
        debug=app_settings.debug,
    )

    await app.state.database.init()

    yield

    logger.info("Shutting down Product Catalog API")
    await app.state.database.dispose()


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        app_settings: Settings to use (defaults to environment settings).

    Returns:
        Configured FastAPI application.
    """
    app_settings = app_settings or get_settings()

    app = FastAPI(
        title="Product Catalog API",
        description="Product lifecycle and category listing backed by a relational store",
        version=app_settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    database = Database(
        app_settings.database_url,
        echo=app_settings.debug,
        pool_size=app_settings.database_pool_size,
        max_overflow=app_settings.database_max_overflow,
    )
    app.state.settings = app_settings
    app.state.database = database
    app.state.product_repository = ProductRepository(
        database,
        timeout_seconds=app_settings.store_timeout_seconds,
    )
    app.state.pagination = PaginationEngine(
        default_size=app_settings.default_page_size,
        max_size=app_settings.max_page_size,
    )

    # CORS middleware (must be added before custom middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID correlation
    setup_middleware(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router)

    register_exception_handlers(app)

    return app


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers that render the standard error envelope."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent format."""
        request_id = getattr(request.state, "request_id", None)

        detail = exc.detail
        if isinstance(detail, dict):
            error_code = detail.get("error_code", "ERROR")
            message = detail.get("message", str(detail))
            details = detail.get("details", [])
        else:
            error_code = "ERROR"
            message = str(detail)
            details = []

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": error_code,
                "message": message,
                "details": details,
                "request_id": request_id,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed requests as validation errors."""
        request_id = getattr(request.state, "request_id", None)

        details = []
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            details.append({"field": ".".join(loc) or None, "message": error.get("msg", "invalid")})

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": details,
                "request_id": request_id,
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions with consistent format."""
        request_id = getattr(request.state, "request_id", None)

        logger.exception(
            "Unhandled exception in handler",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error_code": "INTERNAL_ERROR",
                "message": "An internal error occurred",
                "details": [],
                "request_id": request_id,
            },
        )


app = create_app()
