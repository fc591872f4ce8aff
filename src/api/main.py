"""FastAPI application factory and lifespan management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import get_settings, init_services, shutdown_services
from src.api.middleware.error_handler import (
    error_handler_middleware,
    register_exception_handlers,
)
from src.api.middleware.logging import LoggingMiddleware
from src.api.openapi.routes import blobs, health
from src.commons.settings.models import Settings
from src.commons.telemetry import build_formatter, configure_logging

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _log_level(settings: Settings) -> str:
    return (settings.telemetry.log_level or settings.app.log_level).upper()


def _setup_logging(settings: Settings) -> None:
    """Configure the application logger before uvicorn starts."""
    log_level = _log_level(settings)
    configure_logging(
        level=log_level,
        format_type=settings.telemetry.log_format,
        logger_name="src",
    )
    logging.getLogger().setLevel(getattr(logging, log_level))


def _configure_uvicorn_logging(settings: Settings) -> None:
    """Give uvicorn's loggers our format.

    Called during lifespan, once uvicorn has installed its handlers.
    """
    level = getattr(logging, _log_level(settings))
    formatter = build_formatter(settings.telemetry.log_format)

    for logger_name in UVICORN_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setFormatter(formatter)
            handler.setLevel(level)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown.

    Builds the storage provider on startup and closes it on exit.
    """
    settings = get_settings()
    _configure_uvicorn_logging(settings)

    await init_services(settings)

    yield

    await shutdown_services()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    _setup_logging(settings)

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Blob Gateway - upload, download and share files in object storage",
        docs_url="/docs" if settings.server.docs_enabled else None,
        redoc_url="/redoc" if settings.server.docs_enabled else None,
        openapi_url="/openapi.json" if settings.server.docs_enabled else None,
        lifespan=lifespan,
    )

    _configure_middleware(app, settings)
    register_exception_handlers(app)
    _register_routes(app, settings)

    return app


def _configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    # Outermost: turns anything that escaped the handlers into JSON
    app.middleware("http")(error_handler_middleware)


def _register_routes(app: FastAPI, settings: Settings) -> None:
    """Register API routes."""
    # Health routes stay unprefixed for standard probes
    app.include_router(health.router, tags=["Health"])
    app.include_router(blobs.router, prefix=settings.server.api_prefix, tags=["Blobs"])


# Create default app instance
app = create_app()
