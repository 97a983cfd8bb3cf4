"""FastAPI application factory for swagcheck."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from swagcheck import __version__
from swagcheck.api.deps import init_validator, reset_validator
from swagcheck.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from swagcheck.api.routers import validate
from swagcheck.api.schemas import HealthResponse
from swagcheck.parser.loader import TrackedLoader
from swagcheck.service.document_validator import DocumentValidator
from swagcheck.settings import Settings
from swagcheck.validation.messages import MessageCatalog
from swagcheck.validation.schema import load_schema

logger = logging.getLogger("swagcheck.api")


def build_loader(settings: Settings) -> TrackedLoader:
    """Create a loader enforcing the configured document size limit."""
    return TrackedLoader(max_document_size=settings.max_document_size)


def build_validator(settings: Settings) -> tuple[DocumentValidator | None, MessageCatalog]:
    """Create the default validator and catalog described by *settings*."""
    catalog = (
        MessageCatalog.from_yaml(settings.messages_file)
        if settings.messages_file is not None
        else MessageCatalog()
    )
    if settings.schema_file is None:
        return None, catalog
    validator = DocumentValidator(
        load_schema(settings.schema_file),
        catalog=catalog,
        loader=build_loader(settings),
    )
    return validator, catalog


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Install the default validator for the lifetime of the application."""
    settings: Settings = app.state.settings
    validator, catalog = build_validator(settings)
    if validator is None:
        logger.warning("No SCHEMA_FILE configured; requests must supply a schema")
    init_validator(validator, catalog=catalog, loader=build_loader(settings))
    try:
        yield
    finally:
        reset_validator()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="swagcheck",
        description="Validates Swagger/OpenAPI YAML documents and reports line-attributed errors.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestBodyLimitMiddleware)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(validate.router, prefix="/validate", tags=["validate"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "swagcheck API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "swagcheck.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
