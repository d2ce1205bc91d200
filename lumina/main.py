"""Lumina API main application module.

This module configures logging, builds the FastAPI application with its
per-application catalog, inventory view and advisory service, and wires
the routers and middleware.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lumina.advisory import AdvisoryService, AnalysisBoard
from lumina.api.advisory import router as advisory_router
from lumina.api.dashboard import router as dashboard_router
from lumina.api.health import router as health_router
from lumina.api.inventory import router as inventory_router
from lumina.api.middleware import setup_middleware
from lumina.api.products import router as products_router
from lumina.catalog import CatalogStore, seed_catalog
from lumina.config import Settings, get_settings
from lumina.query import InventoryView

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting Lumina API",
        version=settings.api_version,
        product_count=len(app.state.catalog),
        advisory_enabled=app.state.advisory.enabled,
    )

    yield

    logger.info("Shutting down Lumina API")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an application with its own catalog and inventory view.

    Args:
        settings: Settings to use; defaults to the environment.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Lumina Inventory API",
        description="In-memory inventory catalog with dashboard, filtering and AI advisory",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.catalog = (
        seed_catalog(strict=settings.strict_validation)
        if settings.seed_demo_catalog
        else CatalogStore(strict=settings.strict_validation)
    )
    app.state.inventory_view = InventoryView()
    app.state.advisory = AdvisoryService(
        api_key=settings.gemini_api_key, model_name=settings.gemini_model
    )
    app.state.analysis_board = AnalysisBoard()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middleware(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(dashboard_router)
    app.include_router(products_router)
    app.include_router(inventory_router)
    app.include_router(advisory_router)

    return app


configure_logging(get_settings())
app = create_app()
