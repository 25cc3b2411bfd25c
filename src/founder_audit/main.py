"""Founder Bottleneck Audit service entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from founder_audit import __version__
from founder_audit.api.dependencies import get_settings
from founder_audit.api.router import router
from founder_audit.database import create_tables, dispose_database, init_database
from founder_audit.observability import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        None
    """
    configure_logging(level=settings.log_level, json_output=settings.log_json)
    init_database(settings)
    if settings.auto_create_tables:
        await create_tables()
    logger.info("Service started", service=settings.service_name, version=__version__)
    yield
    await dispose_database()
    logger.info("Service stopped", service=settings.service_name)


app: FastAPI = FastAPI(
    title=settings.service_name,
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok", "service": settings.service_name}


app.include_router(router, prefix="/api/v1")
