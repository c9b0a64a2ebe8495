"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, agribot.api, agribot.observability, agribot.configs
System role: Application initialization and configuration
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from agribot import __version__
from agribot.api import api_router
from agribot.api.deps import get_service_cache
from agribot.application.services import ContextService, SearchService
from agribot.boundary.db import (
    create_all_tables,
    dispose_engine,
    get_async_session_factory,
)
from agribot.configs import get_settings
from agribot.observability.logger import configure_logging
from agribot.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


async def sweep_search_cache(search_service: SearchService, interval_seconds: int) -> None:
    """
    Periodically delete expired search cache entries.

    Runs until cancelled; a failed sweep is logged and retried on the
    next tick.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await search_service.clean_expired_cache()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:sweep_search_cache - {type(e).__name__}: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events: logging, optional table
    creation, the search cache sweep and draining profile cache writes.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    if settings.database.create_tables:
        await create_all_tables()
        logger.info("Database tables ensured")

    sweeper = None
    interval = settings.search.cache_sweep_interval_seconds
    if interval > 0:
        search_service = SearchService(
            session_factory=get_async_session_factory(),
            provider=get_service_cache().search_provider,
            settings=settings.search,
        )
        sweeper = asyncio.create_task(sweep_search_cache(search_service, interval))

    yield

    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await ContextService.drain()
    await dispose_engine()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="AgriBot API",
        description="Farmer advisory assistant with prediction history and web search",
        version=__version__,
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agribot.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
