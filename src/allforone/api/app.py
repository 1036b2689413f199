"""FastAPI application configuration."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from ..infrastructure.block_poller import BlockPoller
from .dependencies import (
    get_database_client_dependency,
    get_ledger_client,
    get_redistribution_service,
    get_settings_dependency,
)
from .routers import blocks, status

logger = logging.getLogger(__name__)

settings = get_settings_dependency()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    poller_task: Optional[asyncio.Task[None]] = None
    if settings.poll_interval > 0:
        poller = BlockPoller(
            get_ledger_client(), get_redistribution_service(), settings.poll_interval
        )
        poller_task = asyncio.create_task(poller.run())
        logger.info("Polling ledger every %.1fs", settings.poll_interval)
    try:
        yield
    finally:
        if poller_task is not None:
            poller_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await poller_task
        await get_ledger_client().aclose()
        await get_database_client_dependency().close()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Block-triggered all-for-one payment redistribution",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.include_router(blocks.router, prefix="/api/v1")
    app.include_router(status.router, prefix="/api/v1")
    app.mount("/metrics", make_asgi_app())

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": f"Welcome to {settings.app_name} API",
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "chain": settings.chain,
            "frequency": settings.frequency,
        }

    return app


app = create_app()
