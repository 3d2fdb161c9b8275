"""Sender Pool — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sender_pool.adapters.store.factory import build_store
from sender_pool.config import settings
from sender_pool.domain.errors import StoreError
from sender_pool.infrastructure.api.routes_health import router as health_router
from sender_pool.infrastructure.api.routes_pool import router as pool_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    app.state.store = build_store(settings)
    try:
        await app.state.store.ping()
        logger.info("Pool store connection established (%s)", settings.store_backend)
    except StoreError as e:
        logger.warning("Pool store not available on startup: %s", e)
    yield
    await app.state.store.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Sender Pool",
        description="Fair round-robin rotation of sender identities over a shared store",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(pool_router, prefix="/api")

    return app


app = create_app()
