"""Health check endpoint."""

from fastapi import APIRouter, Depends

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.config import settings
from sender_pool.domain.errors import StoreError
from sender_pool.infrastructure.api.dependencies import get_store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(store: PoolStore = Depends(get_store)):
    """Check API and store connectivity."""
    try:
        store_status = "connected" if await store.ping() else "unreachable"
    except StoreError as e:
        store_status = f"error: {e}"

    return {
        "status": "ok" if store_status == "connected" else "degraded",
        "store": store_status,
        "backend": settings.store_backend,
        "service": "Sender Pool - round-robin sender rotation",
    }
