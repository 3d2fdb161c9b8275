"""FastAPI dependency injection — wires the store into the coordinator."""

from __future__ import annotations

from fastapi import Depends, Request

from sender_pool.application.coordinator import Coordinator
from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.config import settings


def get_store(request: Request) -> PoolStore:
    """The process-wide store created during app lifespan."""
    return request.app.state.store


def get_coordinator(store: PoolStore = Depends(get_store)) -> Coordinator:
    return Coordinator.from_settings(store, settings)
