"""Pool endpoints — add, lease, select next, usage report."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from sender_pool.application.coordinator import Coordinator
from sender_pool.config import settings
from sender_pool.domain.errors import (
    AllResourcesLeased,
    AlreadyExists,
    LockTimeout,
    NoResourcesAvailable,
    NotFound,
    PoolError,
    StoreError,
)
from sender_pool.infrastructure.api.dependencies import get_coordinator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pool", tags=["pool"])

_STATUS_BY_ERROR: dict[type[PoolError], int] = {
    AlreadyExists: 409,
    NotFound: 404,
    NoResourcesAvailable: 409,
    AllResourcesLeased: 503,
    LockTimeout: 503,
    StoreError: 502,
}


class AddResourceRequest(BaseModel):
    resource_id: str = Field(min_length=1, max_length=255)


class LeaseRequest(BaseModel):
    duration_seconds: float = Field(default=settings.default_lease_seconds, gt=0)


def _http_error(e: PoolError) -> HTTPException:
    status = _STATUS_BY_ERROR.get(type(e), 500)
    if isinstance(e, StoreError):
        logger.exception("Store failure while serving pool request")
    return HTTPException(status_code=status, detail=str(e))


@router.post("/resources", status_code=201)
async def add_resource(
    body: AddResourceRequest,
    coordinator: Coordinator = Depends(get_coordinator),
):
    """Append a resource to the rotation."""
    try:
        resource = await coordinator.add_resource(body.resource_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PoolError as e:
        raise _http_error(e)
    return {"resource_id": resource.id, "rank": resource.rank}


@router.post("/resources/{resource_id}/lease")
async def lease_resource(
    resource_id: str,
    body: LeaseRequest | None = None,
    coordinator: Coordinator = Depends(get_coordinator),
):
    """Exclude a resource from rotation until the lease expires."""
    duration = body.duration_seconds if body else settings.default_lease_seconds
    try:
        installed = await coordinator.lease_resource(resource_id, duration)
    except PoolError as e:
        raise _http_error(e)
    return {"resource_id": resource_id, "installed": installed, "duration_seconds": duration}


@router.post("/next")
async def select_next(coordinator: Coordinator = Depends(get_coordinator)):
    """Pick the next free resource in round-robin order."""
    try:
        resource_id = await coordinator.select_next()
    except PoolError as e:
        raise _http_error(e)
    return {"resource_id": resource_id}


@router.get("/usage")
async def usage_report(coordinator: Coordinator = Depends(get_coordinator)):
    """Per-resource selection counters and lease state."""
    try:
        snapshot = await coordinator.snapshot()
    except PoolError as e:
        raise _http_error(e)

    return {
        "cursor": snapshot.cursor,
        "total_selections": snapshot.total_selections,
        "resources": [
            {
                "resource_id": e.resource.id,
                "rank": e.resource.rank,
                "selections": e.count,
                "leased": e.leased,
            }
            for e in snapshot.entries
        ],
    }
