"""SelectNextUseCase — lock-protected round-robin pick of the next free resource."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sender_pool.application.pool_lock import PoolLock
from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.entities.resource import Resource
from sender_pool.domain.errors import AllResourcesLeased, NoResourcesAvailable
from sender_pool.domain.policies.round_robin import (
    format_cursor,
    needs_wraparound,
    parse_cursor,
    rotation_order,
)
from sender_pool.domain.value_objects.pool_keys import PoolKeys

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    """Outcome of one successful selection."""

    resource: Resource
    previous_cursor: int | None
    usage_count: int


class SelectNextUseCase:
    """Picks the next unleased resource after the cursor, wrapping around."""

    def __init__(self, store: PoolStore, keys: PoolKeys, lock: PoolLock):
        self._store = store
        self._keys = keys
        self._lock = lock

    async def execute(self) -> Selection:
        """Select, persist the cursor and bump the usage counter.

        Pipeline:
        1. Fail fast on an empty pool
        2. Acquire the pool lock (bounded retry)
        3. Read cursor, query candidates after it (wrap if too few)
        4. Check leases in rotation order
        5. Persist cursor + increment counter
        6. Release the lock on every exit path

        Raises:
            NoResourcesAvailable: the pool is empty.
            LockTimeout: the lock retry budget ran out.
            AllResourcesLeased: every resource is leased.
            StoreError: any store failure.
        """
        if await self._store.cardinality(self._keys.resources) == 0:
            raise NoResourcesAvailable()

        async with self._lock.held():
            cursor = parse_cursor(await self._store.get(self._keys.cursor))

            candidates = await self._candidates_after(cursor)
            wrapped = needs_wraparound(candidates)
            if wrapped:
                candidates = await self._all_resources()

            chosen = await self._first_unleased(rotation_order(candidates, cursor))

            if chosen is None and not wrapped:
                # Everything after the cursor is leased; wrap to the front
                chosen = await self._first_unleased(
                    rotation_order(await self._all_resources(), cursor)
                )

            if chosen is None:
                logger.warning("Selection failed: all resources are leased")
                raise AllResourcesLeased()

            await self._store.set(self._keys.cursor, format_cursor(chosen.rank))
            usage = await self._store.increment(self._keys.counter(chosen.id))

        logger.info("Selected resource %s (rank %d, uses %d)", chosen.id, chosen.rank, usage)
        return Selection(resource=chosen, previous_cursor=cursor, usage_count=usage)

    async def _candidates_after(self, cursor: int | None) -> list[Resource]:
        if cursor is None:
            return await self._all_resources()
        rows = await self._store.range_by_score(
            self._keys.resources, cursor, float("inf"), min_exclusive=True
        )
        return [Resource.from_score(member, score) for member, score in rows]

    async def _all_resources(self) -> list[Resource]:
        rows = await self._store.range_by_score(self._keys.resources)
        return [Resource.from_score(member, score) for member, score in rows]

    async def _first_unleased(self, ordered: list[Resource]) -> Resource | None:
        for resource in ordered:
            if not await self._store.exists(self._keys.lease(resource.id)):
                return resource
            logger.debug("Skipping leased resource %s", resource.id)
        return None
