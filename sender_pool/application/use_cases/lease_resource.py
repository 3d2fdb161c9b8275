"""LeaseResourceUseCase — temporarily exclude a resource from rotation."""

from __future__ import annotations

import logging

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.errors import NotFound
from sender_pool.domain.value_objects.pool_keys import PoolKeys

logger = logging.getLogger(__name__)


class LeaseResourceUseCase:
    def __init__(self, store: PoolStore, keys: PoolKeys):
        self._store = store
        self._keys = keys

    async def execute(self, resource_id: str, duration_seconds: float) -> bool:
        """Install a self-expiring lease on *resource_id*.

        An existing lease is left untouched (its expiry is not extended) and
        the call still succeeds. Returns True if a new lease was installed.

        Raises:
            ValueError: if *duration_seconds* is not positive.
            NotFound: if the id is not in the pool.
        """
        if duration_seconds <= 0:
            raise ValueError("Lease duration must be positive")

        if await self._store.score(self._keys.resources, resource_id) is None:
            raise NotFound(resource_id)

        installed = await self._store.set_if_absent(
            self._keys.lease(resource_id), "1", ttl=duration_seconds
        )
        if installed:
            logger.info("Leased resource %s for %.0fs", resource_id, duration_seconds)
        else:
            logger.debug("Resource %s already leased, keeping existing lease", resource_id)
        return installed
