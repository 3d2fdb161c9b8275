"""AddResourceUseCase — register a new resource at the end of the rotation."""

from __future__ import annotations

import logging

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.entities.resource import Resource
from sender_pool.domain.errors import AlreadyExists
from sender_pool.domain.policies.round_robin import next_rank
from sender_pool.domain.value_objects.pool_keys import PoolKeys

logger = logging.getLogger(__name__)


class AddResourceUseCase:
    def __init__(self, store: PoolStore, keys: PoolKeys):
        self._store = store
        self._keys = keys

    async def execute(self, resource_id: str) -> Resource:
        """Add *resource_id* to the pool with the next rank.

        Ranks come from an atomic sequence seeded from the current maximum
        rank, so concurrent adds never share a rank. A rank lost to a
        duplicate insert is not reused.

        Ids are opaque and stored exactly as given; only empty or
        all-whitespace ids are refused.

        Raises:
            ValueError: if *resource_id* is blank.
            AlreadyExists: if the id is already in the pool.
        """
        if not resource_id or not resource_id.strip():
            raise ValueError("Resource id must not be blank")

        if await self._store.score(self._keys.resources, resource_id) is not None:
            raise AlreadyExists(resource_id)

        rank = await self._allocate_rank()
        inserted = await self._store.insert_if_absent(self._keys.resources, resource_id, rank)
        if not inserted:
            # Lost a race against a concurrent add of the same id
            raise AlreadyExists(resource_id)

        logger.info("Added resource %s (rank %d)", resource_id, rank)
        return Resource(id=resource_id, rank=rank)

    async def _allocate_rank(self) -> int:
        seq_key = self._keys.rank_sequence
        if not await self._store.exists(seq_key):
            # Seed once; pools created before the sequence existed continue at max + 1
            current_max = await self._store.max_score(self._keys.resources)
            await self._store.set_if_absent(seq_key, str(next_rank(current_max)))
        return await self._store.increment(seq_key) - 1
