"""UsageReportUseCase — read-only view of the pool and its counters."""

from __future__ import annotations

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.entities.resource import PoolSnapshot, Resource, UsageEntry
from sender_pool.domain.policies.round_robin import parse_cursor
from sender_pool.domain.value_objects.pool_keys import PoolKeys


class UsageReportUseCase:
    """Takes no lock, so a report may interleave with a running selection."""

    def __init__(self, store: PoolStore, keys: PoolKeys):
        self._store = store
        self._keys = keys

    async def usage(self, resource_id: str) -> int | None:
        """Raw usage counter; None if the resource was never selected."""
        raw = await self._store.get(self._keys.counter(resource_id))
        return int(raw) if raw is not None else None

    async def execute(self) -> PoolSnapshot:
        rows = await self._store.range_by_score(self._keys.resources)
        entries = []
        for member, score in rows:
            entries.append(
                UsageEntry(
                    resource=Resource.from_score(member, score),
                    selections=await self.usage(member),
                    leased=await self._store.exists(self._keys.lease(member)),
                )
            )
        cursor = parse_cursor(await self._store.get(self._keys.cursor))
        return PoolSnapshot(entries=entries, cursor=cursor)
