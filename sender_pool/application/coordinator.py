"""Coordinator — the public entry point for pool operations.

Wires the use cases to one store and one key namespace. Instances hold no
pool state of their own; any number of them (in any number of processes)
can share a store.
"""

from __future__ import annotations

import asyncio

from sender_pool.application.pool_lock import PoolLock, SleepFn
from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.application.use_cases.add_resource import AddResourceUseCase
from sender_pool.application.use_cases.lease_resource import LeaseResourceUseCase
from sender_pool.application.use_cases.select_next import SelectNextUseCase
from sender_pool.application.use_cases.usage_report import UsageReportUseCase
from sender_pool.config import Settings
from sender_pool.domain.entities.resource import PoolSnapshot, Resource
from sender_pool.domain.value_objects.pool_keys import PoolKeys


class Coordinator:
    def __init__(
        self,
        store: PoolStore,
        keys: PoolKeys | None = None,
        lock_ttl: float = 10.0,
        lock_max_attempts: int = 100,
        lock_retry_delay: float = 0.1,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.store = store
        self.keys = keys or PoolKeys()
        self.lock = PoolLock(
            store,
            self.keys.lock,
            ttl=lock_ttl,
            max_attempts=lock_max_attempts,
            retry_delay=lock_retry_delay,
            sleep=sleep,
        )
        self._add = AddResourceUseCase(store, self.keys)
        self._lease = LeaseResourceUseCase(store, self.keys)
        self._select = SelectNextUseCase(store, self.keys, self.lock)
        self._report = UsageReportUseCase(store, self.keys)

    @classmethod
    def from_settings(
        cls, store: PoolStore, settings: Settings, sleep: SleepFn = asyncio.sleep
    ) -> "Coordinator":
        return cls(
            store,
            keys=PoolKeys(settings.pool_namespace),
            lock_ttl=settings.lock_ttl_seconds,
            lock_max_attempts=settings.lock_max_attempts,
            lock_retry_delay=settings.lock_retry_delay_seconds,
            sleep=sleep,
        )

    async def add_resource(self, resource_id: str) -> Resource:
        return await self._add.execute(resource_id)

    async def lease_resource(self, resource_id: str, duration_seconds: float) -> bool:
        return await self._lease.execute(resource_id, duration_seconds)

    async def select_next(self) -> str:
        selection = await self._select.execute()
        return selection.resource.id

    async def usage(self, resource_id: str) -> int | None:
        return await self._report.usage(resource_id)

    async def snapshot(self) -> PoolSnapshot:
        return await self._report.execute()
