"""PoolLock — self-expiring distributed mutex over the shared store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.errors import LockTimeout

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class PoolLock:
    """Conditional set-with-expiry lock with a bounded retry loop.

    The TTL bounds how long a crashed holder can block everyone else.
    Release is an unconditional delete, so a holder whose critical section
    outlives the TTL may delete a lock taken by the next caller.
    """

    def __init__(
        self,
        store: PoolStore,
        key: str,
        ttl: float = 10.0,
        max_attempts: int = 100,
        retry_delay: float = 0.1,
        sleep: SleepFn = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._store = store
        self._key = key
        self._ttl = ttl
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._sleep = sleep

    @property
    def key(self) -> str:
        return self._key

    async def acquire(self) -> int:
        """Try up to *max_attempts* times. Returns the attempt number that won."""
        for attempt in range(1, self._max_attempts + 1):
            if await self._store.set_if_absent(self._key, "1", ttl=self._ttl):
                if attempt > 1:
                    logger.debug("Lock %s acquired on attempt %d", self._key, attempt)
                return attempt
            if attempt < self._max_attempts:
                await self._sleep(self._retry_delay)

        logger.warning(
            "Lock %s not acquired after %d attempts", self._key, self._max_attempts
        )
        raise LockTimeout(self._max_attempts)

    async def release(self) -> None:
        await self._store.release(self._key)

    @asynccontextmanager
    async def held(self) -> AsyncIterator[None]:
        """Hold the lock for the body; released on every exit path."""
        await self.acquire()
        try:
            yield
        finally:
            await self.release()
