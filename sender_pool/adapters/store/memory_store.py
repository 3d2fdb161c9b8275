"""In-memory store adapter — implements PoolStore for a single process.

Each call yields to the event loop once before running, so concurrent
coroutines interleave between primitives the way remote callers do.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.errors import StoreError


class InMemoryPoolStore(PoolStore):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._sets: dict[str, dict[str, float]] = {}
        self._values: dict[str, tuple[str, float | None]] = {}

    def _live(self, key: str) -> str | None:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._values[key]
            return None
        return value

    def _expiry(self, ttl: float | None) -> float | None:
        return None if ttl is None else self._clock() + ttl

    # ─── Ordered sets ───────────────────────────────────────────────

    async def insert_if_absent(self, set_key, member, score):
        await asyncio.sleep(0)
        members = self._sets.setdefault(set_key, {})
        if member in members:
            return False
        members[member] = float(score)
        return True

    async def max_score(self, set_key):
        await asyncio.sleep(0)
        members = self._sets.get(set_key)
        return max(members.values()) if members else None

    async def range_by_score(
        self, set_key, min_score=float("-inf"), max_score=float("inf"), *, min_exclusive=False
    ):
        await asyncio.sleep(0)
        rows = []
        for member, score in self._sets.get(set_key, {}).items():
            above = score > min_score if min_exclusive else score >= min_score
            if above and score <= max_score:
                rows.append((member, score))
        return sorted(rows, key=lambda row: (row[1], row[0]))

    async def score(self, set_key, member):
        await asyncio.sleep(0)
        return self._sets.get(set_key, {}).get(member)

    async def cardinality(self, set_key):
        await asyncio.sleep(0)
        return len(self._sets.get(set_key, {}))

    # ─── Scalars ────────────────────────────────────────────────────

    async def set_if_absent(self, key, value="1", ttl=None):
        await asyncio.sleep(0)
        if self._live(key) is not None:
            return False
        self._values[key] = (value, self._expiry(ttl))
        return True

    async def release(self, key):
        await asyncio.sleep(0)
        self._values.pop(key, None)
        self._sets.pop(key, None)

    async def get(self, key):
        await asyncio.sleep(0)
        return self._live(key)

    async def set(self, key, value, ttl=None):
        await asyncio.sleep(0)
        self._values[key] = (value, self._expiry(ttl))

    async def exists(self, key):
        await asyncio.sleep(0)
        return self._live(key) is not None or bool(self._sets.get(key))

    async def increment(self, key):
        await asyncio.sleep(0)
        raw = self._live(key)
        try:
            current = int(raw) if raw is not None else 0
        except ValueError as e:
            raise StoreError(f"Value at {key} is not an integer") from e
        expires_at = self._values[key][1] if raw is not None else None
        self._values[key] = (str(current + 1), expires_at)
        return current + 1

    async def ping(self):
        return True
