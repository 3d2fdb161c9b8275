"""Redis store adapter — implements PoolStore on redis.asyncio."""

from __future__ import annotations

import functools
import logging

from redis import asyncio as redis_async
from redis.exceptions import RedisError

from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.errors import StoreError

logger = logging.getLogger(__name__)


def _translate_errors(fn):
    """Re-raise driver failures as StoreError."""

    @functools.wraps(fn)
    async def wrapper(self, *args, **kwargs):
        try:
            return await fn(self, *args, **kwargs)
        except RedisError as e:
            logger.error("Redis %s failed: %s", fn.__name__, e)
            raise StoreError(f"Redis {fn.__name__} failed: {e}") from e

    return wrapper


def _bound(value: float, exclusive: bool = False) -> str:
    """Format a ZRANGEBYSCORE bound."""
    if value == float("inf"):
        return "+inf"
    if value == float("-inf"):
        return "-inf"
    text = str(int(value)) if float(value).is_integer() else repr(float(value))
    return f"({text}" if exclusive else text


def _millis(ttl: float | None) -> int | None:
    if ttl is None:
        return None
    return max(1, round(ttl * 1000))


class RedisPoolStore(PoolStore):
    def __init__(self, client: redis_async.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisPoolStore":
        return cls(redis_async.from_url(url, decode_responses=True))

    # ─── Ordered sets ───────────────────────────────────────────────

    @_translate_errors
    async def insert_if_absent(self, set_key: str, member: str, score: float) -> bool:
        added = await self._client.zadd(set_key, {member: score}, nx=True)
        return added == 1

    @_translate_errors
    async def max_score(self, set_key: str) -> float | None:
        top = await self._client.zrevrange(set_key, 0, 0, withscores=True)
        return float(top[0][1]) if top else None

    @_translate_errors
    async def range_by_score(
        self,
        set_key: str,
        min_score: float = float("-inf"),
        max_score: float = float("inf"),
        *,
        min_exclusive: bool = False,
    ) -> list[tuple[str, float]]:
        rows = await self._client.zrangebyscore(
            set_key, _bound(min_score, min_exclusive), _bound(max_score), withscores=True
        )
        return [(member, float(score)) for member, score in rows]

    @_translate_errors
    async def score(self, set_key: str, member: str) -> float | None:
        value = await self._client.zscore(set_key, member)
        return float(value) if value is not None else None

    @_translate_errors
    async def cardinality(self, set_key: str) -> int:
        return int(await self._client.zcard(set_key))

    # ─── Scalars ────────────────────────────────────────────────────

    @_translate_errors
    async def set_if_absent(self, key: str, value: str = "1", ttl: float | None = None) -> bool:
        return bool(await self._client.set(key, value, nx=True, px=_millis(ttl)))

    @_translate_errors
    async def release(self, key: str) -> None:
        await self._client.delete(key)

    @_translate_errors
    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    @_translate_errors
    async def set(self, key: str, value: str, ttl: float | None = None) -> None:
        await self._client.set(key, value, px=_millis(ttl))

    @_translate_errors
    async def exists(self, key: str) -> bool:
        return await self._client.exists(key) > 0

    @_translate_errors
    async def increment(self, key: str) -> int:
        return int(await self._client.incr(key))

    # ─── Lifecycle ──────────────────────────────────────────────────

    @_translate_errors
    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()
