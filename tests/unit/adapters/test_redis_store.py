"""Tests for RedisPoolStore — mocked redis.asyncio client (no network)."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from sender_pool.adapters.store.redis_store import RedisPoolStore, _bound, _millis
from sender_pool.domain.errors import StoreError


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def redis_store(client):
    return RedisPoolStore(client)


# ─── Helpers ─────────────────────────────────────────────────────────


def test_bound_formats_infinity():
    assert _bound(float("inf")) == "+inf"
    assert _bound(float("-inf")) == "-inf"


def test_bound_formats_ranks_as_integers():
    assert _bound(3.0) == "3"
    assert _bound(3, exclusive=True) == "(3"
    assert _bound(2.5) == "2.5"


def test_millis():
    assert _millis(None) is None
    assert _millis(10) == 10_000
    assert _millis(0.0001) == 1


# ─── Commands ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_insert_uses_zadd_nx(redis_store, client):
    client.zadd.return_value = 1
    assert await redis_store.insert_if_absent("pool", "a", 4) is True
    client.zadd.assert_awaited_once_with("pool", {"a": 4}, nx=True)

    client.zadd.return_value = 0
    assert await redis_store.insert_if_absent("pool", "a", 5) is False


@pytest.mark.asyncio
async def test_max_score(redis_store, client):
    client.zrevrange.return_value = []
    assert await redis_store.max_score("pool") is None

    client.zrevrange.return_value = [("d", 3.0)]
    assert await redis_store.max_score("pool") == 3.0
    client.zrevrange.assert_awaited_with("pool", 0, 0, withscores=True)


@pytest.mark.asyncio
async def test_range_after_cursor_is_exclusive(redis_store, client):
    client.zrangebyscore.return_value = [("b", 2.0), ("c", 3.0)]

    rows = await redis_store.range_by_score("pool", 1, float("inf"), min_exclusive=True)

    assert rows == [("b", 2.0), ("c", 3.0)]
    client.zrangebyscore.assert_awaited_once_with("pool", "(1", "+inf", withscores=True)


@pytest.mark.asyncio
async def test_set_if_absent_uses_nx_px(redis_store, client):
    client.set.return_value = True
    assert await redis_store.set_if_absent("lock", "1", ttl=10) is True
    client.set.assert_awaited_once_with("lock", "1", nx=True, px=10_000)

    client.set.return_value = None
    assert await redis_store.set_if_absent("lock", "1", ttl=10) is False


@pytest.mark.asyncio
async def test_scalar_commands(redis_store, client):
    client.get.return_value = "3"
    client.exists.return_value = 1
    client.incr.return_value = 7
    client.zscore.return_value = None
    client.zcard.return_value = 4

    assert await redis_store.get("cursor") == "3"
    assert await redis_store.exists("lease") is True
    assert await redis_store.increment("counter") == 7
    assert await redis_store.score("pool", "ghost") is None
    assert await redis_store.cardinality("pool") == 4

    await redis_store.set("cursor", "4")
    client.set.assert_awaited_with("cursor", "4", px=None)

    await redis_store.release("lock")
    client.delete.assert_awaited_once_with("lock")


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors(redis_store, client):
    client.get.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(StoreError) as exc_info:
        await redis_store.get("cursor")

    assert isinstance(exc_info.value.__cause__, RedisConnectionError)


@pytest.mark.asyncio
async def test_close(redis_store, client):
    await redis_store.close()
    client.aclose.assert_awaited_once()
