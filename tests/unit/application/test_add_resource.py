"""Tests for AddResourceUseCase."""

import asyncio

import pytest

from sender_pool.domain.errors import AlreadyExists


@pytest.mark.asyncio
async def test_ranks_follow_insertion_order(coordinator, store, keys):
    added = [await coordinator.add_resource(rid) for rid in ("A", "B", "C")]
    assert [r.rank for r in added] == [0, 1, 2]

    rows = await store.range_by_score(keys.resources)
    assert rows == [("A", 0.0), ("B", 1.0), ("C", 2.0)]


@pytest.mark.asyncio
async def test_duplicate_add_fails_and_leaves_pool_unchanged(coordinator, store, keys):
    await coordinator.add_resource("A")
    await coordinator.add_resource("B")

    with pytest.raises(AlreadyExists):
        await coordinator.add_resource("A")

    assert await store.range_by_score(keys.resources) == [("A", 0.0), ("B", 1.0)]


@pytest.mark.asyncio
async def test_blank_id_rejected(coordinator):
    with pytest.raises(ValueError, match="blank"):
        await coordinator.add_resource("   ")


@pytest.mark.asyncio
async def test_existing_pool_continues_at_max_plus_one(coordinator, store, keys):
    """A pool written before the rank sequence existed keeps counting from its max."""
    await store.insert_if_absent(keys.resources, "legacy-1", 0)
    await store.insert_if_absent(keys.resources, "legacy-2", 7)

    added = await coordinator.add_resource("new")
    assert added.rank == 8


@pytest.mark.asyncio
async def test_concurrent_adds_get_unique_ranks(coordinator, store, keys):
    ids = [f"+62{i:04d}" for i in range(10)]
    added = await asyncio.gather(*(coordinator.add_resource(rid) for rid in ids))

    assert sorted(r.rank for r in added) == list(range(10))
    assert await store.cardinality(keys.resources) == 10


@pytest.mark.asyncio
async def test_concurrent_duplicate_adds_one_wins(coordinator, store, keys):
    results = await asyncio.gather(
        coordinator.add_resource("A"),
        coordinator.add_resource("A"),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, AlreadyExists)]
    assert len(errors) == 1
    assert await store.cardinality(keys.resources) == 1


@pytest.mark.asyncio
async def test_id_stored_verbatim(coordinator, store, keys):
    added = await coordinator.add_resource(" A ")
    assert added.id == " A "
    assert await store.score(keys.resources, " A ") == 0.0
    assert await store.score(keys.resources, "A") is None


@pytest.mark.asyncio
async def test_padded_ids_are_distinct(coordinator, store, keys):
    await coordinator.add_resource("A")
    await coordinator.add_resource("A ")
    assert await store.cardinality(keys.resources) == 2


@pytest.mark.asyncio
async def test_empty_id_rejected(coordinator):
    with pytest.raises(ValueError, match="blank"):
        await coordinator.add_resource("")
