"""Tests for SqlPoolStore — statements compiled for PostgreSQL (no database)."""

from __future__ import annotations

from collections import namedtuple
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from sender_pool.adapters.persistence.sql_store import SqlPoolStore
from sender_pool.domain.errors import StoreError

Row = namedtuple("Row", ["member", "score"])


# ─── Fake session factory ───────────────────────────────────────────


class RecordingSession:
    def __init__(self, results):
        self.statements = []
        self._results = list(results)

    async def execute(self, stmt):
        self.statements.append(stmt)
        result = self._results.pop(0) if self._results else MagicMock()
        if isinstance(result, Exception):
            raise result
        return result


class FakeSessions:
    """Stands in for async_sessionmaker: both ``()`` and ``.begin()`` yield one session."""

    def __init__(self, *results):
        self.session = RecordingSession(results)
        self.transactions = 0

    @asynccontextmanager
    async def _open(self):
        yield self.session

    def __call__(self):
        return self._open()

    def begin(self):
        self.transactions += 1
        return self._open()

    @property
    def sql(self) -> list[str]:
        return [_compile(s) for s in self.session.statements]


def _compile(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def _scalar(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    return result


# ─── Ordered sets ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_insert_if_absent_does_nothing_on_conflict():
    sessions = FakeSessions(_scalar("a"), _scalar(None))
    store = SqlPoolStore(sessions)

    assert await store.insert_if_absent("pool", "a", 3) is True
    assert await store.insert_if_absent("pool", "a", 4) is False

    sql = sessions.sql[0]
    assert "INSERT INTO pool_members" in sql
    assert "ON CONFLICT (set_key, member) DO NOTHING" in sql
    assert "RETURNING pool_members.member" in sql


@pytest.mark.asyncio
async def test_range_after_cursor_is_exclusive():
    sessions = FakeSessions([Row("b", 2.0), Row("c", 3.0)])
    store = SqlPoolStore(sessions)

    rows = await store.range_by_score("pool", 1, float("inf"), min_exclusive=True)

    assert rows == [("b", 2.0), ("c", 3.0)]
    sql = sessions.sql[0]
    assert "pool_members.score > " in sql
    assert "pool_members.score >= " not in sql
    assert "pool_members.score <= " not in sql
    assert "ORDER BY pool_members.score, pool_members.member" in sql
    assert 1 in sessions.session.statements[0].compile(dialect=postgresql.dialect()).params.values()


@pytest.mark.asyncio
async def test_range_inclusive_bounds():
    sessions = FakeSessions([])
    store = SqlPoolStore(sessions)

    await store.range_by_score("pool", 0, 5)

    sql = sessions.sql[0]
    assert "pool_members.score >= " in sql
    assert "pool_members.score <= " in sql


@pytest.mark.asyncio
async def test_full_range_has_no_score_filter():
    sessions = FakeSessions([Row("a", 0.0)])
    store = SqlPoolStore(sessions)

    assert await store.range_by_score("pool") == [("a", 0.0)]
    assert "pool_members.score >" not in sessions.sql[0]
    assert "pool_members.score <" not in sessions.sql[0]


# ─── Scalars ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_set_if_absent_clears_expired_row_first():
    sessions = FakeSessions(MagicMock(), _scalar("lock"))
    store = SqlPoolStore(sessions)

    assert await store.set_if_absent("lock", "1", ttl=10) is True

    delete_sql, insert_sql = sessions.sql
    assert delete_sql.startswith("DELETE FROM store_entries")
    assert "store_entries.expires_at <= now()" in delete_sql
    assert "INSERT INTO store_entries" in insert_sql
    assert "now() + " in insert_sql
    assert "ON CONFLICT (key) DO NOTHING" in insert_sql
    assert sessions.transactions == 1


@pytest.mark.asyncio
async def test_set_if_absent_held_key_returns_false():
    sessions = FakeSessions(MagicMock(), _scalar(None))
    store = SqlPoolStore(sessions)
    assert await store.set_if_absent("lock", "1", ttl=10) is False


@pytest.mark.asyncio
async def test_get_ignores_expired_rows():
    sessions = FakeSessions(_scalar("3"))
    store = SqlPoolStore(sessions)

    assert await store.get("cursor") == "3"
    sql = sessions.sql[0]
    assert "store_entries.expires_at IS NULL" in sql
    assert "store_entries.expires_at > now()" in sql


@pytest.mark.asyncio
async def test_set_upserts_value_and_expiry():
    sessions = FakeSessions(MagicMock())
    store = SqlPoolStore(sessions)

    await store.set("cursor", "4")

    sql = sessions.sql[0]
    assert "ON CONFLICT (key) DO UPDATE SET" in sql
    assert "excluded.value" in sql
    assert "excluded.expires_at" in sql


@pytest.mark.asyncio
async def test_increment_casts_and_upserts():
    sessions = FakeSessions(_scalar("5"))
    store = SqlPoolStore(sessions)

    assert await store.increment("counter:A") == 5

    sql = sessions.sql[0]
    assert "INSERT INTO store_entries" in sql
    assert "ON CONFLICT (key) DO UPDATE SET value=CAST(CAST(" in sql.replace(" = ", "=")
    assert "AS BIGINT)" in sql
    assert "AS TEXT)" in sql
    assert "RETURNING store_entries.value" in sql


@pytest.mark.asyncio
async def test_release_clears_scalars_and_sets():
    sessions = FakeSessions(MagicMock(), MagicMock())
    store = SqlPoolStore(sessions)

    await store.release("message_gateway:resources")

    entries_sql, members_sql = sessions.sql
    assert entries_sql.startswith("DELETE FROM store_entries")
    assert members_sql.startswith("DELETE FROM pool_members")
    assert "pool_members.set_key = " in members_sql


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors():
    failure = OperationalError("SELECT 1", {}, ConnectionRefusedError("db down"))
    sessions = FakeSessions(failure)
    store = SqlPoolStore(sessions)

    with pytest.raises(StoreError) as exc_info:
        await store.get("cursor")

    assert exc_info.value.__cause__ is failure
