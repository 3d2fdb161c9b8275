"""SQLAlchemy store adapter — implements PoolStore on PostgreSQL.

Expiry is evaluated against the database clock (``now()``), so every
application server agrees on when a lease or lock lapses.
"""

from __future__ import annotations

import functools
import logging
from datetime import timedelta

from sqlalchemy import BigInteger, Text, cast, delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from sender_pool.adapters.persistence.models import PoolMemberModel, StoreEntryModel
from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.domain.errors import StoreError

logger = logging.getLogger(__name__)


def _translate_errors(fn):
    """Re-raise driver failures as StoreError."""

    @functools.wraps(fn)
    async def wrapper(self, *args, **kwargs):
        try:
            return await fn(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("SQL store %s failed: %s", fn.__name__, e)
            raise StoreError(f"SQL store {fn.__name__} failed: {e}") from e

    return wrapper


def _live():
    return or_(StoreEntryModel.expires_at.is_(None), StoreEntryModel.expires_at > func.now())


def _expires_at(ttl: float | None):
    if ttl is None:
        return None
    return func.now() + timedelta(seconds=ttl)


class SqlPoolStore(PoolStore):
    def __init__(self, session_factory: async_sessionmaker, engine: AsyncEngine | None = None):
        self._sessions = session_factory
        self._engine = engine

    # ─── Ordered sets ───────────────────────────────────────────────

    @_translate_errors
    async def insert_if_absent(self, set_key: str, member: str, score: float) -> bool:
        stmt = (
            pg_insert(PoolMemberModel)
            .values(set_key=set_key, member=member, score=score)
            .on_conflict_do_nothing(index_elements=["set_key", "member"])
            .returning(PoolMemberModel.member)
        )
        async with self._sessions.begin() as s:
            result = await s.execute(stmt)
            return result.scalar_one_or_none() is not None

    @_translate_errors
    async def max_score(self, set_key: str) -> float | None:
        async with self._sessions() as s:
            result = await s.execute(
                select(func.max(PoolMemberModel.score)).where(PoolMemberModel.set_key == set_key)
            )
            return result.scalar_one_or_none()

    @_translate_errors
    async def range_by_score(
        self,
        set_key: str,
        min_score: float = float("-inf"),
        max_score: float = float("inf"),
        *,
        min_exclusive: bool = False,
    ) -> list[tuple[str, float]]:
        stmt = select(PoolMemberModel.member, PoolMemberModel.score).where(
            PoolMemberModel.set_key == set_key
        )
        if min_score != float("-inf"):
            if min_exclusive:
                stmt = stmt.where(PoolMemberModel.score > min_score)
            else:
                stmt = stmt.where(PoolMemberModel.score >= min_score)
        if max_score != float("inf"):
            stmt = stmt.where(PoolMemberModel.score <= max_score)
        stmt = stmt.order_by(PoolMemberModel.score, PoolMemberModel.member)

        async with self._sessions() as s:
            result = await s.execute(stmt)
            return [(row.member, row.score) for row in result]

    @_translate_errors
    async def score(self, set_key: str, member: str) -> float | None:
        async with self._sessions() as s:
            result = await s.execute(
                select(PoolMemberModel.score).where(
                    PoolMemberModel.set_key == set_key,
                    PoolMemberModel.member == member,
                )
            )
            return result.scalar_one_or_none()

    @_translate_errors
    async def cardinality(self, set_key: str) -> int:
        async with self._sessions() as s:
            result = await s.execute(
                select(func.count())
                .select_from(PoolMemberModel)
                .where(PoolMemberModel.set_key == set_key)
            )
            return result.scalar_one()

    # ─── Scalars ────────────────────────────────────────────────────

    @_translate_errors
    async def set_if_absent(self, key: str, value: str = "1", ttl: float | None = None) -> bool:
        async with self._sessions.begin() as s:
            # An expired row must not block the insert
            await s.execute(
                delete(StoreEntryModel).where(
                    StoreEntryModel.key == key,
                    StoreEntryModel.expires_at <= func.now(),
                )
            )
            result = await s.execute(
                pg_insert(StoreEntryModel)
                .values(key=key, value=value, expires_at=_expires_at(ttl))
                .on_conflict_do_nothing(index_elements=["key"])
                .returning(StoreEntryModel.key)
            )
            return result.scalar_one_or_none() is not None

    @_translate_errors
    async def release(self, key: str) -> None:
        async with self._sessions.begin() as s:
            await s.execute(delete(StoreEntryModel).where(StoreEntryModel.key == key))
            await s.execute(delete(PoolMemberModel).where(PoolMemberModel.set_key == key))

    @_translate_errors
    async def get(self, key: str) -> str | None:
        async with self._sessions() as s:
            result = await s.execute(
                select(StoreEntryModel.value).where(StoreEntryModel.key == key, _live())
            )
            return result.scalar_one_or_none()

    @_translate_errors
    async def set(self, key: str, value: str, ttl: float | None = None) -> None:
        stmt = pg_insert(StoreEntryModel).values(
            key=key, value=value, expires_at=_expires_at(ttl)
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": stmt.excluded.value, "expires_at": stmt.excluded.expires_at},
        )
        async with self._sessions.begin() as s:
            await s.execute(stmt)

    @_translate_errors
    async def exists(self, key: str) -> bool:
        async with self._sessions() as s:
            entry = await s.execute(
                select(StoreEntryModel.key).where(StoreEntryModel.key == key, _live())
            )
            if entry.scalar_one_or_none() is not None:
                return True
            member = await s.execute(
                select(PoolMemberModel.member).where(PoolMemberModel.set_key == key).limit(1)
            )
            return member.scalar_one_or_none() is not None

    @_translate_errors
    async def increment(self, key: str) -> int:
        stmt = pg_insert(StoreEntryModel).values(key=key, value="1")
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": cast(cast(StoreEntryModel.value, BigInteger) + 1, Text)},
        ).returning(StoreEntryModel.value)
        async with self._sessions.begin() as s:
            result = await s.execute(stmt)
            return int(result.scalar_one())

    # ─── Lifecycle ──────────────────────────────────────────────────

    @_translate_errors
    async def ping(self) -> bool:
        async with self._sessions() as s:
            result = await s.execute(select(1))
            return result.scalar() == 1

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
