"""Build the configured PoolStore adapter."""

from __future__ import annotations

import logging

from sender_pool.adapters.store.memory_store import InMemoryPoolStore
from sender_pool.adapters.store.redis_store import RedisPoolStore
from sender_pool.application.ports.pool_store import PoolStore
from sender_pool.config import Settings

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> PoolStore:
    if settings.store_backend == "memory":
        logger.info("Using in-memory pool store (single process only)")
        return InMemoryPoolStore()

    if settings.store_backend == "sql":
        from sender_pool.adapters.persistence.database import create_session_factory
        from sender_pool.adapters.persistence.sql_store import SqlPoolStore

        engine, session_factory = create_session_factory(
            settings.database_url, echo=settings.debug
        )
        logger.info("Using SQL pool store")
        return SqlPoolStore(session_factory, engine=engine)

    logger.info("Using Redis pool store")
    return RedisPoolStore.from_url(settings.redis_url)
