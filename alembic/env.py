"""Alembic environment for the SQL store backend.

DATABASE_URL is the single source of truth; online migrations run through
psycopg2 because Alembic drives a sync connection.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from sender_pool.adapters.persistence.database import Base, sync_database_url
from sender_pool.adapters.persistence.models import (  # noqa: F401 — register tables
    PoolMemberModel,
    StoreEntryModel,
)
from sender_pool.config import settings

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

target_metadata = Base.metadata


def migrate_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=sync_database_url(settings.database_url),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_online() -> None:
    engine = create_engine(sync_database_url(settings.database_url), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, target_metadata=target_metadata)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
