"""SQLAlchemy ORM models — key-value store tables in PostgreSQL."""

from datetime import datetime

from sqlalchemy import DateTime, Double, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from sender_pool.adapters.persistence.database import Base


class PoolMemberModel(Base):
    """One ordered-set member (set_key, member) → score."""

    __tablename__ = "pool_members"

    set_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    member: Mapped[str] = mapped_column(String(255), primary_key=True)
    score: Mapped[float] = mapped_column(Double, nullable=False)

    __table_args__ = (Index("idx_pool_members_score", "set_key", "score"),)


class StoreEntryModel(Base):
    """Scalar entry; a NULL expires_at never expires."""

    __tablename__ = "store_entries"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_store_entries_expires", "expires_at"),)
