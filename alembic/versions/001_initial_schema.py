"""Initial schema — key-value store tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Ordered sets
    op.create_table(
        "pool_members",
        sa.Column("set_key", sa.String(255), primary_key=True),
        sa.Column("member", sa.String(255), primary_key=True),
        sa.Column("score", sa.Double, nullable=False),
    )
    op.create_index("idx_pool_members_score", "pool_members", ["set_key", "score"])

    # Scalars, counters, leases, locks
    op.create_table(
        "store_entries",
        sa.Column("key", sa.String(512), primary_key=True),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_store_entries_expires", "store_entries", ["expires_at"])


def downgrade() -> None:
    op.drop_index("idx_store_entries_expires", table_name="store_entries")
    op.drop_table("store_entries")
    op.drop_index("idx_pool_members_score", table_name="pool_members")
    op.drop_table("pool_members")
