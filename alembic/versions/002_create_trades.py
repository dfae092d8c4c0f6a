"""002: create trades table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # author is a JSON snapshot of the author's public profile, not a foreign key
    op.create_table(
        "trades",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("author_id", sa.String(36), nullable=False),
        sa.Column("author", sa.JSON, nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("giving", sa.JSON, nullable=False),
        sa.Column("wanting", sa.JSON, nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True)),
        sa.Column("is_urgent", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.CheckConstraint(
            "status IN ('active', 'completed', 'cancelled')", name="ck_trades_status"
        ),
    )
    op.create_index("idx_trades_created_at", "trades", ["created_at"])
    op.create_index("idx_trades_author_id", "trades", ["author_id"])


def downgrade() -> None:
    op.drop_table("trades")
