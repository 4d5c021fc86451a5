"""Initial schema: crypto_purchases.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "crypto_purchases",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("symbol", sa.Text, nullable=False),
        sa.Column("purchase_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("amount", sa.Double, nullable=False),
        sa.Column("purchase_price_usd", sa.Double, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("amount > 0", name="ck_crypto_purchases_amount_positive"),
    )
    op.create_index(
        "ix_crypto_purchases_purchase_date", "crypto_purchases", ["purchase_date"]
    )


def downgrade() -> None:
    op.drop_index("ix_crypto_purchases_purchase_date", table_name="crypto_purchases")
    op.drop_table("crypto_purchases")
