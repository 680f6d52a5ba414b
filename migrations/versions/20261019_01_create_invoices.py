"""create invoices table

Revision ID: 5c1f0e9a2b7d
Revises:
Create Date: 2026-10-19 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1f0e9a2b7d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("account", sa.String(length=64), primary_key=True),
        sa.Column("recipient", sa.String(length=64), nullable=False),
        sa.Column("order_id", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="unpaid"),
        sa.Column("amount", sa.String(length=64), nullable=False),
        sa.Column("paid_amount", sa.String(length=64)),
        sa.Column("currency", sa.String(length=16)),
        sa.Column("callback", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("withdrawal_status", sa.String(length=20)),
        sa.Column("withdrawal_amount", sa.String(length=64)),
        sa.Column("withdrawal_tx", sa.String(length=128)),
        sa.Column("withdrawal_updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_invoices_recipient", "invoices", ["recipient"])
    op.create_index("ix_invoices_status", "invoices", ["status"])


def downgrade() -> None:
    op.drop_index("ix_invoices_status", table_name="invoices")
    op.drop_index("ix_invoices_recipient", table_name="invoices")
    op.drop_table("invoices")
