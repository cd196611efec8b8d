"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # quotations
    op.create_table(
        "quotations",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("quotation_number", sa.String(), nullable=False, unique=True),
        sa.Column("date", sa.String(), nullable=False),
        sa.Column("company_info", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("client_name", sa.Text(), nullable=False),
        sa.Column("client_address", sa.Text(), nullable=True),
        sa.Column("client_phone", sa.Text(), nullable=True),
        sa.Column("client_email", sa.Text(), nullable=True),
        sa.Column("subtotal", sa.Numeric(), nullable=False),
        sa.Column("grand_total", sa.Numeric(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_quotations_created_at", "quotations", ["created_at"])

    # quotation_items
    op.create_table(
        "quotation_items",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "quotation_id",
            sa.BigInteger(),
            sa.ForeignKey("quotations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Numeric(), nullable=False),
        sa.Column("price", sa.Numeric(), nullable=False),
        sa.Column("total", sa.Numeric(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("quotation_items")
    op.drop_index("ix_quotations_created_at", table_name="quotations")
    op.drop_table("quotations")
