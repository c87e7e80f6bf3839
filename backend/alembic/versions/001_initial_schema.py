"""Initial schema: one orders table per enum storage strategy.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

free_text_orders.status is a bare VARCHAR, checked_orders.status carries
ck_checked_orders_status, native_orders.status uses the order_status type.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUSES = ("pending", "paid", "shipped", "delivered", "cancelled")

order_status = sa.Enum(*ORDER_STATUSES, name="order_status", create_constraint=True)


def _order_columns() -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("reference", sa.String(64), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "free_text_orders",
        *_order_columns(),
        sa.Column("status", sa.String(32), nullable=False),
    )
    op.create_index("ix_free_text_orders_status", "free_text_orders", ["status"])

    op.create_table(
        "checked_orders",
        *_order_columns(),
        sa.Column("status", sa.String(32), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'paid', 'shipped', 'delivered', 'cancelled')",
            name="ck_checked_orders_status",
        ),
    )
    op.create_index("ix_checked_orders_status", "checked_orders", ["status"])

    # create_table emits CREATE TYPE order_status on PostgreSQL
    op.create_table(
        "native_orders",
        *_order_columns(),
        sa.Column("status", order_status, nullable=False),
    )
    op.create_index("ix_native_orders_status", "native_orders", ["status"])


def downgrade() -> None:
    op.drop_index("ix_native_orders_status", table_name="native_orders")
    op.drop_table("native_orders")
    order_status.drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_checked_orders_status", table_name="checked_orders")
    op.drop_table("checked_orders")
    op.drop_index("ix_free_text_orders_status", table_name="free_text_orders")
    op.drop_table("free_text_orders")
