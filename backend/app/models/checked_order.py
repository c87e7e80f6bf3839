"""CheckedOrder ORM: status stored as a string guarded by a CHECK constraint.

Invariants:
    - ck_checked_orders_status lists exactly the OrderStatus values
    - Violations raise IntegrityError (SQLSTATE 23514 on PostgreSQL)
"""

from sqlalchemy import String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import OrderStatus, allowed_values
from app.core.enum_values import check_constraint_sql, constraint_name
from app.db.base import Base
from app.models.order_columns import OrderColumns, STATUS_LENGTH


class CheckedOrder(OrderColumns, Base):
    """Order whose status column is restricted by CHECK (status IN (...))."""
    __tablename__ = "checked_orders"
    __table_args__ = (
        CheckConstraint(
            check_constraint_sql("status", allowed_values(OrderStatus)),
            name=constraint_name("checked_orders", "status"),
        ),
    )

    status: Mapped[str] = mapped_column(
        String(STATUS_LENGTH), nullable=False, index=True,
    )
