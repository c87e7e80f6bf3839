"""NativeOrder ORM: status stored as a native database enum type.

Invariants:
    - PostgreSQL column type is `order_status` (CREATE TYPE ... AS ENUM)
    - Stored labels are OrderStatus values, not member names
    - Backends without native enums get VARCHAR + CHECK (create_constraint=True)

Design Decisions:
    - Unknown strings are passed through to the database (validate_strings=False)
      so the rejection comes from the type itself, the way a raw INSERT would see it
"""

from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import OrderStatus
from app.db.base import Base
from app.models.order_columns import OrderColumns

ORDER_STATUS_TYPE = "order_status"

order_status_enum = SAEnum(
    OrderStatus,
    name=ORDER_STATUS_TYPE,
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
    native_enum=True,
    create_constraint=True,
    validate_strings=False,
)


class NativeOrder(OrderColumns, Base):
    """Order whose status column has a database enum type."""
    __tablename__ = "native_orders"

    status: Mapped[OrderStatus] = mapped_column(
        order_status_enum, nullable=False, index=True,
    )
