"""FreeTextOrder ORM: status stored as a plain string, validated only by the application.

Invariants:
    - The database accepts any string up to STATUS_LENGTH chars
    - Allowed values are enforced in schemas/ and OrderStore.create, nowhere else
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.order_columns import OrderColumns, STATUS_LENGTH


class FreeTextOrder(OrderColumns, Base):
    """Order whose status column has no database-level restriction."""
    __tablename__ = "free_text_orders"

    status: Mapped[str] = mapped_column(
        String(STATUS_LENGTH), nullable=False, index=True,
    )
