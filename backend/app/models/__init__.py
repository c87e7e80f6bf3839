"""ORM Models: one table per enum storage strategy.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORDER_MODELS has exactly one model per EnumStrategy

Design Decisions:
    - One file per entity; all imported here so Base.metadata is complete
      before create_all or Alembic autogenerate runs
"""

from app.core.domain_types import EnumStrategy
from app.models.free_text_order import FreeTextOrder
from app.models.checked_order import CheckedOrder
from app.models.native_order import NativeOrder

OrderModel = FreeTextOrder | CheckedOrder | NativeOrder

ORDER_MODELS: dict[EnumStrategy, type] = {
    EnumStrategy.FREE_TEXT: FreeTextOrder,
    EnumStrategy.CHECK_CONSTRAINT: CheckedOrder,
    EnumStrategy.NATIVE_ENUM: NativeOrder,
}
