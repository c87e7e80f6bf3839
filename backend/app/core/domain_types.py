"""Domain Types: enums shared by the catalog, planner, ORM models and API schemas.

Invariants:
    - OrderStatus is the single source of truth for allowed status values
    - OrderStatus declaration order is the sort order of the native enum type
    - OrderId wraps UUID: the service layer never takes a bare UUID
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders and compare equal to their value
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

OrderId = NewType("OrderId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Order lifecycle states, stored three different ways."""
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class EnumStrategy(str, Enum):
    """The three ways of storing a bounded category value."""
    FREE_TEXT = "free_text"
    CHECK_CONSTRAINT = "check_constraint"
    NATIVE_ENUM = "native_enum"


class EnforcementLayer(str, Enum):
    """Where invalid values are rejected."""
    APPLICATION = "application"
    DATABASE_CONSTRAINT = "database_constraint"
    DATABASE_TYPE = "database_type"


class SqlDialect(str, Enum):
    """Target databases the planner and recommender know about."""
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class ChangeFrequency(str, Enum):
    """How often the allowed value set is expected to change."""
    RARE = "rare"
    OCCASIONAL = "occasional"
    FREQUENT = "frequent"


def allowed_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Ordered tuple of an Enum's values."""
    return tuple(member.value for member in enum_cls)
