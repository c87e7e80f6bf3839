"""Domain Types: enum members and ordering.

Tests:
    - OrderStatus declaration order is the lifecycle order
    - EnumStrategy has exactly the three strategies
    - str Enums compare equal to their values
"""

from uuid import uuid4

from app.core.domain_types import (
    EnumStrategy, OrderId, OrderStatus, SqlDialect, allowed_values,
)


def test_order_id_wraps_uuid():
    uid = uuid4()
    assert OrderId(uid) == uid


def test_order_status_values_in_declaration_order():
    assert allowed_values(OrderStatus) == (
        "pending", "paid", "shipped", "delivered", "cancelled",
    )


def test_enum_strategy_has_three_members():
    assert [s.value for s in EnumStrategy] == [
        "free_text", "check_constraint", "native_enum",
    ]


def test_str_enums_compare_equal_to_value():
    assert OrderStatus.PAID == "paid"
    assert SqlDialect("sqlite") is SqlDialect.SQLITE
