"""Enum Values: validation and SQL rendering helpers.

Tests cover:
    - normalize_value trims, optionally case-folds, raises with allowed list
    - quote_literal doubles embedded quotes
    - check_identifier rejects anything that would need quoting
    - check_constraint_sql keeps value order
"""

import pytest

from app.core.domain_types import OrderStatus, allowed_values
from app.core.enum_values import (
    check_constraint_sql, check_enum_labels, check_identifier, check_value_set,
    constraint_name, is_allowed, normalize_value, quote_literal, canonical_spelling,
)
from app.core.errors import InvalidEnumValueError, MigrationPlanError

ALLOWED = allowed_values(OrderStatus)


# ─── normalize_value ─────────────────────────────────────────────

def test_normalize_value_trims_whitespace():
    assert normalize_value("  paid ", ALLOWED) == "paid"


def test_normalize_value_is_case_sensitive_by_default():
    with pytest.raises(InvalidEnumValueError) as exc_info:
        normalize_value("PAID", ALLOWED)
    assert exc_info.value.allowed == ALLOWED
    assert exc_info.value.value == "PAID"


def test_normalize_value_case_insensitive_returns_canonical_spelling():
    assert normalize_value("Shipped", ALLOWED, case_insensitive=True) == "shipped"


def test_normalize_value_error_names_the_field():
    with pytest.raises(InvalidEnumValueError) as exc_info:
        normalize_value("lost", ALLOWED, field="state")
    assert exc_info.value.context.field_name == "state"
    assert "lost" in exc_info.value.message


def test_canonical_spelling_returns_none_for_unknown():
    assert canonical_spelling("refunded", ALLOWED, case_insensitive=True) is None


def test_is_allowed():
    assert is_allowed("pending", ALLOWED)
    assert not is_allowed("Pending", ALLOWED)


# ─── SQL rendering ───────────────────────────────────────────────

def test_quote_literal_doubles_single_quotes():
    assert quote_literal("o'brien") == "'o''brien'"


def test_check_constraint_sql_keeps_order():
    assert check_constraint_sql("status", ["b", "a"]) == "status IN ('b', 'a')"


def test_check_constraint_sql_rejects_duplicates():
    with pytest.raises(MigrationPlanError):
        check_constraint_sql("status", ["a", "a"])


def test_constraint_name_convention():
    assert constraint_name("checked_orders", "status") == "ck_checked_orders_status"


@pytest.mark.parametrize("name", ["1orders", "orders-v2", "orders; DROP", "", "x" * 64])
def test_check_identifier_rejects_unsafe_names(name):
    with pytest.raises(MigrationPlanError):
        check_identifier(name)


def test_check_identifier_accepts_max_length():
    assert check_identifier("x" * 63) == "x" * 63


def test_check_value_set_rejects_empty():
    with pytest.raises(MigrationPlanError, match="must not be empty"):
        check_value_set([], "target values")


def test_check_enum_labels_accepts_up_to_63_bytes():
    assert check_enum_labels(["a" * 63]) == ("a" * 63,)


def test_check_enum_labels_rejects_longer_labels():
    with pytest.raises(MigrationPlanError, match="63 bytes"):
        check_enum_labels(["pending", "a" * 64])
