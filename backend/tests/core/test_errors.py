"""Error Hierarchy: codes, statuses and the REST envelope."""

from app.core.errors import (
    ConstraintViolationError, DatabaseError, DuplicateReferenceError,
    EnumForgeError, ErrorCategory, InvalidEnumValueError, MigrationPlanError,
    ResourceNotFoundError, UnsupportedMigrationError,
)


def test_invalid_enum_value_response_lists_allowed_values():
    err = InvalidEnumValueError("lost", ["pending", "paid"])
    body = err.to_response()["error"]
    assert err.http_status == 422
    assert body["code"] == "INVALID_ENUM_VALUE"
    assert body["category"] == "validation"
    assert body["context"]["allowed_values"] == ["pending", "paid"]
    assert body["context"]["field"] == "status"


def test_constraint_violation_carries_table_and_strategy():
    err = ConstraintViolationError("checked_orders", "check_constraint")
    ctx = err.to_response()["error"]["context"]
    assert err.http_status == 422
    assert ctx["table"] == "checked_orders"
    assert ctx["strategy"] == "check_constraint"


def test_status_codes():
    assert ResourceNotFoundError("Order", "x").http_status == 404
    assert DuplicateReferenceError("A-1", "free_text_orders").http_status == 409
    assert MigrationPlanError("bad").http_status == 400
    assert UnsupportedMigrationError("native_enum", "sqlite", "no").http_status == 400
    assert DatabaseError("down", "execute").http_status == 503


def test_all_errors_share_the_base_class():
    err = UnsupportedMigrationError("native_enum", "sqlite", "no native type")
    assert isinstance(err, EnumForgeError)
    assert err.category is ErrorCategory.BUSINESS_RULE
    assert "sqlite" in err.message
