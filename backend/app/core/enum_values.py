"""Enum Values: pure helpers for validating values and rendering constraint SQL.

Invariants:
    - normalize_value never returns a value outside the allowed set
    - SQL literals are single-quoted with embedded quotes doubled
    - Identifiers are never quoted; anything outside [A-Za-z_][A-Za-z0-9_]* is rejected
"""

import re
from typing import Sequence

from app.core.errors import InvalidEnumValueError, MigrationPlanError


MAX_IDENTIFIER_LENGTH: int = 63  # PostgreSQL NAMEDATALEN - 1
MAX_ENUM_LABEL_BYTES: int = 63
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_value_set(values: Sequence[str], label: str = "values") -> tuple[str, ...]:
    """Reject empty or duplicated value sets. Returns the values as a tuple."""
    if not values:
        raise MigrationPlanError(f"{label} must not be empty")
    seen: set[str] = set()
    for v in values:
        if v in seen:
            raise MigrationPlanError(f"{label} contains duplicate value '{v}'")
        seen.add(v)
    return tuple(values)


def is_allowed(value: str, allowed: Sequence[str]) -> bool:
    return value in allowed


def canonical_spelling(
    raw: str, allowed: Sequence[str], case_insensitive: bool = False,
) -> str | None:
    """Return the allowed spelling matching raw, or None."""
    candidate = raw.strip()
    if candidate in allowed:
        return candidate
    if case_insensitive:
        folded = candidate.casefold()
        for v in allowed:
            if v.casefold() == folded:
                return v
    return None


def normalize_value(
    raw: str, allowed: Sequence[str], case_insensitive: bool = False,
    field: str = "status",
) -> str:
    """Trim (and optionally case-fold) raw into an allowed value or raise."""
    match = canonical_spelling(raw, allowed, case_insensitive)
    if match is None:
        raise InvalidEnumValueError(raw, allowed, field=field)
    return match


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def check_identifier(name: str) -> str:
    """Validate a table/column/type/constraint name for SQL interpolation."""
    if (
        not name
        or len(name) > MAX_IDENTIFIER_LENGTH
        or not _IDENTIFIER_RE.match(name)
    ):
        raise MigrationPlanError(f"Invalid SQL identifier: {name!r}")
    return name


def check_enum_labels(values: Sequence[str]) -> tuple[str, ...]:
    """Reject labels PostgreSQL cannot store in an enum type (over 63 bytes in UTF-8)."""
    for v in values:
        if len(v.encode("utf-8")) > MAX_ENUM_LABEL_BYTES:
            raise MigrationPlanError(
                f"Enum label {v!r} is longer than {MAX_ENUM_LABEL_BYTES} bytes",
            )
    return tuple(values)


def constraint_name(table: str, column: str) -> str:
    """Naming convention for CHECK constraints: ck_<table>_<column>."""
    return check_identifier(f"ck_{table}_{column}")


def literal_list(values: Sequence[str]) -> str:
    return ", ".join(quote_literal(v) for v in values)


def check_constraint_sql(column: str, values: Sequence[str]) -> str:
    """Render the CHECK body, keeping the given value order."""
    check_identifier(column)
    check_value_set(values)
    return f"{column} IN ({literal_list(values)})"
