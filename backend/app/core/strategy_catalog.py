"""Strategy Catalog: the comparison of the three enum storage strategies as data.

Invariants:
    - Exactly one StrategyProfile per EnumStrategy
    - list_profiles() order is fixed: free_text, check_constraint, native_enum
    - compare_strategies() rows have one column per strategy, keyed by strategy value
"""

from dataclasses import dataclass, asdict

from app.core.domain_types import EnumStrategy, EnforcementLayer, SqlDialect


@dataclass(frozen=True)
class StrategyProfile:
    """Properties of one way of storing an enumerated column."""
    strategy: EnumStrategy
    title: str
    summary: str
    enforced_by: EnforcementLayer
    rejects_external_writes: bool
    add_value_cost: str
    remove_value_cost: str
    rename_value_cost: str
    supported_dialects: tuple[SqlDialect, ...]
    sort_semantics: str
    db_error: str | None
    pros: tuple[str, ...]
    cons: tuple[str, ...]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["strategy"] = self.strategy.value
        data["enforced_by"] = self.enforced_by.value
        data["supported_dialects"] = [d.value for d in self.supported_dialects]
        data["pros"] = list(self.pros)
        data["cons"] = list(self.cons)
        return data


_ALL_DIALECTS = (SqlDialect.POSTGRESQL, SqlDialect.MYSQL, SqlDialect.SQLITE)

_PROFILES: dict[EnumStrategy, StrategyProfile] = {
    EnumStrategy.FREE_TEXT: StrategyProfile(
        strategy=EnumStrategy.FREE_TEXT,
        title="Free-form string column",
        summary=(
            "Plain VARCHAR column. Allowed values live only in application code "
            "(Pydantic Literal or str Enum)."
        ),
        enforced_by=EnforcementLayer.APPLICATION,
        rejects_external_writes=False,
        add_value_cost="Code change only",
        remove_value_cost="Code change; existing rows keep the old value unless backfilled",
        rename_value_cost="Code change plus UPDATE backfill",
        supported_dialects=_ALL_DIALECTS,
        sort_semantics="lexical",
        db_error=None,
        pros=(
            "No migrations when values change",
            "Portable across every database",
            "Simple ORM mapping",
        ),
        cons=(
            "Scripts, ETL jobs and other services can write anything",
            "Invalid values surface only when read",
            "Schema does not document the allowed values",
        ),
    ),
    EnumStrategy.CHECK_CONSTRAINT: StrategyProfile(
        strategy=EnumStrategy.CHECK_CONSTRAINT,
        title="String column with CHECK constraint",
        summary=(
            "VARCHAR column plus CHECK (status IN (...)). The database rejects "
            "values outside the list regardless of who writes them."
        ),
        enforced_by=EnforcementLayer.DATABASE_CONSTRAINT,
        rejects_external_writes=True,
        add_value_cost="Drop and re-create the constraint in one migration",
        remove_value_cost="Backfill rows, then drop and re-create the constraint",
        rename_value_cost="Drop constraint, UPDATE rows, re-create constraint",
        supported_dialects=_ALL_DIALECTS,
        sort_semantics="lexical",
        db_error="check_violation (23514)",
        pros=(
            "Database-level guarantee",
            "Portable (PostgreSQL, MySQL 8.0.16+, SQLite)",
            "Changing values is an ordinary transactional migration",
        ),
        cons=(
            "Value list duplicated between code and migration",
            "SQLite needs a table rebuild to change the constraint",
        ),
    ),
    EnumStrategy.NATIVE_ENUM: StrategyProfile(
        strategy=EnumStrategy.NATIVE_ENUM,
        title="Native database enum type",
        summary=(
            "CREATE TYPE ... AS ENUM on PostgreSQL (column-level ENUM on MySQL). "
            "The type itself defines the allowed values."
        ),
        enforced_by=EnforcementLayer.DATABASE_TYPE,
        rejects_external_writes=True,
        add_value_cost="ALTER TYPE ... ADD VALUE, outside a transaction block",
        remove_value_cost="Rebuild the type and rewrite the column",
        rename_value_cost="ALTER TYPE ... RENAME VALUE (PostgreSQL 10+)",
        supported_dialects=(SqlDialect.POSTGRESQL, SqlDialect.MYSQL),
        sort_semantics="declaration",
        db_error="invalid_text_representation (22P02)",
        pros=(
            "Compact storage (4 bytes on PostgreSQL)",
            "Type reusable across tables",
            "Sorts by declaration order",
        ),
        cons=(
            "Removing a value requires rebuilding the type",
            "New values cannot be used in the transaction that adds them",
            "Not available on SQLite",
        ),
    ),
}

_ORDER = (
    EnumStrategy.FREE_TEXT,
    EnumStrategy.CHECK_CONSTRAINT,
    EnumStrategy.NATIVE_ENUM,
)

# (row label, profile attribute)
_COMPARISON_ROWS: tuple[tuple[str, str], ...] = (
    ("Enforced by", "enforced_by"),
    ("Rejects writes that bypass the app", "rejects_external_writes"),
    ("Adding a value", "add_value_cost"),
    ("Removing a value", "remove_value_cost"),
    ("Renaming a value", "rename_value_cost"),
    ("Supported databases", "supported_dialects"),
    ("Sort order", "sort_semantics"),
    ("Database error on violation", "db_error"),
)


def get_profile(strategy: EnumStrategy) -> StrategyProfile:
    return _PROFILES[EnumStrategy(strategy)]


def list_profiles() -> list[StrategyProfile]:
    return [_PROFILES[s] for s in _ORDER]


def supports_dialect(strategy: EnumStrategy, dialect: SqlDialect) -> bool:
    return SqlDialect(dialect) in get_profile(strategy).supported_dialects


def _cell(value) -> str | bool | None:
    if isinstance(value, tuple):
        return ", ".join(v.value for v in value)
    if isinstance(value, EnforcementLayer):
        return value.value
    return value


def compare_strategies() -> list[dict]:
    """Comparison table: one row per property, one column per strategy."""
    rows = []
    for label, attr in _COMPARISON_ROWS:
        row: dict = {"property": label}
        for strategy in _ORDER:
            row[strategy.value] = _cell(getattr(_PROFILES[strategy], attr))
        rows.append(row)
    return rows
