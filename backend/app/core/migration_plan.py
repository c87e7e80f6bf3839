"""Migration Planning: what it takes to change an enum's value set under each strategy.

Invariants:
    - plan_value_change is PURE: it renders SQL text, it never touches a database
    - Steps are ordered so that every intermediate state satisfies the schema
    - check_constraint and native_enum plans require a replacement for every removed value
    - Non-transactional steps (ALTER TYPE ... ADD VALUE) are flagged, never silently batched

Design Decisions:
    - Renames and replacements both become UPDATEs for string columns, and a CASE
      expression in the USING clause when a PostgreSQL type is rebuilt
    - render_alembic_upgrade wraps non-transactional steps in autocommit_block(),
      which is how Alembic runs ALTER TYPE ... ADD VALUE
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from app.core.domain_types import EnumStrategy, SqlDialect
from app.core.enum_values import (
    check_enum_labels, check_identifier, check_value_set, constraint_name,
    check_constraint_sql, literal_list, quote_literal,
)
from app.core.errors import MigrationPlanError, UnsupportedMigrationError


class StepKind(str, Enum):
    DDL = "ddl"
    DATA = "data"


@dataclass(frozen=True)
class MigrationStep:
    """One SQL statement of a migration."""
    kind: StepKind
    sql: str
    description: str
    transactional: bool = True
    rewrites_table: bool = False

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "sql": self.sql,
            "description": self.description,
            "transactional": self.transactional,
            "rewrites_table": self.rewrites_table,
        }


@dataclass(frozen=True)
class ValueDiff:
    """Difference between the current and the target value set."""
    added: tuple[str, ...]
    removed: tuple[str, ...]
    renamed: dict[str, str]
    replacements: dict[str, str]
    reordered: bool

    @property
    def value_mapping(self) -> dict[str, str]:
        """old value -> new value for every row that must change."""
        return {**self.renamed, **self.replacements}

    @property
    def unchanged(self) -> bool:
        return not (self.added or self.removed or self.renamed)


@dataclass
class MigrationPlan:
    strategy: EnumStrategy
    dialect: SqlDialect
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    renamed: dict[str, str] = field(default_factory=dict)
    steps: list[MigrationStep] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.steps and not self.warnings

    @property
    def transactional(self) -> bool:
        return all(step.transactional for step in self.steps)

    @property
    def rewrites_table(self) -> bool:
        return any(step.rewrites_table for step in self.steps)

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy.value,
            "dialect": self.dialect.value,
            "added": list(self.added),
            "removed": list(self.removed),
            "renamed": dict(self.renamed),
            "steps": [step.to_dict() for step in self.steps],
            "warnings": list(self.warnings),
            "is_noop": self.is_noop,
            "transactional": self.transactional,
            "rewrites_table": self.rewrites_table,
        }


# ─── Diff ───────────────────────────────────────────────────────

def diff_values(
    current: Sequence[str],
    target: Sequence[str],
    renames: Mapping[str, str] | None = None,
    replacements: Mapping[str, str] | None = None,
) -> ValueDiff:
    """Classify every value as added, removed, renamed or kept."""
    current = check_value_set(current, "current values")
    target = check_value_set(target, "target values")
    renames = dict(renames or {})
    replacements = dict(replacements or {})

    for old, new in renames.items():
        if old not in current:
            raise MigrationPlanError(f"Rename source '{old}' is not a current value")
        if new not in target:
            raise MigrationPlanError(f"Rename target '{new}' is not a target value")
        if old in target:
            raise MigrationPlanError(
                f"Rename source '{old}' is still present in the target values",
            )
        if new in current:
            raise MigrationPlanError(
                f"Rename target '{new}' already exists; map '{old}' with a replacement instead",
            )
    if len(set(renames.values())) != len(renames):
        raise MigrationPlanError("Two values cannot be renamed to the same target")

    removed = tuple(v for v in current if v not in target and v not in renames)
    added = tuple(
        v for v in target if v not in current and v not in renames.values()
    )

    for old, new in replacements.items():
        if old not in removed:
            raise MigrationPlanError(f"Replacement key '{old}' is not a removed value")
        if new not in target:
            raise MigrationPlanError(
                f"Replacement for '{old}' must be a target value, got '{new}'",
            )

    kept = [renames.get(v, v) for v in current if v in target or v in renames]
    reordered = kept != [v for v in target if v in kept]

    return ValueDiff(
        added=added, removed=removed, renamed=renames,
        replacements=replacements, reordered=reordered,
    )


# ─── Shared step builders ───────────────────────────────────────

def _update_steps(table: str, column: str, diff: ValueDiff) -> list[MigrationStep]:
    steps = []
    for old, new in diff.renamed.items():
        steps.append(MigrationStep(
            StepKind.DATA,
            f"UPDATE {table} SET {column} = {quote_literal(new)} "
            f"WHERE {column} = {quote_literal(old)}",
            f"Rename '{old}' to '{new}' in existing rows",
        ))
    for old, new in diff.replacements.items():
        steps.append(MigrationStep(
            StepKind.DATA,
            f"UPDATE {table} SET {column} = {quote_literal(new)} "
            f"WHERE {column} = {quote_literal(old)}",
            f"Replace removed value '{old}' with '{new}'",
        ))
    return steps


def _require_replacements(diff: ValueDiff, strategy: EnumStrategy) -> None:
    missing = [v for v in diff.removed if v not in diff.replacements]
    if missing:
        raise MigrationPlanError(
            f"{strategy.value} rejects rows holding removed values; "
            f"provide replacements for: {', '.join(missing)}",
        )


# ─── Free text ──────────────────────────────────────────────────

def _plan_free_text(plan: MigrationPlan, table: str, column: str, diff: ValueDiff) -> None:
    plan.steps.extend(_update_steps(table, column, diff))
    for value in diff.removed:
        if value not in diff.replacements:
            plan.warnings.append(
                f"Rows holding '{value}' keep it; only application validation "
                f"stops new writes",
            )


# ─── CHECK constraint ───────────────────────────────────────────

def _plan_check_constraint(
    plan: MigrationPlan, table: str, column: str, target: Sequence[str],
    diff: ValueDiff, constraint: str, online: bool,
) -> None:
    if plan.dialect is SqlDialect.SQLITE:
        raise UnsupportedMigrationError(
            plan.strategy.value, plan.dialect.value,
            "SQLite cannot alter a CHECK constraint in place; rebuild the table "
            "with Alembic batch_alter_table",
        )
    if diff.unchanged:
        return
    _require_replacements(diff, plan.strategy)

    if plan.dialect is SqlDialect.MYSQL:
        drop_sql = f"ALTER TABLE {table} DROP CHECK {constraint}"
    else:
        drop_sql = f"ALTER TABLE {table} DROP CONSTRAINT {constraint}"
    plan.steps.append(MigrationStep(
        StepKind.DDL, drop_sql, f"Drop {constraint}",
    ))
    plan.steps.extend(_update_steps(table, column, diff))

    add_sql = (
        f"ALTER TABLE {table} ADD CONSTRAINT {constraint} "
        f"CHECK ({check_constraint_sql(column, target)})"
    )
    if online and plan.dialect is SqlDialect.POSTGRESQL:
        plan.steps.append(MigrationStep(
            StepKind.DDL, add_sql + " NOT VALID",
            f"Re-create {constraint} without scanning existing rows",
        ))
        plan.steps.append(MigrationStep(
            StepKind.DDL,
            f"ALTER TABLE {table} VALIDATE CONSTRAINT {constraint}",
            f"Validate {constraint} against existing rows",
        ))
    else:
        if online:
            plan.warnings.append(
                f"online has no effect on {plan.dialect.value}; "
                f"the constraint is validated when added",
            )
        plan.steps.append(MigrationStep(
            StepKind.DDL, add_sql, f"Re-create {constraint} with the target values",
        ))


# ─── Native enum ────────────────────────────────────────────────

def _using_expression(column: str, type_name: str, diff: ValueDiff) -> str:
    mapping = diff.value_mapping
    if not mapping:
        return f"{column}::text::{type_name}"
    whens = " ".join(
        f"WHEN {quote_literal(old)} THEN {quote_literal(new)}"
        for old, new in mapping.items()
    )
    return f"(CASE {column}::text {whens} ELSE {column}::text END)::{type_name}"


def _plan_postgres_rebuild(
    plan: MigrationPlan, table: str, column: str, target: Sequence[str],
    diff: ValueDiff, type_name: str,
) -> None:
    old_type = check_identifier(f"{type_name}_old")
    plan.steps.extend([
        MigrationStep(
            StepKind.DDL, f"ALTER TYPE {type_name} RENAME TO {old_type}",
            f"Move the current type aside as {old_type}",
        ),
        MigrationStep(
            StepKind.DDL,
            f"CREATE TYPE {type_name} AS ENUM ({literal_list(target)})",
            f"Create {type_name} with the target values",
        ),
        MigrationStep(
            StepKind.DDL,
            f"ALTER TABLE {table} ALTER COLUMN {column} TYPE {type_name} "
            f"USING {_using_expression(column, type_name, diff)}",
            f"Convert {table}.{column} to the new type",
            rewrites_table=True,
        ),
        MigrationStep(
            StepKind.DDL, f"DROP TYPE {old_type}", f"Drop {old_type}",
        ),
    ])
    plan.warnings.append(
        f"Column defaults and other columns using {type_name} must be "
        f"converted before {old_type} can be dropped",
    )


def _plan_postgres_in_place(
    plan: MigrationPlan, target: Sequence[str], diff: ValueDiff, type_name: str,
) -> None:
    for old, new in diff.renamed.items():
        plan.steps.append(MigrationStep(
            StepKind.DDL,
            f"ALTER TYPE {type_name} RENAME VALUE {quote_literal(old)} "
            f"TO {quote_literal(new)}",
            f"Rename '{old}' to '{new}' (PostgreSQL 10+)",
        ))
    for value in diff.added:
        index = target.index(value)
        if index > 0:
            position = f"AFTER {quote_literal(target[index - 1])}"
        else:
            anchor = next(v for v in target[1:] if v not in diff.added)
            position = f"BEFORE {quote_literal(anchor)}"
        plan.steps.append(MigrationStep(
            StepKind.DDL,
            f"ALTER TYPE {type_name} ADD VALUE IF NOT EXISTS "
            f"{quote_literal(value)} {position}",
            f"Add '{value}'",
            transactional=False,
        ))
    if diff.added:
        plan.warnings.append(
            "Added values cannot be used until the statement that adds them has committed",
        )


def _plan_mysql_enum(
    plan: MigrationPlan, table: str, column: str, current: Sequence[str],
    target: Sequence[str], diff: ValueDiff,
) -> None:
    updates = _update_steps(table, column, diff)
    if updates:
        union = list(current) + [v for v in target if v not in current]
        plan.steps.append(MigrationStep(
            StepKind.DDL,
            f"ALTER TABLE {table} MODIFY COLUMN {column} ENUM({literal_list(union)}) NOT NULL",
            "Widen the column to hold both old and new values",
            rewrites_table=True,
        ))
        plan.steps.extend(updates)
    plan.steps.append(MigrationStep(
        StepKind.DDL,
        f"ALTER TABLE {table} MODIFY COLUMN {column} ENUM({literal_list(target)}) NOT NULL",
        "Narrow the column to the target values",
        rewrites_table=True,
    ))


def _plan_native_enum(
    plan: MigrationPlan, table: str, column: str, current: Sequence[str],
    target: Sequence[str], diff: ValueDiff, type_name: str | None,
) -> None:
    if plan.dialect is SqlDialect.SQLITE:
        raise UnsupportedMigrationError(
            plan.strategy.value, plan.dialect.value,
            "SQLite has no native enum type",
        )
    if diff.unchanged and not diff.reordered:
        return
    _require_replacements(diff, plan.strategy)

    if plan.dialect is SqlDialect.MYSQL:
        _plan_mysql_enum(plan, table, column, current, target, diff)
        return

    if not type_name:
        raise MigrationPlanError("type_name is required for native_enum on postgresql")
    check_identifier(type_name)
    check_enum_labels(target)
    if diff.removed or diff.reordered:
        _plan_postgres_rebuild(plan, table, column, target, diff, type_name)
    else:
        _plan_postgres_in_place(plan, target, diff, type_name)


# ─── Entry points ───────────────────────────────────────────────

def plan_value_change(
    strategy: EnumStrategy,
    dialect: SqlDialect,
    table: str,
    column: str,
    current: Sequence[str],
    target: Sequence[str],
    renames: Mapping[str, str] | None = None,
    replacements: Mapping[str, str] | None = None,
    type_name: str | None = None,
    constraint: str | None = None,
    online: bool = False,
) -> MigrationPlan:
    """Plan the SQL needed to move a column from current to target values."""
    strategy = EnumStrategy(strategy)
    dialect = SqlDialect(dialect)
    check_identifier(table)
    check_identifier(column)
    diff = diff_values(current, target, renames, replacements)

    plan = MigrationPlan(
        strategy=strategy, dialect=dialect,
        added=list(diff.added), removed=list(diff.removed),
        renamed=dict(diff.renamed),
    )
    if strategy is EnumStrategy.FREE_TEXT:
        _plan_free_text(plan, table, column, diff)
    elif strategy is EnumStrategy.CHECK_CONSTRAINT:
        name = check_identifier(constraint) if constraint else constraint_name(table, column)
        _plan_check_constraint(
            plan, table, column, tuple(target), diff, name, online,
        )
    else:
        _plan_native_enum(
            plan, table, column, tuple(current), tuple(target), diff, type_name,
        )
    return plan


def render_alembic_upgrade(plan: MigrationPlan, indent: str = "    ") -> str:
    """Render the body of an Alembic upgrade() for plan."""
    if not plan.steps:
        return f"{indent}pass"
    lines: list[str] = []
    for transactional, group in itertools.groupby(
        plan.steps, key=lambda step: step.transactional,
    ):
        if transactional:
            for step in group:
                lines.append(f"{indent}# {step.description}")
                lines.append(f"{indent}op.execute({step.sql!r})")
        else:
            lines.append(f"{indent}with op.get_context().autocommit_block():")
            for step in group:
                lines.append(f"{indent * 2}# {step.description}")
                lines.append(f"{indent * 2}op.execute({step.sql!r})")
    return "\n".join(lines)
