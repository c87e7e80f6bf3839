"""Strategy Recommendation: deterministic, additive scoring over project requirements.

Invariants:
    - recommend_strategy is PURE: same Requirements -> same Recommendation
    - Every rule that fires appends exactly one reason
    - native_enum is never recommended for SQLite (no native enum type)
    - Ties break check_constraint > native_enum > free_text

Design Decisions:
    - Scores are integers so the result is reproducible and easy to explain in reasons
"""

from dataclasses import dataclass, field

from app.core.domain_types import ChangeFrequency, EnumStrategy, SqlDialect
from app.core.strategy_catalog import supports_dialect


TIE_BREAK_ORDER: tuple[EnumStrategy, ...] = (
    EnumStrategy.CHECK_CONSTRAINT,
    EnumStrategy.NATIVE_ENUM,
    EnumStrategy.FREE_TEXT,
)

_FREE = EnumStrategy.FREE_TEXT
_CHECK = EnumStrategy.CHECK_CONSTRAINT
_NATIVE = EnumStrategy.NATIVE_ENUM


@dataclass(frozen=True)
class Requirements:
    """What the project needs from an enumerated column."""
    dialect: SqlDialect = SqlDialect.POSTGRESQL
    multi_dialect: bool = False
    change_frequency: ChangeFrequency = ChangeFrequency.OCCASIONAL
    shared_across_tables: bool = False
    needs_declaration_ordering: bool = False
    user_defined_values: bool = False
    external_writers: bool = False


@dataclass
class Recommendation:
    strategy: EnumStrategy
    scores: dict[EnumStrategy, int]
    reasons: list[str] = field(default_factory=list)
    excluded: list[EnumStrategy] = field(default_factory=list)


def _apply(
    scores: dict[EnumStrategy, int], reasons: list[str], reason: str,
    **deltas: int,
) -> None:
    for name, delta in deltas.items():
        strategy = EnumStrategy(name)
        if strategy in scores:
            scores[strategy] += delta
    reasons.append(reason)


def recommend_strategy(req: Requirements) -> Recommendation:
    """Score each strategy against req and pick the best available one."""
    dialect = SqlDialect(req.dialect)
    scores = {s: 0 for s in TIE_BREAK_ORDER}
    reasons: list[str] = []
    excluded: list[EnumStrategy] = []

    for strategy in TIE_BREAK_ORDER:
        if not supports_dialect(strategy, dialect):
            del scores[strategy]
            excluded.append(strategy)
            reasons.append(f"{strategy.value} is not available on {dialect.value}")

    _apply(
        scores, reasons,
        "check_constraint is the portable, database-enforced default",
        check_constraint=1,
    )

    if req.user_defined_values:
        _apply(
            scores, reasons,
            "values are defined at runtime, so any DDL per change is impractical",
            free_text=3, check_constraint=-2, native_enum=-3,
        )

    if req.external_writers:
        _apply(
            scores, reasons,
            "other clients write to the table directly, so the database must reject bad values",
            check_constraint=2, native_enum=2, free_text=-2,
        )

    frequency = ChangeFrequency(req.change_frequency)
    if frequency is ChangeFrequency.FREQUENT:
        _apply(
            scores, reasons,
            "values change frequently, favouring code-only or constraint-swap migrations",
            free_text=2, check_constraint=1, native_enum=-2,
        )
    elif frequency is ChangeFrequency.OCCASIONAL:
        _apply(
            scores, reasons,
            "values change occasionally; re-creating a CHECK is cheaper than rebuilding a type",
            check_constraint=1, native_enum=-1,
        )
    else:
        _apply(
            scores, reasons,
            "values are stable, so native enum migration cost rarely applies",
            native_enum=1,
        )

    if req.shared_across_tables and dialect is SqlDialect.POSTGRESQL:
        _apply(
            scores, reasons,
            "one PostgreSQL enum type can be reused by every table that needs it",
            native_enum=2,
        )

    if req.needs_declaration_ordering:
        _apply(
            scores, reasons,
            "native enums sort by declaration order instead of lexically",
            native_enum=2,
        )

    if req.multi_dialect:
        _apply(
            scores, reasons,
            "the schema must run on several databases; native enums differ per database",
            native_enum=-3,
        )

    best = max(
        scores,
        key=lambda s: (scores[s], -TIE_BREAK_ORDER.index(s)),
    )
    return Recommendation(
        strategy=best, scores=scores, reasons=reasons, excluded=excluded,
    )
