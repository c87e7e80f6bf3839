"""Strategy Schemas: request models for recommendation and migration planning.

Invariants:
    - Enum-typed fields reject unknown dialects/frequencies at the boundary
    - Identifiers are re-checked by core/enum_values before any SQL is rendered
"""

from pydantic import BaseModel, Field, model_validator

from app.core.domain_types import ChangeFrequency, SqlDialect
from app.core.recommend import Requirements

_IDENTIFIER = r"^[A-Za-z_][A-Za-z0-9_]*$"


class RecommendationRequest(BaseModel):
    """Project requirements for an enumerated column."""
    dialect: SqlDialect = SqlDialect.POSTGRESQL
    multi_dialect: bool = False
    change_frequency: ChangeFrequency = ChangeFrequency.OCCASIONAL
    shared_across_tables: bool = False
    needs_declaration_ordering: bool = False
    user_defined_values: bool = False
    external_writers: bool = False

    def to_requirements(self) -> Requirements:
        return Requirements(**self.model_dump())


class RecommendationResponse(BaseModel):
    strategy: str
    scores: dict[str, int]
    reasons: list[str]
    excluded: list[str]


class MigrationPlanRequest(BaseModel):
    """Value-set change to plan. current defaults to the OrderStatus values."""
    dialect: SqlDialect = SqlDialect.POSTGRESQL
    table: str | None = Field(None, pattern=_IDENTIFIER, max_length=63)
    column: str = Field("status", pattern=_IDENTIFIER, max_length=63)
    current: list[str] | None = None
    target: list[str] = Field(min_length=1)
    renames: dict[str, str] = Field(default_factory=dict)
    replacements: dict[str, str] = Field(default_factory=dict)
    type_name: str | None = Field(None, pattern=_IDENTIFIER, max_length=63)
    constraint: str | None = Field(None, pattern=_IDENTIFIER, max_length=63)
    online: bool = False

    @model_validator(mode="after")
    def check_current_not_empty(self):
        if self.current is not None and not self.current:
            raise ValueError("current must not be empty when provided")
        return self
