"""Strategy Routes: catalog, comparison table, recommendation and migration planning.

Invariants:
    - No route touches the database; everything here delegates to pure core/ functions
    - Migration plans are rendered, never executed
"""

import logging

from fastapi import APIRouter

from app.config import get_settings
from app.core.domain_types import EnumStrategy, OrderStatus, allowed_values
from app.core.migration_plan import plan_value_change, render_alembic_upgrade
from app.core.recommend import recommend_strategy
from app.core.strategy_catalog import compare_strategies, get_profile, list_profiles
from app.models import ORDER_MODELS
from app.schemas.strategy import (
    MigrationPlanRequest, RecommendationRequest, RecommendationResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/strategies", tags=["strategies"])


@router.get("")
async def list_strategies():
    """All strategy profiles, in catalog order."""
    return {"strategies": [p.to_dict() for p in list_profiles()]}


@router.get("/compare")
async def compare():
    """Property-by-strategy comparison table."""
    return {
        "columns": [s.value for s in EnumStrategy],
        "rows": compare_strategies(),
    }


@router.get("/{strategy}")
async def get_strategy(strategy: EnumStrategy):
    return get_profile(strategy).to_dict()


@router.post("/recommend", response_model=RecommendationResponse)
async def recommend(body: RecommendationRequest):
    """Recommend a strategy for the given requirements."""
    result = recommend_strategy(body.to_requirements())
    logger.info(
        f"Recommended {result.strategy.value}",
        extra={"strategy": result.strategy.value},
    )
    return RecommendationResponse(
        strategy=result.strategy.value,
        scores={s.value: score for s, score in result.scores.items()},
        reasons=result.reasons,
        excluded=[s.value for s in result.excluded],
    )


@router.post("/{strategy}/migration-plan")
async def migration_plan(strategy: EnumStrategy, body: MigrationPlanRequest):
    """Plan the SQL for changing the allowed values of an enum column."""
    settings = get_settings()
    table = body.table or ORDER_MODELS[strategy].__tablename__
    plan = plan_value_change(
        strategy=strategy,
        dialect=body.dialect,
        table=table,
        column=body.column,
        current=body.current or list(allowed_values(OrderStatus)),
        target=body.target,
        renames=body.renames,
        replacements=body.replacements,
        type_name=body.type_name or settings.native_enum_type_name,
        constraint=body.constraint,
        online=body.online,
    )
    logger.info(
        f"Planned {len(plan.steps)} step(s) for {table}",
        extra={"strategy": strategy.value, "table": table},
    )
    return {**plan.to_dict(), "alembic_upgrade": render_alembic_upgrade(plan)}
