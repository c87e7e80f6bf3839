"""Order Routes: the same order API over three differently-typed status columns.

Invariants:
    - {strategy} path segment selects the table; unknown strategies fail request validation
    - Typed endpoints (create, list filter, update) reject unknown statuses before the DB
    - /import bypasses application validation so the schema's own enforcement is visible
    - Routes never contain business logic (delegate to OrderStore)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import EnumStrategy, OrderId, OrderStatus
from app.infrastructure.database import get_db
from app.schemas.order import (
    ImportResponse, OrderCreate, OrderResponse, OrderStatusUpdate, RawOrderImport,
)
from app.services.order_store import OrderStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post(
    "/{strategy}", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    strategy: EnumStrategy, body: OrderCreate,
    db: AsyncSession = Depends(get_db),
):
    order = await OrderStore(db, strategy).create(body.reference, body.status)
    return OrderResponse.model_validate(order)


@router.get("/{strategy}")
async def list_orders(
    strategy: EnumStrategy,
    status_filter: OrderStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List orders, optionally filtered by a valid status."""
    orders = await OrderStore(db, strategy).list_orders(
        status=status_filter.value if status_filter else None,
        limit=limit, offset=offset,
    )
    return {
        "strategy": strategy.value,
        "orders": [
            OrderResponse.model_validate(o).model_dump(mode="json")
            for o in orders
        ],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{strategy}/drift")
async def audit_drift(
    strategy: EnumStrategy, db: AsyncSession = Depends(get_db),
):
    """Report stored statuses outside OrderStatus."""
    report = await OrderStore(db, strategy).audit_drift()
    return {"strategy": strategy.value, **report.to_dict()}


@router.post(
    "/{strategy}/import", response_model=ImportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def import_orders(
    strategy: EnumStrategy,
    body: RawOrderImport,
    normalize: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Bulk write without application validation (legacy loaders, other services)."""
    imported = await OrderStore(db, strategy).import_raw(
        body.rows, normalize=normalize,
    )
    return ImportResponse(strategy=strategy, imported=imported)


@router.get("/{strategy}/{order_id}", response_model=OrderResponse)
async def get_order(
    strategy: EnumStrategy, order_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    order = await OrderStore(db, strategy).get(OrderId(order_id))
    return OrderResponse.model_validate(order)


@router.patch("/{strategy}/{order_id}", response_model=OrderResponse)
async def update_order_status(
    strategy: EnumStrategy, order_id: UUID, body: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    order = await OrderStore(db, strategy).update_status(
        OrderId(order_id), body.status,
    )
    return OrderResponse.model_validate(order)


@router.delete("/{strategy}/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    strategy: EnumStrategy, order_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    await OrderStore(db, strategy).delete(OrderId(order_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
