"""Order Schemas: Pydantic models for the order endpoints.

Invariants:
    - OrderCreate.status and OrderStatusUpdate.status only accept OrderStatus values
    - RawOrderRow.status accepts any string: it models writers that bypass the app
    - References are stripped on every input schema, raw rows included
    - OrderResponse.status is a plain string so drifted free-text rows still serialize
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import EnumStrategy, OrderStatus
from app.models.order_columns import STATUS_LENGTH


def _strip_reference(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("reference cannot be empty or whitespace")
    return v


class OrderCreate(BaseModel):
    """Order creation: status validated against OrderStatus."""
    reference: str = Field(min_length=1, max_length=64)
    status: OrderStatus = OrderStatus.PENDING

    @field_validator("reference")
    @classmethod
    def strip_reference(cls, v: str) -> str:
        return _strip_reference(v)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class RawOrderRow(BaseModel):
    """One unvalidated row, as a legacy loader or another service would send it."""
    reference: str = Field(min_length=1, max_length=64)
    status: str = Field(max_length=STATUS_LENGTH)

    @field_validator("reference")
    @classmethod
    def strip_reference(cls, v: str) -> str:
        return _strip_reference(v)


class RawOrderImport(BaseModel):
    rows: list[RawOrderRow] = Field(min_length=1, max_length=1000)


class OrderResponse(BaseModel):
    """Public-facing order data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reference: str
    status: str
    created_at: datetime

    @field_validator("status", mode="before")
    @classmethod
    def unwrap_enum(cls, v):
        return v.value if isinstance(v, Enum) else v


class ImportResponse(BaseModel):
    strategy: EnumStrategy
    imported: int
