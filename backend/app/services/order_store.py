"""Order Store: CRUD over the three order tables, one strategy per instance.

Invariants:
    - create() and update_status() validate against OrderStatus before touching the DB
    - import_raw() never validates status: whatever the table's schema allows is stored
    - A rejected write rolls back the whole unit of work and raises ConstraintViolationError
    - Duplicate references raise DuplicateReferenceError, whether caught by the
      pre-check or by the UNIQUE constraint at commit

Design Decisions:
    - One class parameterized by EnumStrategy instead of three repositories:
      the tables differ only in how `status` is typed
    - Commit failures are classified by SQLSTATE when the driver reports one:
      23505 is a duplicate reference (a writer raced the pre-check), 23514 and
      22P02 are enum rejections (CHECK, invalid enum literal). Anything else
      propagates to the session manager
    - SQLite reports no SQLSTATE: "UNIQUE constraint failed" is a duplicate,
      any other IntegrityError is an enum rejection
"""

import logging
from enum import Enum
from typing import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import EnumStrategy, OrderId, OrderStatus, allowed_values
from app.core.drift import DriftReport, find_drift
from app.core.enum_values import canonical_spelling, normalize_value
from app.core.errors import (
    ConstraintViolationError, DuplicateReferenceError, ResourceNotFoundError,
)
from app.models import ORDER_MODELS, OrderModel
from app.schemas.order import RawOrderRow

logger = logging.getLogger(__name__)

ALLOWED_STATUSES: tuple[str, ...] = allowed_values(OrderStatus)

UNIQUE_VIOLATION = "23505"
ENUM_REJECTION_STATES = frozenset({"23514", "22P02"})


def _status_text(value) -> str:
    return value.value if isinstance(value, Enum) else value


def _sqlstate(error: DBAPIError) -> str | None:
    # asyncpg's adapted errors carry sqlstate, psycopg carries pgcode
    orig = error.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(error: DBAPIError) -> bool:
    state = _sqlstate(error)
    if state is not None:
        return state == UNIQUE_VIOLATION
    message = str(error.orig)
    return "UNIQUE constraint failed" in message or "Duplicate entry" in message


def is_enum_rejection(error: DBAPIError) -> bool:
    state = _sqlstate(error)
    if state is not None:
        return state in ENUM_REJECTION_STATES
    return isinstance(error, (IntegrityError, DataError))


class OrderStore:
    """Order persistence for a single enum storage strategy."""

    def __init__(self, db: AsyncSession, strategy: EnumStrategy):
        self.db = db
        self.strategy = EnumStrategy(strategy)
        self.model = ORDER_MODELS[self.strategy]

    @property
    def table(self) -> str:
        return self.model.__tablename__

    def _log_extra(self, **extra) -> dict:
        return {"strategy": self.strategy.value, "table": self.table, **extra}

    async def _commit(self, references: Sequence[str] = ()) -> None:
        """Commit, translating duplicate references and enum rejections."""
        try:
            await self.db.commit()
        except DBAPIError as e:
            await self.db.rollback()
            if is_unique_violation(e):
                reference = ", ".join(references) or "unknown"
                logger.warning(
                    f"Duplicate reference in {self.table}: {e.orig}",
                    extra=self._log_extra(error_code="DUPLICATE_REFERENCE"),
                )
                raise DuplicateReferenceError(reference, self.table) from e
            if not is_enum_rejection(e):
                raise
            logger.warning(
                f"Database rejected status written to {self.table}: {e.orig}",
                extra=self._log_extra(error_code="ENUM_CONSTRAINT_VIOLATION"),
            )
            raise ConstraintViolationError(self.table, self.strategy.value) from e

    async def _check_references(self, references: Iterable[str]) -> None:
        refs = list(references)
        seen: set[str] = set()
        for ref in refs:
            if ref in seen:
                raise DuplicateReferenceError(ref, self.table)
            seen.add(ref)
        result = await self.db.execute(
            select(self.model.reference).where(self.model.reference.in_(refs)),
        )
        existing = result.scalars().first()
        if existing is not None:
            raise DuplicateReferenceError(existing, self.table)

    def _build(self, reference: str, status: str) -> OrderModel:
        if self.strategy is EnumStrategy.NATIVE_ENUM and status in ALLOWED_STATUSES:
            return self.model(reference=reference, status=OrderStatus(status))
        return self.model(reference=reference, status=status)

    async def create(self, reference: str, status: OrderStatus | str) -> OrderModel:
        """Create an order after application-level validation."""
        value = normalize_value(_status_text(status), ALLOWED_STATUSES)
        await self._check_references([reference])
        order = self._build(reference, value)
        self.db.add(order)
        await self._commit([reference])
        logger.info(
            f"Created order {reference} with status {value}",
            extra=self._log_extra(order_id=str(order.id)),
        )
        return order

    async def import_raw(
        self, rows: list[RawOrderRow], normalize: bool = False,
    ) -> int:
        """Write rows as-is, leaving enforcement to the table's schema."""
        references = [row.reference for row in rows]
        await self._check_references(references)
        for row in rows:
            status = row.status
            if normalize:
                status = canonical_spelling(
                    status, ALLOWED_STATUSES, case_insensitive=True,
                ) or status
            self.db.add(self._build(row.reference, status))
        await self._commit(references)

        invalid = sum(
            1 for row in rows
            if canonical_spelling(
                row.status, ALLOWED_STATUSES, case_insensitive=normalize,
            ) is None
        )
        if invalid:
            logger.warning(
                f"Imported {invalid} row(s) with values outside OrderStatus",
                extra=self._log_extra(invalid_count=invalid),
            )
        logger.info(
            f"Imported {len(rows)} row(s) into {self.table}",
            extra=self._log_extra(),
        )
        return len(rows)

    async def list_orders(
        self, status: str | None = None, limit: int = 50, offset: int = 0,
    ) -> list[OrderModel]:
        query = select(self.model).order_by(
            self.model.created_at.desc(), self.model.reference,
        )
        if status is not None:
            query = query.where(self.model.status == status)
        query = query.limit(limit).offset(offset)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, order_id: OrderId) -> OrderModel:
        result = await self.db.execute(
            select(self.model).where(self.model.id == order_id),
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise ResourceNotFoundError("Order", str(order_id))
        return order

    async def update_status(
        self, order_id: OrderId, status: OrderStatus | str,
    ) -> OrderModel:
        value = normalize_value(_status_text(status), ALLOWED_STATUSES)
        order = await self.get(order_id)
        previous = _status_text(order.status)
        order.status = (
            OrderStatus(value)
            if self.strategy is EnumStrategy.NATIVE_ENUM else value
        )
        await self._commit()
        logger.info(
            f"Order {order.reference} status {previous} -> {value}",
            extra=self._log_extra(order_id=str(order_id)),
        )
        return order

    async def delete(self, order_id: OrderId) -> None:
        order = await self.get(order_id)
        await self.db.delete(order)
        await self.db.commit()
        logger.info(
            f"Deleted order {order.reference}",
            extra=self._log_extra(order_id=str(order_id)),
        )

    async def audit_drift(self) -> DriftReport:
        """Count stored status values that are not OrderStatus members."""
        result = await self.db.execute(
            select(self.model.status, func.count())
            .group_by(self.model.status),
        )
        counts = {_status_text(value): count for value, count in result.all()}
        report = find_drift(counts, ALLOWED_STATUSES)
        if not report.is_clean:
            logger.warning(
                f"{report.invalid_rows} row(s) in {self.table} hold invalid status",
                extra=self._log_extra(invalid_count=report.invalid_rows),
            )
        return report
