"""SQLAlchemy-backed accessor."""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from tilin_ops.db import models as orm
from tilin_ops.db.accessor import DataAccessError, SalesDataAccessor
from tilin_ops.models.sales import (
    Expense,
    Ingredient,
    PlatformConfig,
    Product,
    Sale,
    SaleStatus,
    WasteLog,
)

logger = logging.getLogger(__name__)


class SqlSalesDataAccessor(SalesDataAccessor):
    """Accessor over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _translate_errors(self, action: str, write: bool = False) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            if write:
                self.db.rollback()
            logger.error("Data access failed during %s: %s", action, exc)
            raise DataAccessError(f"Failed to {action}") from exc

    # =========================================================================
    # READS
    # =========================================================================

    def sales_between(
        self,
        start: datetime,
        end: Optional[datetime] = None,
        statuses: Optional[Iterable[SaleStatus]] = None,
    ) -> list[Sale]:
        query = (
            select(orm.Sale)
            .options(selectinload(orm.Sale.items))
            .where(orm.Sale.date >= start)
            .order_by(orm.Sale.date)
        )
        if end is not None:
            query = query.where(orm.Sale.date <= end)
        if statuses is not None:
            query = query.where(orm.Sale.status.in_([s.value for s in statuses]))

        with self._translate_errors("load sales"):
            rows = self.db.scalars(query).all()
        return [Sale.model_validate(row) for row in rows]

    def sales_with_status(self, statuses: Iterable[SaleStatus]) -> list[Sale]:
        query = (
            select(orm.Sale)
            .options(selectinload(orm.Sale.items))
            .where(orm.Sale.status.in_([s.value for s in statuses]))
            .order_by(orm.Sale.date)
        )
        with self._translate_errors("load active orders"):
            rows = self.db.scalars(query).all()
        return [Sale.model_validate(row) for row in rows]

    def get_sale(self, sale_id: uuid.UUID) -> Optional[Sale]:
        query = (
            select(orm.Sale)
            .options(selectinload(orm.Sale.items))
            .where(orm.Sale.id == sale_id)
        )
        with self._translate_errors("load sale"):
            row = self.db.scalars(query).one_or_none()
        return Sale.model_validate(row) if row else None

    def products(self) -> list[Product]:
        query = select(orm.Product).options(selectinload(orm.Product.recipe))
        with self._translate_errors("load products"):
            rows = self.db.scalars(query).all()
        return [Product.model_validate(row) for row in rows]

    def ingredients(self) -> list[Ingredient]:
        with self._translate_errors("load ingredients"):
            rows = self.db.scalars(select(orm.Ingredient)).all()
        return [Ingredient.model_validate(row) for row in rows]

    def platform_configs(self) -> list[PlatformConfig]:
        with self._translate_errors("load platform configs"):
            rows = self.db.scalars(select(orm.PlatformConfig)).all()
        return [PlatformConfig.model_validate(row) for row in rows]

    def expenses_between(self, start: datetime, end: datetime) -> list[Expense]:
        query = select(orm.Expense).where(
            orm.Expense.date >= start,
            orm.Expense.date <= end,
        )
        with self._translate_errors("load expenses"):
            rows = self.db.scalars(query).all()
        return [Expense.model_validate(row) for row in rows]

    # =========================================================================
    # WRITES
    # =========================================================================

    def update_sale_status(self, sale_id: uuid.UUID, status: SaleStatus) -> None:
        with self._translate_errors("update sale status", write=True):
            self.db.execute(
                update(orm.Sale)
                .where(orm.Sale.id == sale_id)
                .values(status=status.value)
            )
            self.db.commit()

    def record_waste(self, entry: WasteLog) -> None:
        with self._translate_errors("record waste", write=True):
            self.db.add(
                orm.WasteLog(
                    id=entry.id,
                    description=entry.description,
                    cost=entry.cost,
                    ingredient_id=entry.ingredient_id,
                    quantity=entry.quantity,
                    date=entry.date,
                )
            )
            self.db.commit()

    def decrement_ingredient_stock(
        self,
        ingredient_id: uuid.UUID,
        quantity: Decimal,
    ) -> None:
        with self._translate_errors("decrement ingredient stock", write=True):
            self.db.execute(
                update(orm.Ingredient)
                .where(orm.Ingredient.id == ingredient_id)
                .values(stock=orm.Ingredient.stock - quantity)
            )
            self.db.commit()
