"""
TILIN Ops - Historical Data Accessor Interface
===============================================

Engines receive an accessor at construction time and never open
connections themselves.

RULE: Reads return immutable snapshots (pydantic records). The only
      writes are single-row: sale status, ingredient stock, waste log.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from tilin_ops.models.sales import (
    Expense,
    Ingredient,
    PlatformConfig,
    Product,
    Sale,
    SaleStatus,
    WasteLog,
)


class DataAccessError(Exception):
    """The data store could not be read or written."""
    pass


class SalesDataAccessor(ABC):
    """Read access to sales history plus the single-row writes."""

    # =========================================================================
    # READS
    # =========================================================================

    @abstractmethod
    def sales_between(
        self,
        start: datetime,
        end: Optional[datetime] = None,
        statuses: Optional[Iterable[SaleStatus]] = None,
    ) -> list[Sale]:
        """
        Sales (with items) whose date is in [start, end].

        Args:
            start: Inclusive lower bound
            end: Inclusive upper bound (None = open ended)
            statuses: Restrict to these statuses (None = all)
        """
        pass

    @abstractmethod
    def sales_with_status(self, statuses: Iterable[SaleStatus]) -> list[Sale]:
        """Sales in any of the given statuses, oldest first."""
        pass

    @abstractmethod
    def get_sale(self, sale_id: uuid.UUID) -> Optional[Sale]:
        pass

    @abstractmethod
    def products(self) -> list[Product]:
        """All products with their recipes."""
        pass

    @abstractmethod
    def ingredients(self) -> list[Ingredient]:
        pass

    @abstractmethod
    def platform_configs(self) -> list[PlatformConfig]:
        pass

    @abstractmethod
    def expenses_between(self, start: datetime, end: datetime) -> list[Expense]:
        pass

    # =========================================================================
    # WRITES (single row)
    # =========================================================================

    @abstractmethod
    def update_sale_status(self, sale_id: uuid.UUID, status: SaleStatus) -> None:
        pass

    @abstractmethod
    def record_waste(self, entry: WasteLog) -> None:
        pass

    @abstractmethod
    def decrement_ingredient_stock(
        self,
        ingredient_id: uuid.UUID,
        quantity: Decimal,
    ) -> None:
        """Subtract from stock without clamping at zero."""
        pass

    # =========================================================================
    # DERIVED
    # =========================================================================

    def completed_sales_since(self, since: datetime) -> list[Sale]:
        return self.sales_between(since, statuses=[SaleStatus.COMPLETED])
