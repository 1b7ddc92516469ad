"""
TILIN Ops - Kitchen Load Estimator
Builds the kitchen board and estimates wait time for queued orders.

LOGIC:
1. Load orders in PENDING, IN_PROGRESS or READY, oldest first
2. Resolve product names (placeholder when missing)
3. Estimate wait over PENDING and IN_PROGRESS orders with the load strategy

The default strategy models a single serial line:
    per order: setup minutes + minutes per unit * units
No parallelism across orders. Swap the strategy for a richer model.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from tilin_ops.core.config import Settings, get_settings
from tilin_ops.db.accessor import DataAccessError, SalesDataAccessor
from tilin_ops.models.kitchen import (
    KitchenOrder,
    KitchenOrderItem,
    KitchenOverview,
    KitchenOverviewResponse,
)
from tilin_ops.models.sales import Product, Sale, SaleStatus
from tilin_ops.services.order_fsm import ACTIVE_LOAD_STATUSES, BOARD_STATUSES

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT_LABEL = "Unknown"
DEFAULT_CLIENT_LABEL = "Counter"


class KitchenLoadStrategy(ABC):
    """Capacity model: active orders in, minutes out."""

    @abstractmethod
    def estimate_wait_minutes(self, orders: list[KitchenOrder]) -> int:
        pass


class SerialLineLoadStrategy(KitchenLoadStrategy):
    """One preparation line, orders handled one after another."""

    def __init__(self, setup_minutes: int = 5, minutes_per_unit: int = 2) -> None:
        self.setup_minutes = setup_minutes
        self.minutes_per_unit = minutes_per_unit

    @classmethod
    def from_settings(cls, settings: Settings) -> "SerialLineLoadStrategy":
        return cls(
            setup_minutes=settings.KITCHEN_SETUP_MINUTES,
            minutes_per_unit=settings.KITCHEN_MINUTES_PER_UNIT,
        )

    def estimate_wait_minutes(self, orders: list[KitchenOrder]) -> int:
        total = 0
        for order in orders:
            total += self.setup_minutes
            total += sum(i.quantity for i in order.items) * self.minutes_per_unit
        return total


class KitchenEngine:
    """Kitchen display data and wait-time estimate."""

    def __init__(
        self,
        accessor: SalesDataAccessor,
        strategy: Optional[KitchenLoadStrategy] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._accessor = accessor
        settings = settings or get_settings()
        self._strategy = strategy or SerialLineLoadStrategy.from_settings(settings)

    @staticmethod
    def _to_board_order(
        sale: Sale,
        product_names: dict[uuid.UUID, str],
        now: datetime,
    ) -> KitchenOrder:
        return KitchenOrder(
            id=sale.id,
            client_name=sale.client_name or DEFAULT_CLIENT_LABEL,
            status=sale.status,
            items=[
                KitchenOrderItem(
                    product_name=product_names.get(i.product_id, UNKNOWN_PRODUCT_LABEL),
                    quantity=i.quantity,
                )
                for i in sale.items
            ],
            date=sale.date,
            minutes_waiting=int((now - sale.date).total_seconds() // 60),
        )

    def build_overview(
        self,
        orders: Iterable[Sale],
        products: Iterable[Product],
        now: datetime,
    ) -> KitchenOverview:
        """Pure board computation over a snapshot."""
        product_names = {p.id: p.name for p in products}
        board = [
            self._to_board_order(sale, product_names, now)
            for sale in sorted(orders, key=lambda s: s.date)
            if sale.status in BOARD_STATUSES
        ]
        load = [o for o in board if o.status in ACTIVE_LOAD_STATUSES]

        return KitchenOverview(
            orders=board,
            pending_count=sum(1 for o in board if o.status == SaleStatus.PENDING),
            in_progress_count=sum(1 for o in board if o.status == SaleStatus.IN_PROGRESS),
            estimated_wait_time=self._strategy.estimate_wait_minutes(load),
        )

    def overview(self, now: Optional[datetime] = None) -> KitchenOverviewResponse:
        if now is None:
            now = datetime.utcnow()
        try:
            orders = self._accessor.sales_with_status(BOARD_STATUSES)
            products = self._accessor.products()
        except DataAccessError:
            logger.exception("Kitchen overview failed")
            return KitchenOverviewResponse(success=False)

        return KitchenOverviewResponse(
            success=True,
            data=self.build_overview(orders, products, now),
        )
