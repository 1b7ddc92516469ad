"""
TILIN Ops - Stock Depletion Predictor
Projects how many days each ingredient lasts at the recent consumption rate.

LOGIC:
1. Load COMPLETED sales in the lookback window (30 days)
2. Aggregate ingredient consumption through recipes
3. Daily rate = consumption / active days (days since the first sale, min 1)
4. Runway = stock / daily rate, capped
5. Classify: CRITICAL < 3 days, WARNING < 7 days, UNKNOWN when there is
   neither usage nor stock, SAFE otherwise

GUARDRAILS:
- No sales in the window returns an empty list, not infinite runways
- Negative stock projects depletion at "now"; days remaining stay negative
- Never writes to the store
"""

import logging
import math
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from tilin_ops.core.config import Settings, get_settings
from tilin_ops.db.accessor import DataAccessError, SalesDataAccessor
from tilin_ops.models.predictions import (
    RunwayKind,
    StockPrediction,
    StockPredictionResponse,
    StockRunway,
    StockStatus,
)
from tilin_ops.models.sales import Ingredient, Product, Sale
from tilin_ops.services.consumption_engine import aggregate_consumption, index_products

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class DepletionEngine:
    """
    Stock depletion predictor.

    Stateless apart from the injected accessor and settings; every call
    recomputes from a fresh snapshot.
    """

    def __init__(
        self,
        accessor: SalesDataAccessor,
        settings: Optional[Settings] = None,
    ) -> None:
        self._accessor = accessor
        self._settings = settings or get_settings()

    @property
    def cap(self) -> Decimal:
        return Decimal(self._settings.DAYS_REMAINING_CAP)

    # =========================================================================
    # RATE CALCULATIONS
    # =========================================================================

    @staticmethod
    def days_active(sales: list[Sale], now: datetime) -> int:
        """Whole days since the earliest sale, at least 1."""
        if not sales:
            return 1
        first_sale = min(s.date for s in sales)
        elapsed = abs((now - first_sale).total_seconds())
        return max(1, math.ceil(elapsed / SECONDS_PER_DAY))

    def project_runway(
        self,
        current_stock: Decimal,
        avg_daily: Decimal,
    ) -> tuple[StockRunway, Decimal]:
        """
        Days of stock left.

        Returns:
            Tuple of (tagged runway, numeric days for display and ordering)
        """
        if avg_daily > 0:
            days = min(current_stock / avg_daily, self.cap)
            return StockRunway.finite(days), days
        if current_stock == 0:
            return StockRunway.insufficient(), self.cap
        return StockRunway.unbounded(), self.cap

    def determine_status(
        self,
        days_remaining: Decimal,
        avg_daily: Decimal,
        current_stock: Decimal,
    ) -> StockStatus:
        if days_remaining < self._settings.CRITICAL_DAYS:
            return StockStatus.CRITICAL
        elif days_remaining < self._settings.WARNING_DAYS:
            return StockStatus.WARNING
        elif avg_daily == 0 and current_stock == 0:
            return StockStatus.UNKNOWN
        return StockStatus.SAFE

    # =========================================================================
    # PREDICTIONS
    # =========================================================================

    def build_predictions(
        self,
        sales: list[Sale],
        products: Iterable[Product],
        ingredients: Iterable[Ingredient],
        now: datetime,
    ) -> list[StockPrediction]:
        """Pure projection over a snapshot. Empty when there are no sales."""
        if not sales:
            return []

        consumption = aggregate_consumption(sales, index_products(products))
        days_active = self.days_active(sales, now)

        predictions: list[StockPrediction] = []
        for ingredient in ingredients:
            total_used = consumption.get(ingredient.id, Decimal("0"))
            avg_daily = total_used / days_active
            runway, days_remaining = self.project_runway(ingredient.stock, avg_daily)

            projected_date = None
            if runway.kind == RunwayKind.FINITE:
                # Already out of stock: depletion is now, not in the past
                projected_date = now
                if days_remaining > 0:
                    projected_date = now + timedelta(days=float(days_remaining))

            predictions.append(
                StockPrediction(
                    ingredient_id=ingredient.id,
                    ingredient_name=ingredient.name,
                    current_stock=ingredient.stock,
                    avg_daily_consumption=avg_daily,
                    runway=runway,
                    days_remaining=days_remaining,
                    projected_depletion_date=projected_date,
                    status=self.determine_status(
                        days_remaining, avg_daily, ingredient.stock
                    ),
                )
            )

        # Most urgent first
        predictions.sort(key=lambda p: p.days_remaining)
        return predictions

    def predict(self, now: Optional[datetime] = None) -> StockPredictionResponse:
        """
        Stock predictions for every ingredient over the lookback window.

        Returns:
            success=True, data=[] when the window has no completed sales;
            success=False, data=[] when the store fails.
        """
        if now is None:
            now = datetime.utcnow()
        window_start = now - timedelta(days=self._settings.LOOKBACK_DAYS)

        try:
            sales = self._accessor.completed_sales_since(window_start)
            if not sales:
                return StockPredictionResponse(success=True, data=[])
            products = self._accessor.products()
            ingredients = self._accessor.ingredients()
        except DataAccessError:
            logger.exception("Stock prediction failed")
            return StockPredictionResponse(success=False, data=[])

        return StockPredictionResponse(
            success=True,
            data=self.build_predictions(sales, products, ingredients, now),
            days_active=self.days_active(sales, now),
        )
