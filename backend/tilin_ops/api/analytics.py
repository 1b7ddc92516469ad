"""
TILIN Ops - Forecasting & Analytics API Routes
Thin JSON surface over the analytical engines
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from tilin_ops.core.types import Money, Quantity
from tilin_ops.dependencies import (
    get_analytics_engine,
    get_depletion_engine,
    get_kitchen_engine,
    get_operations_service,
)
from tilin_ops.models.health import AdvancedAnalyticsResponse
from tilin_ops.models.kitchen import (
    KitchenOverviewResponse,
    OperationFailure,
    OperationResult,
)
from tilin_ops.models.predictions import StockPredictionResponse
from tilin_ops.models.profit import (
    BreakEvenResponse,
    DailyMetricsResponse,
    PeriodProfitSummaryResponse,
    SaleProfitResponse,
)
from tilin_ops.services.analytics_engine import AnalyticsEngine
from tilin_ops.services.depletion_engine import DepletionEngine
from tilin_ops.services.kitchen_engine import KitchenEngine
from tilin_ops.services.operations_service import OperationsService

router = APIRouter(tags=["Forecasting & Analytics"])

_FAILURE_STATUS = {
    OperationFailure.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OperationFailure.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    OperationFailure.STORE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class WasteLogRequest(BaseModel):
    description: str
    cost: Money
    ingredient_id: Optional[uuid.UUID] = None
    quantity: Optional[Quantity] = None


def _raise_on_failure(result: OperationResult) -> OperationResult:
    if not result.success:
        raise HTTPException(
            status_code=_FAILURE_STATUS.get(result.reason, status.HTTP_400_BAD_REQUEST),
            detail=result.error,
        )
    return result


# =============================================================================
# FORECASTING
# =============================================================================

@router.get("/predictions/stock", response_model=StockPredictionResponse)
def get_stock_predictions(
    engine: DepletionEngine = Depends(get_depletion_engine),
) -> StockPredictionResponse:
    """
    Projected depletion per ingredient, most urgent first.

    An empty list with success=true means no completed sales in the
    lookback window.
    """
    return engine.predict()


# =============================================================================
# KITCHEN
# =============================================================================

@router.get("/kitchen/overview", response_model=KitchenOverviewResponse)
def get_kitchen_overview(
    engine: KitchenEngine = Depends(get_kitchen_engine),
) -> KitchenOverviewResponse:
    """Active orders and estimated wait time."""
    return engine.overview()


@router.post("/kitchen/orders/{sale_id}/advance", response_model=OperationResult)
def advance_order(
    sale_id: uuid.UUID,
    service: OperationsService = Depends(get_operations_service),
) -> OperationResult:
    """Move an order to its next kitchen status."""
    return _raise_on_failure(service.advance_order(sale_id))


# =============================================================================
# OPERATIONS
# =============================================================================

@router.post("/operations/sales/{sale_id}/refund", response_model=OperationResult)
def refund_sale(
    sale_id: uuid.UUID,
    service: OperationsService = Depends(get_operations_service),
) -> OperationResult:
    return _raise_on_failure(service.refund_sale(sale_id))


@router.post(
    "/operations/waste",
    response_model=OperationResult,
    status_code=status.HTTP_201_CREATED,
)
def log_waste(
    payload: WasteLogRequest,
    service: OperationsService = Depends(get_operations_service),
) -> OperationResult:
    """Record waste; deducts stock when ingredient and quantity are given."""
    return _raise_on_failure(
        service.log_waste(
            description=payload.description,
            cost=payload.cost,
            ingredient_id=payload.ingredient_id,
            quantity=payload.quantity,
        )
    )


# =============================================================================
# ANALYTICS
# =============================================================================

@router.get("/analytics/advanced", response_model=AdvancedAnalyticsResponse)
def get_advanced_analytics(
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> AdvancedAnalyticsResponse:
    """Health score, peak hours, top products and customer recurrence."""
    return engine.advanced_analytics()


@router.get("/analytics/break-even", response_model=BreakEvenResponse)
def get_break_even(
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> BreakEvenResponse:
    return engine.break_even()


@router.get("/analytics/daily", response_model=DailyMetricsResponse)
def get_daily_metrics(
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> DailyMetricsResponse:
    """Today's net sales, orders, estimated profit and margin."""
    return engine.daily_metrics()


@router.get("/analytics/summary", response_model=PeriodProfitSummaryResponse)
def get_period_summary(
    start: datetime,
    end: Optional[datetime] = None,
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> PeriodProfitSummaryResponse:
    """Revenue, recipe cost, commission and net profit for a period."""
    return engine.period_summary(start, end)


@router.get("/analytics/sales/{sale_id}/items", response_model=SaleProfitResponse)
def get_sale_profit(
    sale_id: uuid.UUID,
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> SaleProfitResponse:
    """Per-item revenue, cost, apportioned commission and profit."""
    return engine.sale_profit(sale_id)
