"""
TILIN Ops - Business Health Schemas
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tilin_ops.core.types import Quantity
from tilin_ops.models.profit import ProductPerformance


class HealthMetric(BaseModel):
    """One dimension of the health score."""
    value: Quantity
    target: Quantity
    score: Quantity
    max: int


class StockHealthMetric(HealthMetric):
    low_stock_count: int = 0
    total_ingredients: int = 0


class HealthBreakdown(BaseModel):
    margin: HealthMetric
    stock: StockHealthMetric
    volume: HealthMetric


class HealthTipKind(str, Enum):
    MARGIN = "MARGIN"
    STOCK = "STOCK"
    VOLUME = "VOLUME"
    HEALTHY = "HEALTHY"


class HealthTip(BaseModel):
    kind: HealthTipKind
    title: str
    description: str
    link: Optional[str] = None


class HealthScore(BaseModel):
    """Composite 0-100 score. Held at 0 while there are no sales; the breakdown is still filled in."""
    score: int = Field(..., ge=0, le=100)
    breakdown: HealthBreakdown
    tips: list[HealthTip] = []


class PeakHour(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    count: int = 0


class AdvancedAnalytics(BaseModel):
    health: HealthScore
    peak_hours: list[PeakHour] = []
    top_products: list[ProductPerformance] = []
    customer_recurrence: Quantity = Decimal("0")  # % of sales with a customer
    total_sales: int = 0
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class AdvancedAnalyticsResponse(BaseModel):
    success: bool
    data: Optional[AdvancedAnalytics] = None
