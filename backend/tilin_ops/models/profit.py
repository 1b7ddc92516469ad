"""
TILIN Ops - Commission & Profit Schemas

KNOWN LIMITATION:
- Item cost uses present-day ingredient cost, not the cost basis at
  time of sale. Historical profit moves when ingredient costs move.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tilin_ops.core.types import Money, Quantity


class Channel(str, Enum):
    """Sales platform a sale originated from."""
    PEYA = "PEYA"
    RAPPI = "RAPPI"
    MERCADOPAGO = "MERCADOPAGO"
    LOCAL = "LOCAL"
    UNKNOWN = "UNKNOWN"


class CommissionRate(BaseModel):
    """Commission rate (0-1) applied to one sale."""
    rate: Quantity
    frozen: bool = False  # True when taken from the sale's negative discount
    channel: Channel


class ItemProfitBreakdown(BaseModel):
    """Profit of one line item net of recipe cost and apportioned commission."""
    sale_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    quantity: int
    revenue: Money
    cost: Money
    commission: Money
    profit: Money
    commission_rate: CommissionRate


class ProductPerformance(BaseModel):
    id: uuid.UUID
    name: str
    sales: int = 0  # units sold
    revenue: Money = Decimal("0")
    profit: Money = Decimal("0")
    margin: Quantity = Decimal("0")  # profit / revenue * 100


class PeriodProfitSummary(BaseModel):
    """
    Aggregate of per-item attribution over completed sales.

    revenue - cost - commission == net_profit
    """
    start: datetime
    end: datetime
    sale_count: int = 0
    gross_sales: Money = Decimal("0")  # sum of sale totals
    revenue: Money = Decimal("0")  # sum of item revenue
    cost: Money = Decimal("0")
    commission: Money = Decimal("0")
    net_profit: Money = Decimal("0")


class PeriodProfitSummaryResponse(BaseModel):
    success: bool
    data: Optional[PeriodProfitSummary] = None


class SaleProfitResponse(BaseModel):
    success: bool
    data: list[ItemProfitBreakdown] = []
    error: Optional[str] = None


class BreakEvenAnalysis(BaseModel):
    """Monthly break-even position."""
    fixed_costs: Money = Decimal("0")
    variable_costs: Money = Decimal("0")
    total_sales: Money = Decimal("0")
    commissions: Money = Decimal("0")
    gross_margin: Money = Decimal("0")  # sales - variable - commissions
    contribution_margin_ratio: Quantity = Decimal("0")
    break_even_point: Money = Decimal("0")
    progress: Quantity = Decimal("0")  # sales / break-even * 100
    has_activity: bool = False
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class BreakEvenResponse(BaseModel):
    success: bool
    data: Optional[BreakEvenAnalysis] = None


class DailyMetrics(BaseModel):
    """
    Today's dashboard figures over completed sales.

    net_sales = gross_sales - commissions
    estimated_profit = net_sales - cost
    margin is over gross sales
    """
    day: date
    order_count: int = 0
    gross_sales: Money = Decimal("0")
    commissions: Money = Decimal("0")
    net_sales: Money = Decimal("0")
    cost: Money = Decimal("0")
    estimated_profit: Money = Decimal("0")
    margin: Quantity = Decimal("0")  # may be negative on a losing day
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class DailyMetricsResponse(BaseModel):
    success: bool
    data: Optional[DailyMetrics] = None
