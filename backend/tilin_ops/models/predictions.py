"""
TILIN Ops - Stock Depletion Prediction Schemas
"""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tilin_ops.core.types import Quantity


class StockStatus(str, Enum):
    """Urgency bucket for an ingredient."""
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    SAFE = "SAFE"
    UNKNOWN = "UNKNOWN"


class RunwayKind(str, Enum):
    """
    How long current stock lasts.

    FINITE: consumption observed, days is set.
    UNBOUNDED: no consumption observed, stock on hand.
    INSUFFICIENT: no consumption and no stock; nothing to project.
    """
    FINITE = "FINITE"
    UNBOUNDED = "UNBOUNDED"
    INSUFFICIENT = "INSUFFICIENT"


class StockRunway(BaseModel):
    """Tagged days-remaining value."""
    kind: RunwayKind
    days: Optional[Quantity] = None

    @classmethod
    def finite(cls, days: Decimal) -> "StockRunway":
        return cls(kind=RunwayKind.FINITE, days=days)

    @classmethod
    def unbounded(cls) -> "StockRunway":
        return cls(kind=RunwayKind.UNBOUNDED)

    @classmethod
    def insufficient(cls) -> "StockRunway":
        return cls(kind=RunwayKind.INSUFFICIENT)


class StockPrediction(BaseModel):
    """Projected depletion for one ingredient."""
    ingredient_id: uuid.UUID
    ingredient_name: str
    current_stock: Quantity
    avg_daily_consumption: Quantity
    runway: StockRunway
    days_remaining: Quantity  # display/sort value; the cap when runway is not FINITE
    projected_depletion_date: Optional[datetime] = None
    status: StockStatus

    class Config:
        json_schema_extra = {
            "example": {
                "ingredient_id": "550e8400-e29b-41d4-a716-446655440000",
                "ingredient_name": "Cheddar",
                "current_stock": "3",
                "avg_daily_consumption": "0.1",
                "runway": {"kind": "FINITE", "days": "30"},
                "days_remaining": "30",
                "projected_depletion_date": "2026-11-18T12:00:00",
                "status": "SAFE",
            }
        }


class StockPredictionResponse(BaseModel):
    """
    Prediction list, most urgent first.

    success=True with no data means there were no completed sales in the
    lookback window; success=False means the data store failed.
    """
    success: bool
    data: list[StockPrediction] = []
    days_active: Optional[int] = None
    generated_at: datetime = Field(default_factory=datetime.utcnow)
