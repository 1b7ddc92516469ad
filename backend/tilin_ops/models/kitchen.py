"""
TILIN Ops - Kitchen Board Schemas
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tilin_ops.models.sales import SaleStatus


class KitchenOrderItem(BaseModel):
    product_name: str
    quantity: int


class KitchenOrder(BaseModel):
    """Active order as shown on the kitchen display."""
    id: uuid.UUID
    client_name: str
    status: SaleStatus
    items: list[KitchenOrderItem] = []
    date: datetime
    minutes_waiting: int


class KitchenOverview(BaseModel):
    orders: list[KitchenOrder] = []
    pending_count: int = 0
    in_progress_count: int = 0
    estimated_wait_time: int = 0  # minutes


class KitchenOverviewResponse(BaseModel):
    success: bool
    data: Optional[KitchenOverview] = None
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class OperationFailure(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    STORE_ERROR = "STORE_ERROR"


class OperationResult(BaseModel):
    """Outcome of a single-row write (status advance, refund, waste log)."""
    success: bool
    error: Optional[str] = None
    reason: Optional[OperationFailure] = None
    status: Optional[SaleStatus] = None
