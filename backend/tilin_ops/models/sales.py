"""
TILIN Ops - Sales & Recipe Snapshot Schemas
Read-only records consumed by the analytical engines
"""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tilin_ops.core.types import Money, Percentage, Quantity


class SaleStatus(str, Enum):
    """Order lifecycle on the kitchen board."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"


class RecipeItem(BaseModel):
    """Ingredient quantity consumed by one unit of a product."""
    product_id: uuid.UUID
    ingredient_id: uuid.UUID
    quantity: Quantity

    class Config:
        from_attributes = True


class Ingredient(BaseModel):
    """Ingredient with current cost and stock level."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    unit: str = "unit"
    cost: Money = Decimal("0")  # per unit, present-day
    stock: Quantity = Decimal("0")  # may go negative
    min_stock: Quantity = Decimal("0")

    class Config:
        from_attributes = True

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock


class Product(BaseModel):
    """Sellable product and its recipe."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    category_id: Optional[uuid.UUID] = None
    is_active: bool = True
    is_public: bool = True
    price: Money = Decimal("0")
    recipe: list[RecipeItem] = []

    class Config:
        from_attributes = True


class SaleItem(BaseModel):
    """Line item; unit price is captured at checkout and never re-derived."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    sale_id: Optional[uuid.UUID] = None
    product_id: uuid.UUID
    quantity: int = Field(..., gt=0)
    unit_price: Money = Field(..., ge=0)

    class Config:
        from_attributes = True

    @property
    def revenue(self) -> Decimal:
        return self.unit_price * self.quantity


class Sale(BaseModel):
    """
    Checkout record.

    A negative discount is a frozen commission rate for this sale
    (abs(discount) percent), not a discount.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    date: datetime = Field(default_factory=datetime.utcnow)
    total: Money
    discount: Money = Decimal("0")
    payment_method: str = "CASH"
    channel: str = "COUNTER"
    status: SaleStatus = SaleStatus.PENDING
    client_name: Optional[str] = None
    customer_id: Optional[uuid.UUID] = None
    items: list[SaleItem] = []

    class Config:
        from_attributes = True


class PlatformConfig(BaseModel):
    """Per-channel commission percentage; name is free text."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    commission: Percentage = Decimal("0")

    class Config:
        from_attributes = True


class Expense(BaseModel):
    """Operating expense used by break-even analysis."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    description: Optional[str] = None
    amount: Money
    category: str = "OTHER"
    is_fixed: bool = False
    date: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


class WasteLog(BaseModel):
    """Recorded waste; optionally tied to an ingredient stock deduction."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    description: str
    cost: Money = Decimal("0")
    ingredient_id: Optional[uuid.UUID] = None
    quantity: Optional[Quantity] = None
    date: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True
