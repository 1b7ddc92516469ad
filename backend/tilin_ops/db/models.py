"""
TILIN Ops - SQLAlchemy ORM Models
Authoritative database schema implementation
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class Ingredient(Base):
    """Ingredient with present-day cost and stock."""

    __tablename__ = "ingredients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="unit")
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=Decimal("0"))
    # Not clamped: waste logging may drive stock negative
    stock: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=Decimal("0"))
    min_stock: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    recipe_items: Mapped[list["RecipeItem"]] = relationship(back_populates="ingredient")

    __table_args__ = (
        Index("idx_ingredients_name", "name"),
    )


class Product(Base):
    """Sellable product."""

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    recipe: Mapped[list["RecipeItem"]] = relationship(
        back_populates="product", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="products_price_non_negative"),
    )


class RecipeItem(Base):
    """Ingredient quantity per one unit of product."""

    __tablename__ = "recipe_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    ingredient_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)

    product: Mapped["Product"] = relationship(back_populates="recipe")
    ingredient: Mapped["Ingredient"] = relationship(back_populates="recipe_items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="recipe_items_quantity_positive"),
        Index("idx_recipe_items_product", "product_id"),
    )


class Sale(Base):
    """Checkout record. Negative discount stores a frozen commission percent."""

    __tablename__ = "sales"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False, default="CASH")
    channel: Mapped[str] = mapped_column(String(100), nullable=False, default="COUNTER")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    client_name: Mapped[Optional[str]] = mapped_column(String(255))
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)

    items: Mapped[list["SaleItem"]] = relationship(
        back_populates="sale", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'IN_PROGRESS', 'READY', 'COMPLETED', 'REFUNDED')",
            name="sales_status_valid",
        ),
        Index("idx_sales_date_status", "date", "status"),
    )


class SaleItem(Base):
    """Line item with the unit price captured at checkout."""

    __tablename__ = "sale_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sale_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("sales.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    sale: Mapped["Sale"] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="sale_items_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="sale_items_price_non_negative"),
        Index("idx_sale_items_sale", "sale_id"),
    )


class PlatformConfig(Base):
    """Commission percentage per delivery platform."""

    __tablename__ = "platform_configs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    commission: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "commission >= 0 AND commission <= 100",
            name="platform_configs_commission_range",
        ),
    )


class Expense(Base):
    """Operating expense (fixed or variable)."""

    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    description: Mapped[Optional[str]] = mapped_column(Text)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="OTHER")
    is_fixed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_expenses_date", "date"),
    )


class WasteLog(Base):
    """Waste record, optionally tied to an ingredient stock deduction."""

    __tablename__ = "waste_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    ingredient_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("ingredients.id", ondelete="SET NULL")
    )
    quantity: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4))
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
