"""Builders for sales, products and a store that always fails."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from tilin_ops.db.accessor import DataAccessError
from tilin_ops.db.memory import InMemorySalesDataAccessor
from tilin_ops.models.sales import (
    Product,
    RecipeItem,
    Sale,
    SaleItem,
    SaleStatus,
)

NOW = datetime(2026, 10, 19, 21, 0, 0)


def make_product(name: str, price: str, recipe: Optional[list] = None) -> Product:
    """Build a product; recipe is a list of (ingredient, quantity) pairs."""
    product = Product(name=name, price=Decimal(price))
    product.recipe = [
        RecipeItem(
            product_id=product.id,
            ingredient_id=ingredient.id,
            quantity=Decimal(quantity),
        )
        for ingredient, quantity in (recipe or [])
    ]
    return product


def make_sale(
    date: datetime,
    lines: list,
    status: SaleStatus = SaleStatus.COMPLETED,
    total: Optional[str] = None,
    **kwargs,
) -> Sale:
    """Build a sale; lines is a list of (product, units, unit_price) tuples."""
    items = [
        SaleItem(product_id=product.id, quantity=units, unit_price=Decimal(price))
        for product, units, price in lines
    ]
    if total is None:
        sale_total = sum((i.revenue for i in items), Decimal("0"))
    else:
        sale_total = Decimal(total)
    return Sale(date=date, total=sale_total, status=status, items=items, **kwargs)


class FailingAccessor(InMemorySalesDataAccessor):
    """Store whose every read and write fails."""

    def _fail(self, *args, **kwargs):
        raise DataAccessError("store offline")

    sales_between = _fail
    sales_with_status = _fail
    get_sale = _fail
    products = _fail
    ingredients = _fail
    platform_configs = _fail
    expenses_between = _fail
    update_sale_status = _fail
    record_waste = _fail
    decrement_ingredient_stock = _fail
