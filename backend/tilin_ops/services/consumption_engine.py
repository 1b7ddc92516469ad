"""
TILIN Ops - Consumption Aggregator
Converts units sold into ingredient quantity consumed via product recipes.

LOGIC:
1. Keep COMPLETED sales only
2. For every item, look up the product's recipe
3. Add recipe quantity * units sold to the ingredient's running total

KNOWN SIMPLIFICATION:
- Refunded sales do not count, even though the ingredients were used
"""

import uuid
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Mapping

from tilin_ops.models.sales import Product, Sale, SaleStatus


def index_products(products: Iterable[Product]) -> dict[uuid.UUID, Product]:
    return {p.id: p for p in products}


def aggregate_consumption(
    sales: Iterable[Sale],
    products: Mapping[uuid.UUID, Product],
) -> dict[uuid.UUID, Decimal]:
    """
    Total ingredient usage implied by completed sales.

    Args:
        sales: Sales with items (any status; non-COMPLETED are skipped)
        products: Product snapshot keyed by id

    Returns:
        ingredient_id -> total quantity consumed. Ingredients with no
        usage are absent.
    """
    consumption: dict[uuid.UUID, Decimal] = defaultdict(Decimal)

    for sale in sales:
        if sale.status != SaleStatus.COMPLETED:
            continue
        for item in sale.items:
            product = products.get(item.product_id)
            if product is None:
                # Dangling reference contributes nothing
                continue
            for recipe_item in product.recipe:
                consumption[recipe_item.ingredient_id] += (
                    recipe_item.quantity * item.quantity
                )

    return dict(consumption)
