"""
TILIN Ops - In-Memory Accessor

Development and test stand-in for the relational store.
Reads hand out deep copies so callers can never mutate stored records.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from tilin_ops.db.accessor import SalesDataAccessor
from tilin_ops.models.sales import (
    Expense,
    Ingredient,
    PlatformConfig,
    Product,
    Sale,
    SaleStatus,
    WasteLog,
)


class InMemorySalesDataAccessor(SalesDataAccessor):
    """Accessor backed by plain dictionaries."""

    def __init__(self) -> None:
        self._sales: dict[uuid.UUID, Sale] = {}
        self._products: dict[uuid.UUID, Product] = {}
        self._ingredients: dict[uuid.UUID, Ingredient] = {}
        self._platform_configs: dict[uuid.UUID, PlatformConfig] = {}
        self._expenses: dict[uuid.UUID, Expense] = {}
        self._waste_logs: list[WasteLog] = []

    # =========================================================================
    # DATA REGISTRATION
    # =========================================================================

    def register_sale(self, sale: Sale) -> Sale:
        for item in sale.items:
            item.sale_id = sale.id
        self._sales[sale.id] = sale
        return sale

    def register_product(self, product: Product) -> Product:
        self._products[product.id] = product
        return product

    def register_ingredient(self, ingredient: Ingredient) -> Ingredient:
        self._ingredients[ingredient.id] = ingredient
        return ingredient

    def register_platform_config(self, config: PlatformConfig) -> PlatformConfig:
        self._platform_configs[config.id] = config
        return config

    def register_expense(self, expense: Expense) -> Expense:
        self._expenses[expense.id] = expense
        return expense

    @property
    def waste_logs(self) -> list[WasteLog]:
        return [w.model_copy(deep=True) for w in self._waste_logs]

    def clear_data(self) -> None:
        """Clear all registered data (for testing)."""
        self._sales.clear()
        self._products.clear()
        self._ingredients.clear()
        self._platform_configs.clear()
        self._expenses.clear()
        self._waste_logs.clear()

    # =========================================================================
    # READS
    # =========================================================================

    def sales_between(
        self,
        start: datetime,
        end: Optional[datetime] = None,
        statuses: Optional[Iterable[SaleStatus]] = None,
    ) -> list[Sale]:
        wanted = set(statuses) if statuses is not None else None
        found = [
            s for s in self._sales.values()
            if s.date >= start
            and (end is None or s.date <= end)
            and (wanted is None or s.status in wanted)
        ]
        found.sort(key=lambda s: s.date)
        return [s.model_copy(deep=True) for s in found]

    def sales_with_status(self, statuses: Iterable[SaleStatus]) -> list[Sale]:
        wanted = set(statuses)
        found = sorted(
            (s for s in self._sales.values() if s.status in wanted),
            key=lambda s: s.date,
        )
        return [s.model_copy(deep=True) for s in found]

    def get_sale(self, sale_id: uuid.UUID) -> Optional[Sale]:
        sale = self._sales.get(sale_id)
        return sale.model_copy(deep=True) if sale else None

    def products(self) -> list[Product]:
        return [p.model_copy(deep=True) for p in self._products.values()]

    def ingredients(self) -> list[Ingredient]:
        return [i.model_copy(deep=True) for i in self._ingredients.values()]

    def platform_configs(self) -> list[PlatformConfig]:
        return [c.model_copy(deep=True) for c in self._platform_configs.values()]

    def expenses_between(self, start: datetime, end: datetime) -> list[Expense]:
        return [
            e.model_copy(deep=True) for e in self._expenses.values()
            if start <= e.date <= end
        ]

    # =========================================================================
    # WRITES
    # =========================================================================

    def update_sale_status(self, sale_id: uuid.UUID, status: SaleStatus) -> None:
        sale = self._sales.get(sale_id)
        if sale:
            sale.status = status

    def record_waste(self, entry: WasteLog) -> None:
        self._waste_logs.append(entry.model_copy(deep=True))

    def decrement_ingredient_stock(
        self,
        ingredient_id: uuid.UUID,
        quantity: Decimal,
    ) -> None:
        ingredient = self._ingredients.get(ingredient_id)
        if ingredient:
            ingredient.stock = ingredient.stock - quantity
