"""Shared fixtures: an in-memory store seeded with a small burger menu."""

from decimal import Decimal

import pytest

from tilin_ops.core.config import Settings
from tilin_ops.db.memory import InMemorySalesDataAccessor
from tilin_ops.models.sales import Ingredient, Product

from factories import make_product


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def accessor() -> InMemorySalesDataAccessor:
    return InMemorySalesDataAccessor()


@pytest.fixture
def bun() -> Ingredient:
    return Ingredient(
        name="Bun", cost=Decimal("1"), stock=Decimal("10"), min_stock=Decimal("2")
    )


@pytest.fixture
def patty() -> Ingredient:
    """Below minimum stock."""
    return Ingredient(
        name="Patty", cost=Decimal("3"), stock=Decimal("1"), min_stock=Decimal("2")
    )


@pytest.fixture
def burger(bun, patty) -> Product:
    """One bun and one patty: recipe cost 4."""
    return make_product("Burger", "10", [(bun, "1"), (patty, "1")])


@pytest.fixture
def menu(accessor, bun, patty, burger) -> InMemorySalesDataAccessor:
    accessor.register_ingredient(bun)
    accessor.register_ingredient(patty)
    accessor.register_product(burger)
    return accessor
