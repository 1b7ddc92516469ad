"""
TILIN Ops - Commission & Profit Attribution Tests

For every sale:
- Rate resolution (frozen override, channel table, unknown channel)
- Apportioning by revenue share
- Item profit = revenue - recipe cost - commission
"""

from decimal import Decimal

import pytest

from tilin_ops.models.profit import Channel
from tilin_ops.models.sales import Ingredient, PlatformConfig
from tilin_ops.services.commission_engine import (
    CommissionTable,
    attribute_item,
    attribute_sale,
    commission_factor,
    normalize_channel,
    recipe_unit_cost,
    resolve_commission_rate,
    sale_commission,
)
from tilin_ops.services.consumption_engine import index_products

from factories import NOW, make_product, make_sale


@pytest.fixture
def table():
    return CommissionTable.from_configs([
        PlatformConfig(name="PedidosYa", commission=Decimal("30")),
        PlatformConfig(name="Rappi", commission=Decimal("20")),
        PlatformConfig(name="Mercado Pago", commission=Decimal("5")),
    ])


@pytest.fixture
def catalog(bun, patty, burger):
    fries = make_product("Fries", "5")
    return index_products([burger, fries]), {bun.id: bun, patty.id: patty}, fries


class TestNormalizeChannel:
    """Free-text channel names to Channel."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("PEYA", Channel.PEYA),
            ("py", Channel.PEYA),
            (" Pedidos Ya ", Channel.PEYA),
            ("pedidos-ya", Channel.PEYA),
            ("Rappi", Channel.RAPPI),
            ("MP", Channel.MERCADOPAGO),
            ("Mercado Pago", Channel.MERCADOPAGO),
            ("local", Channel.LOCAL),
            ("COUNTER", Channel.LOCAL),
            ("Mostrador", Channel.LOCAL),
            ("WhatsApp", Channel.LOCAL),
        ],
    )
    def test_aliases(self, name, expected):
        assert normalize_channel(name) == expected

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_empty_is_local(self, name):
        assert normalize_channel(name) == Channel.LOCAL

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("PEDIDOS", Channel.PEYA),
            ("PedidosYa Delivery", Channel.PEYA),
            ("Rappi Turbo", Channel.RAPPI),
            ("MercadoPago QR", Channel.MERCADOPAGO),
            ("Venta Local", Channel.LOCAL),
        ],
    )
    def test_known_fragment_inside_longer_name(self, name, expected):
        assert normalize_channel(name) == expected

    def test_short_codes_match_whole_name_only(self):
        assert normalize_channel("MP") == Channel.MERCADOPAGO
        assert normalize_channel("Pyme Catering") == Channel.UNKNOWN

    def test_unlisted_name_is_unknown(self):
        assert normalize_channel("Uber Eats") == Channel.UNKNOWN


class TestCommissionTable:

    def test_percent_becomes_fraction(self, table):
        assert table.rate_for(Channel.PEYA) == Decimal("0.3")
        assert table.rate_for(Channel.RAPPI) == Decimal("0.2")
        assert table.rate_for(Channel.MERCADOPAGO) == Decimal("0.05")

    def test_missing_channel_is_free(self, table):
        assert table.rate_for(Channel.LOCAL) == Decimal("0")
        assert table.rate_for(Channel.UNKNOWN) == Decimal("0")

    def test_unrecognised_config_is_skipped(self):
        table = CommissionTable.from_configs([
            PlatformConfig(name="Glovo", commission=Decimal("25")),
        ])
        assert table.rate_for(Channel.UNKNOWN) == Decimal("0")

    def test_descriptive_config_name_keeps_its_rate(self):
        table = CommissionTable.from_configs([
            PlatformConfig(name="PedidosYa Delivery", commission=Decimal("30")),
        ])
        assert table.rate_for(Channel.PEYA) == Decimal("0.3")


class TestResolveCommissionRate:

    def test_channel_rate(self, table, burger):
        sale = make_sale(NOW, [(burger, 1, "10")], channel="Rappi")
        rate = resolve_commission_rate(sale, table)
        assert rate.rate == Decimal("0.2")
        assert rate.frozen is False
        assert rate.channel == Channel.RAPPI

    def test_negative_discount_freezes_rate(self, table, burger):
        """A -15 discount means 15% commission, whatever the channel table says."""
        sale = make_sale(NOW, [(burger, 1, "10")], channel="PedidosYa",
                         discount=Decimal("-15"))
        rate = resolve_commission_rate(sale, table)
        assert rate.rate == Decimal("0.15")
        assert rate.frozen is True
        assert rate.channel == Channel.PEYA

    def test_positive_discount_is_not_a_rate(self, table, burger):
        sale = make_sale(NOW, [(burger, 1, "10")], channel="Rappi",
                         discount=Decimal("2"))
        assert resolve_commission_rate(sale, table).rate == Decimal("0.2")

    def test_unknown_channel_pays_nothing(self, table, burger):
        sale = make_sale(NOW, [(burger, 1, "10")], channel="Uber Eats")
        rate = resolve_commission_rate(sale, table)
        assert rate.channel == Channel.UNKNOWN
        assert rate.rate == Decimal("0")


class TestAttribution:
    """Per-item profit breakdown."""

    def test_recipe_unit_cost(self, burger, bun, patty):
        ingredients = {bun.id: bun, patty.id: patty}
        assert recipe_unit_cost(burger, ingredients) == Decimal("4")
        assert recipe_unit_cost(None, ingredients) == Decimal("0")

    def test_single_item_commission_equals_sale_commission(self, table, catalog, burger):
        products, ingredients, _ = catalog
        sale = make_sale(NOW, [(burger, 3, "10")], channel="Rappi")

        [line] = attribute_sale(sale, products, ingredients, table)

        assert line.commission == sale.total * Decimal("0.2")
        assert line.revenue == Decimal("30")
        assert line.cost == Decimal("12")
        assert line.profit == Decimal("30") - Decimal("12") - Decimal("6")

    def test_commission_follows_revenue_share(self, table, catalog, burger):
        products, ingredients, fries = catalog
        sale = make_sale(NOW, [(burger, 6, "10"), (fries, 8, "5")], channel="Rappi")

        lines = attribute_sale(sale, products, ingredients, table)

        assert [line.commission for line in lines] == [Decimal("12"), Decimal("8")]
        assert sum(line.commission for line in lines) == sale_commission(
            sale, resolve_commission_rate(sale, table)
        )
        # No recipe, no cost
        assert lines[1].cost == Decimal("0")

    def test_zero_total_means_zero_commission(self, table, catalog, burger):
        products, ingredients, _ = catalog
        sale = make_sale(NOW, [(burger, 1, "0")], channel="Rappi")

        assert commission_factor(sale, resolve_commission_rate(sale, table)) == Decimal("0")
        [line] = attribute_sale(sale, products, ingredients, table)
        assert line.commission == Decimal("0")
        assert line.profit == Decimal("-4")

    def test_total_below_item_revenue(self, table, catalog, burger):
        """Commission is charged on the sale total, spread by item revenue."""
        products, ingredients, _ = catalog
        sale = make_sale(NOW, [(burger, 2, "10")], channel="Rappi", total="16")

        [line] = attribute_sale(sale, products, ingredients, table)

        assert line.commission == Decimal("4")

    def test_missing_product_is_labelled_unknown(self, table, catalog):
        products, ingredients, _ = catalog
        ghost = make_product("Removed", "7")
        sale = make_sale(NOW, [(ghost, 1, "7")])

        [line] = attribute_sale(sale, products, ingredients, table)

        assert line.product_name == "Unknown"
        assert line.cost == Decimal("0")

    def test_attribute_item_targets_one_product(self, table, catalog, burger):
        products, ingredients, fries = catalog
        sale = make_sale(NOW, [(burger, 6, "10"), (fries, 8, "5")], channel="Rappi")

        line = attribute_item(sale, fries.id, products, ingredients, table)

        assert line.product_name == "Fries"
        assert line.commission == Decimal("8")

    def test_attribute_item_merges_repeated_lines(self, table, catalog, burger):
        products, ingredients, _ = catalog
        sale = make_sale(NOW, [(burger, 1, "10"), (burger, 2, "10")], channel="Rappi")

        line = attribute_item(sale, burger.id, products, ingredients, table)

        assert line.quantity == 3
        assert line.revenue == Decimal("30")
        assert line.cost == Decimal("12")
        assert line.commission == Decimal("6")
        assert line.profit == Decimal("12")

    def test_attribute_item_absent_product(self, table, catalog, burger):
        products, ingredients, fries = catalog
        sale = make_sale(NOW, [(burger, 1, "10")])
        assert attribute_item(sale, fries.id, products, ingredients, table) is None
