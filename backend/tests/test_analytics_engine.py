"""
TILIN Ops - Business Analytics Tests

Menu used throughout: Burger = 1 Bun (cost 1) + 1 Patty (cost 3), sold at 10.
Patty is below its minimum stock.
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from tilin_ops.core.types import round_money
from tilin_ops.models.health import HealthTipKind
from tilin_ops.models.sales import Expense, PlatformConfig, SaleStatus
from tilin_ops.services.analytics_engine import AnalyticsEngine

from factories import NOW, FailingAccessor, make_product, make_sale


@pytest.fixture
def engine(menu, settings):
    menu.register_platform_config(PlatformConfig(name="Rappi", commission=Decimal("20")))
    return AnalyticsEngine(menu, settings)


@pytest.fixture
def two_sales(menu, burger):
    """A counter sale at 13:00 and a Rappi sale at 20:00."""
    counter = menu.register_sale(make_sale(
        datetime(2026, 10, 18, 13, 0), [(burger, 1, "10")], customer_id=uuid.uuid4()
    ))
    rappi = menu.register_sale(make_sale(
        datetime(2026, 10, 19, 20, 0), [(burger, 2, "10")], channel="Rappi"
    ))
    menu.register_sale(make_sale(
        datetime(2026, 10, 19, 19, 0), [(burger, 9, "10")], status=SaleStatus.REFUNDED
    ))
    return counter, rappi


class TestAdvancedAnalytics:

    def test_health_and_insights(self, engine, two_sales):
        response = engine.advanced_analytics(now=NOW)

        assert response.success is True
        data = response.data
        assert data.total_sales == 2

        # profit 6 + 8 over net revenue 10 + (20 - 4)
        margin = data.health.breakdown.margin
        assert margin.value == Decimal("14") / Decimal("26") * 100
        assert margin.score == Decimal("40")
        assert data.health.breakdown.stock.low_stock_count == 1
        assert data.health.breakdown.stock.score == Decimal("15")
        # 40 + 15 + (2/30)/10 * 30
        assert data.health.score == 55
        assert [t.kind for t in data.health.tips] == [
            HealthTipKind.STOCK,
            HealthTipKind.VOLUME,
        ]

    def test_peak_hours(self, engine, two_sales):
        peaks = engine.advanced_analytics(now=NOW).data.peak_hours
        assert len(peaks) == 24
        assert {p.hour: p.count for p in peaks if p.count} == {13: 1, 20: 1}

    def test_top_products(self, engine, two_sales):
        [top] = engine.advanced_analytics(now=NOW).data.top_products
        assert top.name == "Burger"
        assert top.sales == 3
        assert top.revenue == Decimal("30")
        assert top.profit == Decimal("14")
        assert top.margin == Decimal("14") / Decimal("30") * 100

    def test_customer_recurrence(self, engine, two_sales):
        assert engine.advanced_analytics(now=NOW).data.customer_recurrence == Decimal("50")

    def test_no_sales_scores_zero(self, engine):
        response = engine.advanced_analytics(now=NOW)
        assert response.success is True
        assert response.data.health.score == 0
        assert response.data.total_sales == 0
        assert response.data.top_products == []

    def test_store_failure_is_reported(self, settings):
        response = AnalyticsEngine(FailingAccessor(), settings).advanced_analytics(now=NOW)
        assert response.success is False


class TestTopProductsRanking:

    def test_ranked_by_profit_and_limited(self, menu, settings, bun):
        engine = AnalyticsEngine(menu, settings)
        for price in range(1, 9):
            product = menu.register_product(make_product(f"Item {price}", str(price), [(bun, "1")]))
            menu.register_sale(make_sale(NOW - timedelta(hours=1), [(product, 1, str(price))]))

        top = engine.advanced_analytics(now=NOW).data.top_products

        assert len(top) == settings.TOP_PRODUCTS_LIMIT
        assert [p.name for p in top] == ["Item 8", "Item 7", "Item 6", "Item 5", "Item 4"]


class TestPeriodSummary:

    def test_identity_holds(self, engine, two_sales):
        response = engine.period_summary(NOW - timedelta(days=7), NOW)

        assert response.success is True
        summary = response.data
        assert summary.sale_count == 2
        assert summary.gross_sales == Decimal("30")
        assert summary.revenue == Decimal("30")
        assert summary.cost == Decimal("12")
        assert summary.commission == Decimal("4")
        assert summary.net_profit == Decimal("14")
        assert summary.revenue - summary.cost - summary.commission == summary.net_profit

    def test_period_bounds(self, engine, two_sales):
        summary = engine.period_summary(
            datetime(2026, 10, 19, 0, 0), datetime(2026, 10, 19, 23, 59)
        ).data
        assert summary.sale_count == 1
        assert summary.gross_sales == Decimal("20")

    def test_store_failure_is_reported(self, settings):
        response = AnalyticsEngine(FailingAccessor(), settings).period_summary(NOW, NOW)
        assert response.success is False
        assert response.data is None


class TestSaleProfit:

    def test_breakdown_for_sale(self, engine, two_sales):
        _, rappi = two_sales
        response = engine.sale_profit(rappi.id)

        assert response.success is True
        [line] = response.data
        assert line.revenue == Decimal("20")
        assert line.cost == Decimal("8")
        assert line.commission == Decimal("4")
        assert line.profit == Decimal("8")

    def test_missing_sale(self, engine):
        response = engine.sale_profit(uuid.uuid4())
        assert response.success is False
        assert response.error == "Sale not found"


class TestDailyMetrics:
    """Completed sales since midnight; yesterday and refunds stay out."""

    def test_today_only(self, engine, two_sales):
        response = engine.daily_metrics(now=NOW)

        assert response.success is True
        data = response.data
        assert data.day == NOW.date()
        assert data.order_count == 1
        assert data.gross_sales == Decimal("20")
        assert data.commissions == Decimal("4")
        assert data.net_sales == Decimal("16")
        assert data.cost == Decimal("8")
        assert data.estimated_profit == Decimal("8")
        # over gross, not net
        assert data.margin == Decimal("40")

    def test_quiet_day(self, engine):
        data = engine.daily_metrics(now=NOW).data
        assert data.order_count == 0
        assert data.gross_sales == Decimal("0")
        assert data.margin == Decimal("0")

    def test_losing_day_has_negative_margin(self, menu, settings, bun):
        loss_leader = menu.register_product(make_product("Promo", "1", [(bun, "2")]))
        menu.register_sale(make_sale(NOW - timedelta(hours=1), [(loss_leader, 1, "1")]))

        data = AnalyticsEngine(menu, settings).daily_metrics(now=NOW).data

        assert data.estimated_profit == Decimal("-1")
        assert data.margin == Decimal("-100")

    def test_store_failure_is_reported(self, settings):
        response = AnalyticsEngine(FailingAccessor(), settings).daily_metrics(now=NOW)
        assert response.success is False
        assert response.data is None


class TestBreakEven:
    """Current calendar month only."""

    def test_break_even_point(self, engine, menu, burger):
        menu.register_expense(Expense(
            description="Rent", amount=Decimal("1000"), is_fixed=True,
            date=datetime(2026, 10, 1, 9, 0),
        ))
        menu.register_expense(Expense(
            description="Napkins", amount=Decimal("50"),
            date=datetime(2026, 10, 5, 9, 0),
        ))
        menu.register_expense(Expense(
            description="Last month rent", amount=Decimal("999"), is_fixed=True,
            date=datetime(2026, 9, 20, 9, 0),
        ))
        menu.register_sale(make_sale(datetime(2026, 10, 10, 12, 0), [(burger, 5, "20")]))

        response = engine.break_even(now=NOW)

        assert response.success is True
        data = response.data
        assert data.fixed_costs == Decimal("1000")
        assert data.total_sales == Decimal("100")
        assert data.variable_costs == Decimal("70")
        assert data.commissions == Decimal("0")
        assert data.gross_margin == Decimal("30")
        assert data.contribution_margin_ratio == Decimal("0.3")
        assert round_money(data.break_even_point) == Decimal("3333.33")
        assert round_money(data.progress) == Decimal("3.00")
        assert data.has_activity is True

    def test_losing_money_per_sale_has_no_break_even(self, engine, menu, burger):
        menu.register_expense(Expense(
            description="Rent", amount=Decimal("1000"), is_fixed=True,
            date=datetime(2026, 10, 1, 9, 0),
        ))
        menu.register_sale(make_sale(
            datetime(2026, 10, 10, 12, 0), [(burger, 1, "4")], channel="Rappi"
        ))

        data = engine.break_even(now=NOW).data

        assert data.gross_margin < 0
        assert data.break_even_point == Decimal("0")
        assert data.progress == Decimal("0")

    def test_no_activity(self, engine):
        data = engine.break_even(now=NOW).data
        assert data.total_sales == Decimal("0")
        assert data.break_even_point == Decimal("0")
        assert data.progress == Decimal("0")
        assert data.has_activity is False

    def test_store_failure_is_reported(self, settings):
        response = AnalyticsEngine(FailingAccessor(), settings).break_even(now=NOW)
        assert response.success is False
