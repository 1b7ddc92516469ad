"""
TILIN Ops - Business Analytics

Aggregate views built on per-item commission/profit attribution:
- Advanced analytics (health score, peak hours, top products, recurrence)
- Period profit summary
- Daily dashboard metrics (net sales, orders, estimated profit, margin)
- Monthly break-even analysis

All reads, no writes. Each call recomputes from a fresh snapshot.
"""

import calendar
import logging
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from tilin_ops.core.config import Settings, get_settings
from tilin_ops.db.accessor import DataAccessError, SalesDataAccessor
from tilin_ops.models.health import (
    AdvancedAnalytics,
    AdvancedAnalyticsResponse,
    PeakHour,
)
from tilin_ops.models.profit import (
    BreakEvenAnalysis,
    BreakEvenResponse,
    DailyMetrics,
    DailyMetricsResponse,
    ItemProfitBreakdown,
    PeriodProfitSummary,
    PeriodProfitSummaryResponse,
    ProductPerformance,
    SaleProfitResponse,
)
from tilin_ops.models.sales import Ingredient, Product, Sale, SaleStatus
from tilin_ops.services.commission_engine import (
    CommissionTable,
    attribute_sale,
    resolve_commission_rate,
    sale_commission,
)
from tilin_ops.services.consumption_engine import index_products
from tilin_ops.services.health_engine import compose_health_score

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class AnalyticsEngine:
    """Profitability and business health views."""

    def __init__(
        self,
        accessor: SalesDataAccessor,
        settings: Optional[Settings] = None,
    ) -> None:
        self._accessor = accessor
        self._settings = settings or get_settings()

    # =========================================================================
    # SNAPSHOT HELPERS
    # =========================================================================

    def _load_catalog(
        self,
    ) -> tuple[dict[uuid.UUID, Product], dict[uuid.UUID, Ingredient], CommissionTable]:
        products = index_products(self._accessor.products())
        ingredients = {i.id: i for i in self._accessor.ingredients()}
        table = CommissionTable.from_configs(self._accessor.platform_configs())
        return products, ingredients, table

    @staticmethod
    def _attribute_all(
        sales: Iterable[Sale],
        products: dict[uuid.UUID, Product],
        ingredients: dict[uuid.UUID, Ingredient],
        table: CommissionTable,
    ) -> list[ItemProfitBreakdown]:
        lines: list[ItemProfitBreakdown] = []
        for sale in sales:
            lines.extend(attribute_sale(sale, products, ingredients, table))
        return lines

    # =========================================================================
    # ADVANCED ANALYTICS
    # =========================================================================

    @staticmethod
    def peak_hours(sales: Iterable[Sale]) -> list[PeakHour]:
        counts = [0] * 24
        for sale in sales:
            counts[sale.date.hour] += 1
        return [PeakHour(hour=h, count=c) for h, c in enumerate(counts)]

    def top_products(self, lines: Iterable[ItemProfitBreakdown]) -> list[ProductPerformance]:
        performance: dict[uuid.UUID, ProductPerformance] = {}
        for line in lines:
            perf = performance.get(line.product_id)
            if perf is None:
                perf = ProductPerformance(id=line.product_id, name=line.product_name)
                performance[line.product_id] = perf
            perf.sales += line.quantity
            perf.revenue += line.revenue
            perf.profit += line.profit

        for perf in performance.values():
            perf.margin = perf.profit / perf.revenue * 100 if perf.revenue > 0 else ZERO

        ranked = sorted(performance.values(), key=lambda p: p.profit, reverse=True)
        return ranked[: self._settings.TOP_PRODUCTS_LIMIT]

    def advanced_analytics(self, now: Optional[datetime] = None) -> AdvancedAnalyticsResponse:
        """
        Health score and sales insights over the lookback window.

        Margin is profit over net revenue (sale totals minus commission).
        With no sales the health score is 0 (waiting for data).
        """
        if now is None:
            now = datetime.utcnow()
        lookback = self._settings.LOOKBACK_DAYS
        window_start = now - timedelta(days=lookback)

        try:
            sales = self._accessor.completed_sales_since(window_start)
            products, ingredients, table = self._load_catalog()
        except DataAccessError:
            logger.exception("Advanced analytics failed")
            return AdvancedAnalyticsResponse(success=False)

        net_revenue = ZERO
        for sale in sales:
            net_revenue += sale.total - sale_commission(
                sale, resolve_commission_rate(sale, table)
            )
        lines = self._attribute_all(sales, products, ingredients, table)
        total_profit = sum((line.profit for line in lines), ZERO)

        margin_pct = total_profit / net_revenue * 100 if net_revenue > 0 else ZERO
        low_stock = sum(1 for i in ingredients.values() if i.is_low_stock)
        sales_per_day = Decimal(len(sales)) / lookback

        health = compose_health_score(
            margin_pct=margin_pct,
            low_stock_count=low_stock,
            total_ingredients=len(ingredients),
            sales_per_day=sales_per_day,
            margin_target=Decimal(self._settings.HEALTH_MARGIN_TARGET_PCT),
            volume_target=Decimal(self._settings.HEALTH_VOLUME_TARGET_PER_DAY),
            margin_tip_pct=Decimal(self._settings.HEALTH_MARGIN_TIP_PCT),
            has_sales=bool(sales),
        )

        with_customer = sum(1 for s in sales if s.customer_id)
        recurrence = Decimal(with_customer) / len(sales) * 100 if sales else ZERO

        return AdvancedAnalyticsResponse(
            success=True,
            data=AdvancedAnalytics(
                health=health,
                peak_hours=self.peak_hours(sales),
                top_products=self.top_products(lines),
                customer_recurrence=recurrence,
                total_sales=len(sales),
            ),
        )

    # =========================================================================
    # PROFIT ATTRIBUTION
    # =========================================================================

    def summarize(
        self,
        sales: list[Sale],
        products: dict[uuid.UUID, Product],
        ingredients: dict[uuid.UUID, Ingredient],
        table: CommissionTable,
        start: datetime,
        end: datetime,
    ) -> PeriodProfitSummary:
        """Pure aggregation: revenue - cost - commission == net profit."""
        lines = self._attribute_all(sales, products, ingredients, table)
        revenue = sum((line.revenue for line in lines), ZERO)
        cost = sum((line.cost for line in lines), ZERO)
        commission = sum((line.commission for line in lines), ZERO)

        return PeriodProfitSummary(
            start=start,
            end=end,
            sale_count=len(sales),
            gross_sales=sum((s.total for s in sales), ZERO),
            revenue=revenue,
            cost=cost,
            commission=commission,
            net_profit=revenue - cost - commission,
        )

    def period_summary(
        self,
        start: datetime,
        end: Optional[datetime] = None,
    ) -> PeriodProfitSummaryResponse:
        if end is None:
            end = datetime.utcnow()
        try:
            sales = self._accessor.sales_between(
                start, end, statuses=[SaleStatus.COMPLETED]
            )
            products, ingredients, table = self._load_catalog()
        except DataAccessError:
            logger.exception("Period summary failed")
            return PeriodProfitSummaryResponse(success=False)

        return PeriodProfitSummaryResponse(
            success=True,
            data=self.summarize(sales, products, ingredients, table, start, end),
        )

    def sale_profit(self, sale_id: uuid.UUID) -> SaleProfitResponse:
        """Per-item breakdown for one sale."""
        try:
            sale = self._accessor.get_sale(sale_id)
            if sale is None:
                return SaleProfitResponse(success=False, error="Sale not found")
            products, ingredients, table = self._load_catalog()
        except DataAccessError:
            logger.exception("Sale profit breakdown failed for %s", sale_id)
            return SaleProfitResponse(success=False, error="Error loading sale")

        return SaleProfitResponse(
            success=True,
            data=attribute_sale(sale, products, ingredients, table),
        )

    # =========================================================================
    # DAILY METRICS
    # =========================================================================

    def daily_metrics(self, now: Optional[datetime] = None) -> DailyMetricsResponse:
        """
        Dashboard figures for completed sales since midnight.

        Commission follows the channel table (or the frozen per-sale
        rate); margin is estimated profit over gross sales.
        """
        if now is None:
            now = datetime.utcnow()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

        try:
            sales = self._accessor.sales_between(
                midnight, now, statuses=[SaleStatus.COMPLETED]
            )
            products, ingredients, table = self._load_catalog()
        except DataAccessError:
            logger.exception("Daily metrics failed")
            return DailyMetricsResponse(success=False)

        gross_sales = sum((s.total for s in sales), ZERO)
        commissions = sum(
            (sale_commission(s, resolve_commission_rate(s, table)) for s in sales),
            ZERO,
        )
        lines = self._attribute_all(sales, products, ingredients, table)
        cost = sum((line.cost for line in lines), ZERO)

        net_sales = gross_sales - commissions
        estimated_profit = net_sales - cost
        margin = estimated_profit / gross_sales * 100 if gross_sales > 0 else ZERO

        return DailyMetricsResponse(
            success=True,
            data=DailyMetrics(
                day=midnight.date(),
                order_count=len(sales),
                gross_sales=gross_sales,
                commissions=commissions,
                net_sales=net_sales,
                cost=cost,
                estimated_profit=estimated_profit,
                margin=margin,
            ),
        )

    # =========================================================================
    # BREAK-EVEN
    # =========================================================================

    def break_even(self, now: Optional[datetime] = None) -> BreakEvenResponse:
        """
        Break-even position for the current calendar month.

        Fixed costs come from fixed expenses; variable costs are recipe
        cost of completed sales plus non-fixed expenses.
        """
        if now is None:
            now = datetime.utcnow()
        first_day = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        last_day = first_day.replace(
            day=calendar.monthrange(now.year, now.month)[1],
            hour=23, minute=59, second=59, microsecond=999999,
        )

        try:
            expenses = self._accessor.expenses_between(first_day, last_day)
            sales = self._accessor.sales_between(
                first_day, last_day, statuses=[SaleStatus.COMPLETED]
            )
            products, ingredients, table = self._load_catalog()
        except DataAccessError:
            logger.exception("Break-even analysis failed")
            return BreakEvenResponse(success=False)

        fixed_costs = sum((e.amount for e in expenses if e.is_fixed), ZERO)
        extra_variable = sum((e.amount for e in expenses if not e.is_fixed), ZERO)

        total_sales = sum((s.total for s in sales), ZERO)
        lines = self._attribute_all(sales, products, ingredients, table)
        variable_costs = sum((line.cost for line in lines), ZERO) + extra_variable
        commissions = sum(
            (sale_commission(s, resolve_commission_rate(s, table)) for s in sales),
            ZERO,
        )

        gross_margin = total_sales - variable_costs - commissions
        ratio = gross_margin / total_sales if total_sales > 0 else ZERO

        # Losing money on every sale makes break-even unreachable; report 0
        break_even_point = fixed_costs / ratio if ratio > 0 else ZERO
        progress = total_sales / break_even_point * 100 if break_even_point > 0 else ZERO

        if total_sales == 0 and fixed_costs == 0:
            break_even_point = ZERO
            progress = ZERO

        return BreakEvenResponse(
            success=True,
            data=BreakEvenAnalysis(
                fixed_costs=fixed_costs,
                variable_costs=variable_costs,
                total_sales=total_sales,
                commissions=commissions,
                gross_margin=gross_margin,
                contribution_margin_ratio=ratio,
                break_even_point=break_even_point,
                progress=progress,
                has_activity=total_sales > 0 or fixed_costs > 0 or variable_costs > 0,
            ),
        )
