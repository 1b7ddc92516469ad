"""
TILIN Ops - Business Health Score Composer

Score (0-100) = margin (40 pts) + inventory (30 pts) + sales volume (30 pts)

Tips are rule-based and evaluated in a fixed order:
margin, stock, volume. If none fires a single "all healthy" tip is emitted.
"""

from decimal import Decimal, ROUND_HALF_UP

from tilin_ops.models.health import (
    HealthBreakdown,
    HealthMetric,
    HealthScore,
    HealthTip,
    HealthTipKind,
    StockHealthMetric,
)

MARGIN_MAX_POINTS = 40
STOCK_MAX_POINTS = 30
VOLUME_MAX_POINTS = 30

DEFAULT_MARGIN_TIP_PCT = Decimal("30")


def _ratio(value: Decimal, target: Decimal) -> Decimal:
    """value / target clamped to [0, 1]; a non-positive target counts as met."""
    if target <= 0:
        return Decimal("1")
    return max(Decimal("0"), min(value / target, Decimal("1")))


def margin_metric(margin_pct: Decimal, target: Decimal) -> HealthMetric:
    return HealthMetric(
        value=margin_pct,
        target=target,
        score=_ratio(margin_pct, target) * MARGIN_MAX_POINTS,
        max=MARGIN_MAX_POINTS,
    )


def stock_metric(low_stock_count: int, total_ingredients: int) -> StockHealthMetric:
    if total_ingredients > 0:
        healthy_share = 1 - Decimal(low_stock_count) / Decimal(total_ingredients)
    else:
        healthy_share = Decimal("1")
    return StockHealthMetric(
        value=healthy_share * 100,
        target=Decimal("100"),
        score=healthy_share * STOCK_MAX_POINTS,
        max=STOCK_MAX_POINTS,
        low_stock_count=low_stock_count,
        total_ingredients=total_ingredients,
    )


def volume_metric(sales_per_day: Decimal, target: Decimal) -> HealthMetric:
    return HealthMetric(
        value=sales_per_day,
        target=target,
        score=_ratio(sales_per_day, target) * VOLUME_MAX_POINTS,
        max=VOLUME_MAX_POINTS,
    )


def build_tips(
    breakdown: HealthBreakdown,
    margin_tip_pct: Decimal = DEFAULT_MARGIN_TIP_PCT,
) -> list[HealthTip]:
    tips: list[HealthTip] = []

    if breakdown.margin.value < margin_tip_pct:
        tips.append(HealthTip(
            kind=HealthTipKind.MARGIN,
            title="Improve net margin",
            description=(
                "Review recipe costs and delivery commissions. "
                f"Your margin is below {margin_tip_pct}%."
            ),
            link="/admin/analytics",
        ))

    if breakdown.stock.low_stock_count > 0:
        tips.append(HealthTip(
            kind=HealthTipKind.STOCK,
            title="Restock critical ingredients",
            description=(
                f"{breakdown.stock.low_stock_count} ingredients are at or below "
                "their minimum stock. This affects availability."
            ),
            link="/admin/ingredients",
        ))

    if breakdown.volume.value < breakdown.volume.target:
        tips.append(HealthTip(
            kind=HealthTipKind.VOLUME,
            title="Increase sales volume",
            description=(
                f"Daily average is {breakdown.volume.value:.1f} sales. "
                f"The baseline target is {breakdown.volume.target}. Consider promotions."
            ),
            link="/admin/sales/new",
        ))

    if not tips:
        tips.append(HealthTip(
            kind=HealthTipKind.HEALTHY,
            title="All healthy",
            description="Your business is in good shape. Keep it up!",
        ))

    return tips


def compose_health_score(
    margin_pct: Decimal,
    low_stock_count: int,
    total_ingredients: int,
    sales_per_day: Decimal,
    margin_target: Decimal = Decimal("40"),
    volume_target: Decimal = Decimal("10"),
    margin_tip_pct: Decimal = DEFAULT_MARGIN_TIP_PCT,
    has_sales: bool = True,
) -> HealthScore:
    """
    Combine margin, inventory and volume into one score.

    Args:
        margin_pct: Actual net margin percentage
        low_stock_count: Ingredients at or below minimum stock
        total_ingredients: All tracked ingredients
        sales_per_day: Average completed sales per day
        margin_target: Margin percentage worth full points
        volume_target: Sales per day worth full points
        margin_tip_pct: Margin below which the margin tip is emitted
        has_sales: False when the window holds no sales; the score is 0
            until there is data, the breakdown is still reported
    """
    breakdown = HealthBreakdown(
        margin=margin_metric(Decimal(margin_pct), Decimal(margin_target)),
        stock=stock_metric(low_stock_count, total_ingredients),
        volume=volume_metric(Decimal(sales_per_day), Decimal(volume_target)),
    )
    total = Decimal("0")
    if has_sales:
        total = breakdown.margin.score + breakdown.stock.score + breakdown.volume.score

    return HealthScore(
        score=int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
        breakdown=breakdown,
        tips=build_tips(breakdown, Decimal(margin_tip_pct)),
    )
