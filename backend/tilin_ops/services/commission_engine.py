"""
TILIN Ops - Commission & Profit Attributor
Apportions delivery-platform commission across line items by revenue share.

LOGIC:
1. Rate: negative sale discount -> frozen abs(discount)/100,
   otherwise the configured rate for the sale's channel (0 if unknown)
2. Sale commission = sale total * rate
3. Item commission = item revenue * (sale commission / sale total)
4. Item profit = revenue - recipe cost - item commission

KNOWN LIMITATION:
- Recipe cost uses present-day ingredient cost, not the cost at the
  time of sale
"""

import re
import uuid
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from tilin_ops.models.profit import Channel, CommissionRate, ItemProfitBreakdown
from tilin_ops.models.sales import Ingredient, PlatformConfig, Product, Sale, SaleItem

UNKNOWN_PRODUCT_LABEL = "Unknown"

# Short codes matched whole (upper-case, alphanumerics only)
CHANNEL_CODES: dict[str, Channel] = {
    "PY": Channel.PEYA,
    "MP": Channel.MERCADOPAGO,
}

# Substring rules, checked in order; first match wins
CHANNEL_RULES: tuple[tuple[str, Channel], ...] = (
    ("PEDIDOS", Channel.PEYA),
    ("PEYA", Channel.PEYA),
    ("RAPPI", Channel.RAPPI),
    ("MERCADO", Channel.MERCADOPAGO),
    ("LOCAL", Channel.LOCAL),
    ("COUNTER", Channel.LOCAL),
    ("MOSTRADOR", Channel.LOCAL),
    ("WHATSAPP", Channel.LOCAL),
)

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def normalize_channel(name: Optional[str]) -> Channel:
    """
    Map a free-text channel name to a Channel.

    Empty names are in-house sales. Short codes must match whole;
    longer names match on a known substring ("PedidosYa Delivery" is
    PEYA). Anything else is UNKNOWN rather than silently LOCAL.
    """
    if not name or not name.strip():
        return Channel.LOCAL
    key = _NON_ALNUM.sub("", name.upper().strip())
    if key in CHANNEL_CODES:
        return CHANNEL_CODES[key]
    for fragment, channel in CHANNEL_RULES:
        if fragment in key:
            return channel
    return Channel.UNKNOWN


class CommissionTable:
    """Commission rate (0-1) per channel."""

    def __init__(self, rates: Optional[Mapping[Channel, Decimal]] = None) -> None:
        self._rates: dict[Channel, Decimal] = dict(rates or {})

    @classmethod
    def from_configs(cls, configs: Iterable[PlatformConfig]) -> "CommissionTable":
        rates: dict[Channel, Decimal] = {}
        for config in configs:
            channel = normalize_channel(config.name)
            if channel == Channel.UNKNOWN:
                continue
            rates[channel] = config.commission / 100
        return cls(rates)

    def rate_for(self, channel: Channel) -> Decimal:
        return self._rates.get(channel, Decimal("0"))


def resolve_commission_rate(sale: Sale, table: CommissionTable) -> CommissionRate:
    """Frozen per-sale override first, then the channel table."""
    channel = normalize_channel(sale.channel)
    if sale.discount < 0:
        return CommissionRate(
            rate=abs(sale.discount) / 100,
            frozen=True,
            channel=channel,
        )
    return CommissionRate(rate=table.rate_for(channel), channel=channel)


def sale_commission(sale: Sale, rate: CommissionRate) -> Decimal:
    return sale.total * rate.rate


def commission_factor(sale: Sale, rate: CommissionRate) -> Decimal:
    """Share of each revenue unit paid as commission; 0 for a zero total."""
    if sale.total == 0:
        return Decimal("0")
    return sale_commission(sale, rate) / sale.total


def recipe_unit_cost(
    product: Optional[Product],
    ingredients: Mapping[uuid.UUID, Ingredient],
) -> Decimal:
    """Cost of one unit at present-day ingredient cost."""
    if product is None:
        return Decimal("0")
    total = Decimal("0")
    for recipe_item in product.recipe:
        ingredient = ingredients.get(recipe_item.ingredient_id)
        if ingredient is not None:
            total += recipe_item.quantity * ingredient.cost
    return total


def _breakdown(
    sale: Sale,
    item: SaleItem,
    rate: CommissionRate,
    products: Mapping[uuid.UUID, Product],
    ingredients: Mapping[uuid.UUID, Ingredient],
) -> ItemProfitBreakdown:
    product = products.get(item.product_id)
    revenue = item.revenue
    cost = recipe_unit_cost(product, ingredients) * item.quantity
    commission = revenue * commission_factor(sale, rate)

    return ItemProfitBreakdown(
        sale_id=sale.id,
        product_id=item.product_id,
        product_name=product.name if product else UNKNOWN_PRODUCT_LABEL,
        quantity=item.quantity,
        revenue=revenue,
        cost=cost,
        commission=commission,
        profit=revenue - cost - commission,
        commission_rate=rate,
    )


def attribute_sale(
    sale: Sale,
    products: Mapping[uuid.UUID, Product],
    ingredients: Mapping[uuid.UUID, Ingredient],
    table: CommissionTable,
) -> list[ItemProfitBreakdown]:
    """One breakdown per line item of the sale."""
    rate = resolve_commission_rate(sale, table)
    return [
        _breakdown(sale, item, rate, products, ingredients)
        for item in sale.items
    ]


def attribute_item(
    sale: Sale,
    product_id: uuid.UUID,
    products: Mapping[uuid.UUID, Product],
    ingredients: Mapping[uuid.UUID, Ingredient],
    table: CommissionTable,
) -> Optional[ItemProfitBreakdown]:
    """
    Profit of a target product within a sale.

    Several lines for the same product are merged into one breakdown.

    Returns:
        None when the product is not part of the sale
    """
    lines = [
        b for b in attribute_sale(sale, products, ingredients, table)
        if b.product_id == product_id
    ]
    if not lines:
        return None
    if len(lines) == 1:
        return lines[0]

    first = lines[0]
    return first.model_copy(
        update={
            "quantity": sum(b.quantity for b in lines),
            "revenue": sum((b.revenue for b in lines), Decimal("0")),
            "cost": sum((b.cost for b in lines), Decimal("0")),
            "commission": sum((b.commission for b in lines), Decimal("0")),
            "profit": sum((b.profit for b in lines), Decimal("0")),
        }
    )
