"""
TILIN Ops - Canonical Money & Quantity Types
=============================================

RULE: No floats allowed for money or quantities.

Money:  Decimal amount in the store currency
        - Stored as NUMERIC in DB
        - Serialized as string in JSON

Quantity: Decimal (for partial units like 0.1 kg of cheddar)
        - Stored as NUMERIC in DB
        - Serialized as string in JSON
        - Never use float

All domain schemas import their numeric types from here.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer, WithJsonSchema


def _to_decimal(v: Any, kind: str) -> Decimal:
    if isinstance(v, float):
        raise ValueError(
            f"Float not allowed for {kind}. Use Decimal or string. Got: {v}"
        )

    if isinstance(v, bool):
        raise ValueError(f"Invalid {kind} type: {type(v)}")

    if isinstance(v, Decimal):
        return v

    if isinstance(v, (str, int)):
        try:
            return Decimal(str(v))
        except InvalidOperation:
            raise ValueError(f"Invalid {kind}: {v}")

    raise ValueError(f"Invalid {kind} type: {type(v)}")


def _serialize_decimal(v: Decimal) -> str:
    """Serialize as fixed-point string (prevents JSON float issues)."""
    return format(v, "f")


# =============================================================================
# MONEY
# =============================================================================

def _validate_money(v: Any) -> Decimal:
    return _to_decimal(v, "money")


Money = Annotated[
    Decimal,
    BeforeValidator(_validate_money),
    PlainSerializer(_serialize_decimal),
    WithJsonSchema({"type": "string", "description": "Money amount as decimal string"}),
]


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round a money amount for display. Arithmetic stays unrounded."""
    return amount.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


# =============================================================================
# QUANTITY
# =============================================================================
# Ingredient stock and recipe usage; may be negative for stock
# (waste deduction does not clamp)

def _validate_quantity(v: Any) -> Decimal:
    return _to_decimal(v, "quantity")


Quantity = Annotated[
    Decimal,
    BeforeValidator(_validate_quantity),
    PlainSerializer(_serialize_decimal),
    WithJsonSchema({"type": "string", "description": "Decimal quantity as string"}),
]


# =============================================================================
# PERCENTAGE (0-100)
# =============================================================================

def _validate_percentage(v: Any) -> Decimal:
    """Validate percentage as Decimal 0-100."""
    dec = _to_decimal(v, "percentage")

    if dec < 0 or dec > 100:
        raise ValueError(f"Percentage must be 0-100, got: {dec}")

    return dec


Percentage = Annotated[
    Decimal,
    BeforeValidator(_validate_percentage),
    PlainSerializer(_serialize_decimal),
    WithJsonSchema({"type": "string", "description": "Percentage 0-100"}),
]


__all__ = [
    "Money",
    "Quantity",
    "Percentage",
    "round_money",
]
