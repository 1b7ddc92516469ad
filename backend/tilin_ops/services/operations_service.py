"""
TILIN Ops - Operations Service
Single-row writes near the forecasting core: order status, refunds, waste.

Each write touches one entity and relies on the store's own atomicity.
"""

import logging
import uuid
from decimal import Decimal
from typing import Callable, Optional

from tilin_ops.db.accessor import DataAccessError, SalesDataAccessor
from tilin_ops.models.kitchen import OperationFailure, OperationResult
from tilin_ops.models.sales import SaleStatus, WasteLog
from tilin_ops.services.order_fsm import InvalidTransition, advance, refund

logger = logging.getLogger(__name__)


class OperationsService:
    """Service for kitchen and back-office writes."""

    def __init__(self, accessor: SalesDataAccessor):
        self._accessor = accessor

    def _transition(
        self,
        sale_id: uuid.UUID,
        step: Callable[[SaleStatus], SaleStatus],
        action: str,
    ) -> OperationResult:
        try:
            sale = self._accessor.get_sale(sale_id)
            if sale is None:
                return OperationResult(
                    success=False,
                    error="Sale not found",
                    reason=OperationFailure.NOT_FOUND,
                )
            next_status = step(sale.status)
            self._accessor.update_sale_status(sale_id, next_status)
        except InvalidTransition as exc:
            return OperationResult(
                success=False,
                error=str(exc),
                reason=OperationFailure.INVALID_TRANSITION,
            )
        except DataAccessError:
            logger.exception("Failed to %s sale %s", action, sale_id)
            return OperationResult(
                success=False,
                error=f"Failed to {action} sale",
                reason=OperationFailure.STORE_ERROR,
            )

        logger.info("Sale %s: %s -> %s", sale_id, sale.status.value, next_status.value)
        return OperationResult(success=True, status=next_status)

    def advance_order(self, sale_id: uuid.UUID) -> OperationResult:
        """Move an order one step along the kitchen line."""
        return self._transition(sale_id, advance, "advance")

    def refund_sale(self, sale_id: uuid.UUID) -> OperationResult:
        """Mark a non-terminal order refunded."""
        return self._transition(sale_id, refund, "refund")

    def log_waste(
        self,
        description: str,
        cost: Decimal,
        ingredient_id: Optional[uuid.UUID] = None,
        quantity: Optional[Decimal] = None,
    ) -> OperationResult:
        """
        Record waste and deduct the wasted quantity from stock.

        Stock is not clamped and may go negative.
        """
        entry = WasteLog(
            description=description,
            cost=cost,
            ingredient_id=ingredient_id,
            quantity=quantity,
        )
        try:
            self._accessor.record_waste(entry)
            if ingredient_id and quantity:
                self._accessor.decrement_ingredient_stock(ingredient_id, quantity)
        except DataAccessError:
            logger.exception("Failed to log waste: %s", description)
            return OperationResult(
                success=False,
                error="Failed to log waste",
                reason=OperationFailure.STORE_ERROR,
            )

        return OperationResult(success=True)
