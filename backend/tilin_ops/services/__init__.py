# Forecasting & analytics engines
from tilin_ops.services.analytics_engine import AnalyticsEngine
from tilin_ops.services.consumption_engine import aggregate_consumption
from tilin_ops.services.depletion_engine import DepletionEngine
from tilin_ops.services.kitchen_engine import (
    KitchenEngine,
    KitchenLoadStrategy,
    SerialLineLoadStrategy,
)
from tilin_ops.services.operations_service import OperationsService
from tilin_ops.services.order_fsm import InvalidTransition, advance, refund

__all__ = [
    "AnalyticsEngine",
    "aggregate_consumption",
    "DepletionEngine",
    "KitchenEngine",
    "KitchenLoadStrategy",
    "SerialLineLoadStrategy",
    "OperationsService",
    "InvalidTransition",
    "advance",
    "refund",
]
