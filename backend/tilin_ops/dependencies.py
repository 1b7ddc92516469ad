"""Dependency injection helpers for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import Session

from tilin_ops.core.config import Settings, get_settings
from tilin_ops.db.accessor import SalesDataAccessor
from tilin_ops.db.session import get_db
from tilin_ops.db.sql import SqlSalesDataAccessor
from tilin_ops.services.analytics_engine import AnalyticsEngine
from tilin_ops.services.depletion_engine import DepletionEngine
from tilin_ops.services.kitchen_engine import KitchenEngine
from tilin_ops.services.operations_service import OperationsService


def get_accessor(db: Session = Depends(get_db)) -> SalesDataAccessor:
    """Accessor bound to the request's session. Override in tests."""
    return SqlSalesDataAccessor(db)


def get_depletion_engine(
    accessor: SalesDataAccessor = Depends(get_accessor),
    settings: Settings = Depends(get_settings),
) -> DepletionEngine:
    return DepletionEngine(accessor, settings)


def get_kitchen_engine(
    accessor: SalesDataAccessor = Depends(get_accessor),
    settings: Settings = Depends(get_settings),
) -> KitchenEngine:
    return KitchenEngine(accessor, settings=settings)


def get_analytics_engine(
    accessor: SalesDataAccessor = Depends(get_accessor),
    settings: Settings = Depends(get_settings),
) -> AnalyticsEngine:
    return AnalyticsEngine(accessor, settings)


def get_operations_service(
    accessor: SalesDataAccessor = Depends(get_accessor),
) -> OperationsService:
    return OperationsService(accessor)
