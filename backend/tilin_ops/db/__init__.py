from tilin_ops.db.accessor import DataAccessError, SalesDataAccessor
from tilin_ops.db.memory import InMemorySalesDataAccessor
from tilin_ops.db.sql import SqlSalesDataAccessor

__all__ = [
    "DataAccessError",
    "SalesDataAccessor",
    "InMemorySalesDataAccessor",
    "SqlSalesDataAccessor",
]
