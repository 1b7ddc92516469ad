from tilin_ops.models.sales import (
    Expense,
    Ingredient,
    PlatformConfig,
    Product,
    RecipeItem,
    Sale,
    SaleItem,
    SaleStatus,
    WasteLog,
)
from tilin_ops.models.predictions import (
    RunwayKind,
    StockPrediction,
    StockPredictionResponse,
    StockRunway,
    StockStatus,
)
from tilin_ops.models.kitchen import (
    KitchenOrder,
    KitchenOrderItem,
    KitchenOverview,
    KitchenOverviewResponse,
    OperationFailure,
    OperationResult,
)
from tilin_ops.models.profit import (
    BreakEvenAnalysis,
    Channel,
    CommissionRate,
    DailyMetrics,
    ItemProfitBreakdown,
    PeriodProfitSummary,
    ProductPerformance,
)
from tilin_ops.models.health import (
    AdvancedAnalytics,
    HealthBreakdown,
    HealthMetric,
    HealthScore,
    HealthTip,
    HealthTipKind,
    PeakHour,
    StockHealthMetric,
)

__all__ = [
    "Expense",
    "Ingredient",
    "PlatformConfig",
    "Product",
    "RecipeItem",
    "Sale",
    "SaleItem",
    "SaleStatus",
    "WasteLog",
    "RunwayKind",
    "StockPrediction",
    "StockPredictionResponse",
    "StockRunway",
    "StockStatus",
    "KitchenOrder",
    "KitchenOrderItem",
    "KitchenOverview",
    "KitchenOverviewResponse",
    "OperationFailure",
    "OperationResult",
    "BreakEvenAnalysis",
    "Channel",
    "CommissionRate",
    "DailyMetrics",
    "ItemProfitBreakdown",
    "PeriodProfitSummary",
    "ProductPerformance",
    "AdvancedAnalytics",
    "HealthBreakdown",
    "HealthMetric",
    "HealthScore",
    "HealthTip",
    "HealthTipKind",
    "PeakHour",
    "StockHealthMetric",
]
