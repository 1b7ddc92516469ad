from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""
    
    # Database
    DATABASE_URL: str = "sqlite:///./tilin_ops.db"
    
    # App
    APP_NAME: str = "TILIN OPS"
    DEBUG: bool = True
    
    # Depletion forecasting
    LOOKBACK_DAYS: int = 30
    DAYS_REMAINING_CAP: int = 999
    CRITICAL_DAYS: int = 3
    WARNING_DAYS: int = 7
    
    # Kitchen load (single serial line)
    KITCHEN_SETUP_MINUTES: int = 5
    KITCHEN_MINUTES_PER_UNIT: int = 2
    
    # Business health
    HEALTH_MARGIN_TARGET_PCT: int = 40
    HEALTH_MARGIN_TIP_PCT: int = 30
    HEALTH_VOLUME_TARGET_PER_DAY: int = 10
    TOP_PRODUCTS_LIMIT: int = 5
    
    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
