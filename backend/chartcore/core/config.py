"""
Chart Core Configuration

Read from environment variables (or backend/.env). Chart limits such as
the series cap and the pinch floor live here too.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service, chart, cache and data-source settings."""

    # Application
    app_name: str = "StockChart Core"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (mobile dev server / web preview)
    allowed_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Chart series limits
    max_series_points: int = 600
    min_visible_points: int = 10
    min_zoom_width_percent: float = 5.0

    # Cache
    redis_url: str = "redis://localhost:6379"
    enable_redis: bool = False
    chart_cache_ttl: int = 300  # 5 minutes for historical data

    # Polygon.io (aggregates)
    polygon_api_key: Optional[str] = None
    polygon_base_url: str = "https://api.polygon.io"
    http_timeout_seconds: float = 10.0

    # Feature Flags
    enable_mock_data: bool = True  # Mock generator as last-resort source

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
