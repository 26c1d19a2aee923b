"""
Settings and environment management module for the Agency Dashboard backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for local development
- Singleton pattern via @lru_cache for efficient access
- Upstream data API location, timeout and retry budget
- Display defaults shared by the reporting tables

Environment Variables:
- DATA_API_URL: Base URL of the upstream data API (default: http://localhost:9000/latest)
- DATA_API_TIMEOUT_SECONDS: Per-request timeout in seconds (default: 30)
- DATA_API_MAX_RETRIES: Retries after a rejected credential or transport error (default: 1)
- DEFAULT_GRANULARITY: Chart granularity used when a request omits one (default: Daily)
- CORS_ORIGINS: JSON list of allowed origins for the dashboard shell
- NO_SALES_SENTINEL: Display value for a CPA with zero sales (default: "—")
- LOG_LEVEL: Root logging level (default: INFO)

Usage:
    from agency_dashboard.core.config import get_settings

    settings = get_settings()
    base_url = settings.data_api_url
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from agency_dashboard.models.enums import Granularity


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The class inherits from pydantic-settings BaseSettings which provides:
    - Automatic loading from environment variables (case-insensitive)
    - Support for .env file loading
    - Type validation and coercion
    - Default values for optional settings

    Attributes:
        data_api_url: Base URL of the upstream data API.
        data_api_timeout_seconds: Timeout applied to every upstream request.
        data_api_max_retries: How many times a request is re-sent after a 401
            (with a refreshed credential) or a transport failure.
        default_granularity: Granularity used when a chart request omits one.
        cors_origins: Origins allowed by the CORS middleware.
        no_sales_sentinel: Text rendered in place of a CPA when there are no sales.
        log_level: Logging level passed to logging.basicConfig.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Upstream Data API
    # =========================================================================

    # Pre-aggregated metrics are served by a remote API; this service never
    # computes them from raw call logs.
    data_api_url: str = 'http://localhost:9000/latest'

    data_api_timeout_seconds: float = 30.0

    # One retry covers the common case of an expired bearer token.
    data_api_max_retries: int = 1

    # =========================================================================
    # HTTP Surface
    # =========================================================================

    cors_origins: List[str] = [
        'http://localhost:5173',  # Vite dev server used by the desktop shell
        'http://127.0.0.1:5173',
    ]

    # =========================================================================
    # Presentation Defaults
    # =========================================================================

    default_granularity: Granularity = Granularity.DAILY

    no_sales_sentinel: str = '—'

    log_level: str = 'INFO'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns a cached Settings instance so environment variables are only
    read once during the application lifecycle.

    Returns:
        Settings: The application settings instance.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
