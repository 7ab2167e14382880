"""Configuration management module."""

from fxlive.core.config.settings import (
    DEFAULT_BASE_CURRENCY,
    DEFAULT_TIMEZONE,
    DEFAULT_WATCHLIST,
    ChartConfig,
    ConfigManager,
    DashboardConfig,
    FxLiveConfig,
    LoggingConfig,
    ProviderConfig,
    RefreshConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "FxLiveConfig",
    "ProviderConfig",
    "RefreshConfig",
    "DashboardConfig",
    "ChartConfig",
    "LoggingConfig",
    "DEFAULT_BASE_CURRENCY",
    "DEFAULT_TIMEZONE",
    "DEFAULT_WATCHLIST",
    "get_default_config",
    "load_config_from_env",
]
