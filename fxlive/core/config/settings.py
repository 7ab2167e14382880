"""Configuration management for the fxlive dashboard core."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from fxlive.core.logging import logger

DEFAULT_BASE_CURRENCY = "SGD"
DEFAULT_TIMEZONE = "Asia/Singapore"
DEFAULT_WATCHLIST = ["USD", "EUR", "JPY", "GBP", "AUD"]


@dataclass
class ProviderConfig:
    """Upstream provider configuration."""

    name: str = "frankfurter"
    base_url: str = "https://api.frankfurter.app"
    timeout: float = 30.0
    user_agent: str = "fxlive/0.1.0"


@dataclass
class RefreshConfig:
    """Polling refresh configuration."""

    auto_refresh: bool = True
    interval_seconds: float = 30.0
    min_interval_seconds: float = 15.0
    max_symbols: int = 20


@dataclass
class DashboardConfig:
    """Dashboard-wide settings."""

    base_currency: str = DEFAULT_BASE_CURRENCY
    timezone: str = DEFAULT_TIMEZONE
    default_range: str = "1M"
    default_watchlist: list[str] = field(default_factory=lambda: list(DEFAULT_WATCHLIST))


@dataclass
class ChartConfig:
    """Chart geometry settings."""

    padding: float = 24.0
    min_width: int = 320
    min_height: int = 220
    label_margin: float = 90.0


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: str | None = None


@dataclass
class FxLiveConfig:
    """Top-level fxlive configuration."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    chart: ChartConfig = field(default_factory=ChartConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "FxLiveConfig":
        """Build a configuration from a (possibly partial) nested dict."""
        return cls(
            provider=ProviderConfig(**config_dict.get("provider", {})),
            refresh=RefreshConfig(**config_dict.get("refresh", {})),
            dashboard=DashboardConfig(**config_dict.get("dashboard", {})),
            chart=ChartConfig(**config_dict.get("chart", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": asdict(self.provider),
            "refresh": asdict(self.refresh),
            "dashboard": asdict(self.dashboard),
            "chart": asdict(self.chart),
            "logging": asdict(self.logging),
        }


class ConfigManager:
    """Loads configuration from a TOML file layered with environment overrides."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """Initialise the manager.

        Args:
            config_path: TOML file to read; defaults to ``~/.fxlive/config.toml``
            use_env: apply ``FXLIVE_*`` environment overrides on top of the file
        """
        self.config_path = config_path or Path.home() / ".fxlive" / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> FxLiveConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
                # Validate the file on its own before layering env values on top.
                FxLiveConfig.from_dict(config_dict)
            except (OSError, tomllib.TOMLDecodeError, TypeError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                config_dict = {}

        if self.use_env:
            _deep_update(config_dict, load_config_from_env())
        return FxLiveConfig.from_dict(config_dict)

    def get_config(self) -> FxLiveConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates, e.g. ``update_config(refresh={"interval_seconds": 60})``."""
        config_dict = self.config.to_dict()
        _deep_update(config_dict, updates)
        self.config = FxLiveConfig.from_dict(config_dict)


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


def get_default_config() -> FxLiveConfig:
    return FxLiveConfig()


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config_from_env() -> dict[str, Any]:
    """Collect ``FXLIVE_*`` environment overrides into a nested dict."""
    config: dict[str, Any] = {}

    provider_config: dict[str, Any] = {}
    if os.getenv("FXLIVE_PROVIDER_BASE_URL"):
        provider_config["base_url"] = os.getenv("FXLIVE_PROVIDER_BASE_URL")
    provider_timeout = os.getenv("FXLIVE_PROVIDER_TIMEOUT")
    if provider_timeout is not None:
        provider_config["timeout"] = float(provider_timeout)
    if provider_config:
        config["provider"] = provider_config

    refresh_config: dict[str, Any] = {}
    auto_refresh = os.getenv("FXLIVE_AUTO_REFRESH")
    if auto_refresh is not None:
        refresh_config["auto_refresh"] = _env_bool(auto_refresh)
    interval = os.getenv("FXLIVE_REFRESH_INTERVAL")
    if interval is not None:
        refresh_config["interval_seconds"] = float(interval)
    if refresh_config:
        config["refresh"] = refresh_config

    dashboard_config: dict[str, Any] = {}
    if os.getenv("FXLIVE_BASE_CURRENCY"):
        dashboard_config["base_currency"] = os.getenv("FXLIVE_BASE_CURRENCY", "").strip().upper()
    watchlist = os.getenv("FXLIVE_WATCHLIST")
    if watchlist:
        dashboard_config["default_watchlist"] = [s.strip().upper() for s in watchlist.split(",") if s.strip()]
    if dashboard_config:
        config["dashboard"] = dashboard_config

    logging_config: dict[str, Any] = {}
    if os.getenv("FXLIVE_LOG_LEVEL"):
        logging_config["level"] = os.getenv("FXLIVE_LOG_LEVEL")
    if os.getenv("FXLIVE_LOG_FILE"):
        logging_config["file"] = os.getenv("FXLIVE_LOG_FILE")
    if logging_config:
        config["logging"] = logging_config

    return config
