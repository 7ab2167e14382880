"""fxlive core: date windows, rate normalization, refresh loop and chart geometry."""

from fxlive.core.config.settings import ConfigManager, FxLiveConfig
from fxlive.core.data.providers.frankfurter import RemoteFxClient
from fxlive.core.models.market import RangeToken
from fxlive.core.models.rates import RateSnapshot, TimeSeries, TimeSeriesPoint
from fxlive.core.services.fx import FxService
from fxlive.core.services.geometry import ChartGeometry
from fxlive.core.services.refresh import RefreshController, SyncState

__all__ = [
    "ConfigManager",
    "FxLiveConfig",
    "RemoteFxClient",
    "RangeToken",
    "RateSnapshot",
    "TimeSeries",
    "TimeSeriesPoint",
    "FxService",
    "ChartGeometry",
    "RefreshController",
    "SyncState",
]
