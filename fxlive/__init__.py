"""fxlive - live FX rate tracking against a fixed base currency.

Fetches the latest and historical rates from the Frankfurter API, keeps a
polling refresh stream that survives upstream failures, and turns rate series
into chart geometry with nearest-point hover resolution.

Examples:
    >>> import asyncio
    >>> from fxlive import FxService
    >>>
    >>> async def main():
    ...     async with FxService() as service:
    ...         snapshot = await service.get_latest(["USD", "JPY"])
    ...         series = await service.get_series("JPY", "3M")
    ...         print(snapshot.rates, len(series.points))
    >>>
    >>> asyncio.run(main())
"""

from fxlive.core import (
    ChartGeometry,
    ConfigManager,
    FxLiveConfig,
    FxService,
    RangeToken,
    RateSnapshot,
    RefreshController,
    RemoteFxClient,
    SyncState,
    TimeSeries,
    TimeSeriesPoint,
)
from fxlive.core.exceptions import AbortedOperation, DataValidationError, FxLiveError, UpstreamError

__version__ = "0.1.0"

__all__ = [
    "ChartGeometry",
    "ConfigManager",
    "FxLiveConfig",
    "FxService",
    "RangeToken",
    "RateSnapshot",
    "RefreshController",
    "RemoteFxClient",
    "SyncState",
    "TimeSeries",
    "TimeSeriesPoint",
    "FxLiveError",
    "DataValidationError",
    "UpstreamError",
    "AbortedOperation",
]
