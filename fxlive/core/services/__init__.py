"""Core services."""

from fxlive.core.services.dates import DateWindowResolver, resolve_date_window
from fxlive.core.services.fx import FxService
from fxlive.core.services.geometry import ChartGeometry, SeriesSummary, project, resolve_hover, summarize
from fxlive.core.services.refresh import RefreshController, RefreshStatus, SyncState

__all__ = [
    "DateWindowResolver",
    "resolve_date_window",
    "RefreshController",
    "RefreshStatus",
    "SyncState",
    "ChartGeometry",
    "SeriesSummary",
    "project",
    "resolve_hover",
    "summarize",
    "FxService",
]
