"""Data models module."""

from fxlive.core.models.geometry import (
    AxisBounds,
    HoverState,
    Marker,
    MarkerKind,
    PathGeometry,
    ProjectedSeries,
    Vertex,
    Viewport,
)
from fxlive.core.models.market import RangeToken, normalize_code, normalize_codes, validate_code
from fxlive.core.models.rates import DateWindow, RateSnapshot, TimeSeries, TimeSeriesPoint

__all__ = [
    "RangeToken",
    "normalize_code",
    "normalize_codes",
    "validate_code",
    "DateWindow",
    "RateSnapshot",
    "TimeSeries",
    "TimeSeriesPoint",
    "Viewport",
    "AxisBounds",
    "Vertex",
    "PathGeometry",
    "Marker",
    "MarkerKind",
    "ProjectedSeries",
    "HoverState",
]
