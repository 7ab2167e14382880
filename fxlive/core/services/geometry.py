"""Series geometry: value/index to viewport coordinates and hover resolution.

Nothing here raises on short inputs. Fewer than two points yields a
projection with ``path=None`` (``insufficient_data``), and hover resolution
returns ``None`` for an empty sequence.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

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
from fxlive.core.models.rates import TimeSeriesPoint

AXIS_PADDING_RATIO = 0.05
FLAT_AXIS_PADDING = 0.01
LABEL_OFFSET = 8.0
LABEL_MIN_X = 16.0
LABEL_MIN_Y = 14.0
DEFAULT_LABEL_MARGIN = 90.0


def axis_bounds(points: Sequence[TimeSeriesPoint]) -> AxisBounds:
    """Value range padded by 5% of the spread, or by 0.01 for a flat series."""
    if not points:
        low = high = 0.0
    else:
        values = [p.v for p in points]
        low, high = min(values), max(values)
    if low == high:
        return AxisBounds(low - FLAT_AXIS_PADDING, high + FLAT_AXIS_PADDING)
    spread = high - low
    return AxisBounds(low - spread * AXIS_PADDING_RATIO, high + spread * AXIS_PADDING_RATIO)


def x_for(index: int, count: int, viewport: Viewport) -> float:
    return viewport.padding + (index / max(count - 1, 1)) * viewport.inner_width


def y_for(value: float, bounds: AxisBounds, viewport: Viewport) -> float:
    ratio = (value - bounds.min_value) / bounds.span
    return viewport.padding + (1 - ratio) * viewport.inner_height


def _first_index_of(points: Sequence[TimeSeriesPoint], value: float) -> int:
    return next(i for i, p in enumerate(points) if p.v == value)


def _markers(
    points: Sequence[TimeSeriesPoint],
    bounds: AxisBounds,
    viewport: Viewport,
    label_margin: float,
) -> tuple[Marker, ...]:
    values = [p.v for p in points]
    label_limit = max(LABEL_MIN_X, viewport.width - label_margin)

    def build(kind: MarkerKind, value: float) -> Marker:
        index = _first_index_of(points, value)
        x = x_for(index, len(points), viewport)
        y = y_for(value, bounds, viewport)
        if kind is MarkerKind.MIN:
            label_y = max(y + 4, LABEL_MIN_Y)
        else:
            label_y = max(y - 6, LABEL_MIN_Y)
        return Marker(
            kind=kind,
            index=index,
            value=value,
            x=x,
            y=y,
            label_x=min(x + LABEL_OFFSET, label_limit),
            label_y=label_y,
        )

    return (build(MarkerKind.MIN, min(values)), build(MarkerKind.MAX, max(values)))


def project(
    points: Sequence[TimeSeriesPoint],
    viewport: Viewport,
    label_margin: float = DEFAULT_LABEL_MARGIN,
) -> ProjectedSeries:
    """Compute axis bounds, polyline and min/max markers for ``points``."""
    bounds = axis_bounds(points)
    if len(points) < 2:
        return ProjectedSeries(viewport=viewport, axis_bounds=bounds, path=None)

    count = len(points)
    vertices = tuple(
        Vertex(x_for(i, count, viewport), y_for(p.v, bounds, viewport)) for i, p in enumerate(points)
    )
    path = PathGeometry(
        vertices=vertices,
        left=viewport.left,
        right=viewport.right,
        baseline=viewport.baseline,
    )
    return ProjectedSeries(
        viewport=viewport,
        axis_bounds=bounds,
        path=path,
        markers=_markers(points, bounds, viewport, label_margin),
    )


def _fraction_between(left: float, right: float, x: float) -> float:
    if right <= left:
        return 0.0
    return (x - left) / (right - left)


def resolve_hover(
    points: Sequence[TimeSeriesPoint],
    viewport: Viewport,
    pixel_x: float,
    pixel_y: float,
    display_width: float | None = None,
    display_height: float | None = None,
) -> HoverState | None:
    """Snap a cursor position to the nearest point index.

    ``pixel_x``/``pixel_y`` are relative to the displayed plot, whose size may
    differ from the logical viewport; they default to the same size.
    """
    count = len(points)
    if count == 0:
        return None

    shown_width = display_width or viewport.width
    shown_height = display_height or viewport.height
    view_x = (pixel_x / shown_width) * viewport.width
    view_y = (pixel_y / shown_height) * viewport.height

    clamped_x = min(max(view_x, viewport.left), viewport.right)
    fraction = _fraction_between(viewport.left, viewport.right, clamped_x)
    # round half up
    index = math.floor(fraction * (count - 1) + 0.5)
    index = min(max(index, 0), count - 1)

    return HoverState(
        point_index=index,
        view_x=view_x,
        view_y=view_y,
        pixel_x=pixel_x,
        pixel_y=pixel_y,
    )


@dataclass(frozen=True, slots=True)
class SeriesSummary:
    """Header figures for a chart: endpoints, extremes and change."""

    first: TimeSeriesPoint
    last: TimeSeriesPoint
    min_value: float
    max_value: float
    delta: float
    delta_pct: float

    @property
    def direction(self) -> int:
        return (self.delta > 0) - (self.delta < 0)


def summarize(points: Sequence[TimeSeriesPoint]) -> SeriesSummary | None:
    if not points:
        return None
    first, last = points[0], points[-1]
    values = [p.v for p in points]
    delta = last.v - first.v
    return SeriesSummary(
        first=first,
        last=last,
        min_value=min(values),
        max_value=max(values),
        delta=delta,
        delta_pct=(delta / first.v) * 100,
    )


class ChartGeometry:
    """Per-chart handle holding points, viewport and hover state.

    Instances share nothing; projection is recomputed lazily after any change
    to the points or the viewport.
    """

    def __init__(
        self,
        *,
        width: float = 640,
        height: float = 220,
        padding: float = 24.0,
        min_width: int = 320,
        min_height: int = 220,
        label_margin: float = DEFAULT_LABEL_MARGIN,
    ) -> None:
        self._padding = padding
        self._min_width = min_width
        self._min_height = min_height
        self._label_margin = label_margin
        self._points: tuple[TimeSeriesPoint, ...] = ()
        self._viewport = self._clamped_viewport(width, height)
        self._display: tuple[float, float] | None = None
        self._projection: ProjectedSeries | None = None
        self._hover: HoverState | None = None

    def _clamped_viewport(self, width: float, height: float) -> Viewport:
        return Viewport(
            width=max(self._min_width, math.floor(width)),
            height=max(self._min_height, math.floor(height)),
            padding=self._padding,
        )

    def set_viewport(self, width: float, height: float) -> None:
        viewport = self._clamped_viewport(width, height)
        if viewport != self._viewport:
            self._viewport = viewport
            self._projection = None

    def set_display_size(self, width: float | None, height: float | None) -> None:
        """Record the on-screen pixel size when it differs from the viewport."""
        self._display = (width, height) if width and height else None

    def set_points(self, points: Sequence[TimeSeriesPoint]) -> None:
        new_points = tuple(points)
        if new_points != self._points:
            self._points = new_points
            self._projection = None
            self._hover = None

    def on_pointer_move(self, pixel_x: float, pixel_y: float) -> HoverState | None:
        display_width, display_height = self._display or (None, None)
        self._hover = resolve_hover(
            self._points,
            self._viewport,
            pixel_x,
            pixel_y,
            display_width,
            display_height,
        )
        return self._hover

    def on_pointer_leave(self) -> None:
        self._hover = None

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def points(self) -> tuple[TimeSeriesPoint, ...]:
        return self._points

    @property
    def projection(self) -> ProjectedSeries:
        if self._projection is None:
            self._projection = project(self._points, self._viewport, self._label_margin)
        return self._projection

    @property
    def path(self) -> PathGeometry | None:
        return self.projection.path

    @property
    def axis_bounds(self) -> AxisBounds:
        return self.projection.axis_bounds

    @property
    def markers(self) -> tuple[Marker, ...]:
        return self.projection.markers

    @property
    def insufficient_data(self) -> bool:
        return self.projection.insufficient_data

    @property
    def hover(self) -> HoverState | None:
        return self._hover

    @property
    def hover_point(self) -> TimeSeriesPoint | None:
        if self._hover is None:
            return None
        return self._points[self._hover.point_index]

    @property
    def hover_point_xy(self) -> Vertex | None:
        """Highlighted point position; only drawn when a path exists."""
        if self._hover is None or self.insufficient_data:
            return None
        point = self._points[self._hover.point_index]
        return Vertex(
            x_for(self._hover.point_index, len(self._points), self._viewport),
            y_for(point.v, self.axis_bounds, self._viewport),
        )

    @property
    def summary(self) -> SeriesSummary | None:
        return summarize(self._points)


__all__ = [
    "ChartGeometry",
    "SeriesSummary",
    "axis_bounds",
    "project",
    "resolve_hover",
    "summarize",
    "x_for",
    "y_for",
]
