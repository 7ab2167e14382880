"""Tests for series projection, hover resolution and the chart handle."""

from __future__ import annotations

import pytest

from fxlive.core.models import MarkerKind, TimeSeriesPoint, Viewport
from fxlive.core.services import ChartGeometry, project, resolve_hover, summarize
from fxlive.core.services.geometry import axis_bounds, x_for, y_for

VIEWPORT = Viewport(width=640, height=220, padding=24)


def _points(*values: float) -> list[TimeSeriesPoint]:
    return [TimeSeriesPoint(t=f"2024-03-{i + 1:02d}", v=v) for i, v in enumerate(values)]


def test_x_spreads_points_across_inner_width() -> None:
    assert x_for(0, 5, VIEWPORT) == 24
    assert x_for(2, 5, VIEWPORT) == 320
    assert x_for(4, 5, VIEWPORT) == 616


def test_single_point_count_does_not_divide_by_zero() -> None:
    assert x_for(0, 1, VIEWPORT) == 24


def test_axis_bounds_pad_by_five_percent_of_spread() -> None:
    bounds = axis_bounds(_points(1.0, 5.0))

    assert bounds.min_value == pytest.approx(0.8)
    assert bounds.max_value == pytest.approx(5.2)


def test_flat_series_gets_fixed_padding() -> None:
    bounds = axis_bounds(_points(2.0, 2.0))

    assert bounds.min_value == pytest.approx(1.99)
    assert bounds.max_value == pytest.approx(2.01)
    assert y_for(2.0, bounds, VIEWPORT) == pytest.approx(110)


def test_higher_values_plot_higher() -> None:
    points = _points(1.0, 3.0, 2.0, 5.0, 4.0)
    bounds = axis_bounds(points)
    ys = {p.v: y_for(p.v, bounds, VIEWPORT) for p in points}

    ordered = [ys[v] for v in sorted(ys)]
    assert ordered == sorted(ordered, reverse=True)
    assert all(VIEWPORT.padding <= y <= VIEWPORT.baseline for y in ordered)


def test_projection_paths() -> None:
    projected = project(_points(1.0, 2.0), VIEWPORT)

    assert projected.path is not None
    assert projected.path.line_path() == "M 24 188.18 L 616 31.82"
    assert projected.path.area_path() == "M 24 188.18 L 616 31.82 L 616 196 L 24 196 Z"


@pytest.mark.parametrize("values", [(), (1.5,)])
def test_short_series_is_insufficient(values: tuple[float, ...]) -> None:
    projected = project(_points(*values), VIEWPORT)

    assert projected.insufficient_data
    assert projected.path is None
    assert projected.markers == ()


def test_markers_use_first_occurrence_and_clamp_labels() -> None:
    projected = project(_points(3.0, 1.0, 4.0, 1.0, 5.0), VIEWPORT)
    low, high = projected.markers

    assert low.kind is MarkerKind.MIN
    assert low.index == 1
    assert low.x == pytest.approx(172)
    assert low.label_x == pytest.approx(180)
    assert low.label_y == pytest.approx(low.y + 4)

    assert high.kind is MarkerKind.MAX
    assert high.index == 4
    assert high.x == pytest.approx(616)
    assert high.label_x == pytest.approx(550)
    assert high.label_y == pytest.approx(high.y - 6)


def test_hover_snaps_to_nearest_index() -> None:
    points = _points(1.0, 2.0, 3.0, 4.0, 5.0)

    assert resolve_hover(points, VIEWPORT, 24, 100).point_index == 0
    assert resolve_hover(points, VIEWPORT, 172, 100).point_index == 1
    # exactly halfway between index 1 and 2 rounds up
    assert resolve_hover(points, VIEWPORT, 246, 100).point_index == 2
    assert resolve_hover(points, VIEWPORT, 616, 100).point_index == 4


def test_hover_outside_plot_clamps_index_but_keeps_cursor() -> None:
    points = _points(1.0, 2.0, 3.0)

    left = resolve_hover(points, VIEWPORT, -50, 10)
    right = resolve_hover(points, VIEWPORT, 700, 10)

    assert left.point_index == 0
    assert left.view_x == -50
    assert right.point_index == 2
    assert right.view_x == 700


def test_hover_scales_display_pixels_to_viewport() -> None:
    points = _points(1.0, 2.0, 3.0, 4.0, 5.0)

    hover = resolve_hover(points, VIEWPORT, 308, 55, display_width=320, display_height=110)

    assert hover.point_index == 4
    assert hover.view_x == pytest.approx(616)
    assert hover.view_y == pytest.approx(110)
    assert hover.pixel_x == 308


def test_hover_is_idempotent_and_handles_short_series() -> None:
    points = _points(1.0, 2.0, 3.0)

    assert resolve_hover(points, VIEWPORT, 200, 50) == resolve_hover(points, VIEWPORT, 200, 50)
    assert resolve_hover([], VIEWPORT, 200, 50) is None
    assert resolve_hover(_points(1.0), VIEWPORT, 600, 50).point_index == 0


def test_summary_figures() -> None:
    summary = summarize(_points(2.0, 1.0, 2.5))

    assert summary.first.v == 2.0
    assert summary.last.v == 2.5
    assert summary.min_value == 1.0
    assert summary.max_value == 2.5
    assert summary.delta == pytest.approx(0.5)
    assert summary.delta_pct == pytest.approx(25.0)
    assert summary.direction == 1
    assert summarize([]) is None


def test_chart_enforces_minimum_and_floors_viewport() -> None:
    chart = ChartGeometry(width=100, height=100)
    assert (chart.viewport.width, chart.viewport.height) == (320, 220)

    chart.set_viewport(640.7, 300.2)
    assert (chart.viewport.width, chart.viewport.height) == (640, 300)


def test_chart_caches_projection_until_inputs_change() -> None:
    chart = ChartGeometry()
    chart.set_points(_points(1.0, 2.0, 3.0))

    first = chart.projection
    assert chart.projection is first

    chart.set_points(_points(1.0, 2.0, 3.0))
    assert chart.projection is first

    chart.set_viewport(800, 220)
    assert chart.projection is not first
    assert chart.path.vertices[-1].x == pytest.approx(776)


def test_chart_hover_lifecycle() -> None:
    chart = ChartGeometry()
    chart.set_points(_points(1.0, 2.0, 3.0, 4.0, 5.0))
    chart.set_display_size(320, 110)

    hover = chart.on_pointer_move(308, 55)
    assert hover is not None
    assert chart.hover_point.t == "2024-03-05"
    assert chart.hover_point_xy.x == pytest.approx(616)

    chart.set_points(_points(5.0, 4.0))
    assert chart.hover is None

    chart.on_pointer_move(0, 0)
    chart.on_pointer_leave()
    assert chart.hover is None
    assert chart.hover_point is None


def test_single_point_chart_has_hover_but_no_highlight() -> None:
    chart = ChartGeometry()
    chart.set_points(_points(1.2))

    chart.on_pointer_move(300, 100)

    assert chart.insufficient_data
    assert chart.hover_point.v == 1.2
    assert chart.hover_point_xy is None
    assert chart.summary.delta == 0
