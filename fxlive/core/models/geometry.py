"""Ephemeral chart geometry types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Viewport:
    """Logical plot size in viewport units."""

    width: float
    height: float
    padding: float = 24.0

    @property
    def inner_width(self) -> float:
        return self.width - self.padding * 2

    @property
    def inner_height(self) -> float:
        return self.height - self.padding * 2

    @property
    def left(self) -> float:
        return self.padding

    @property
    def right(self) -> float:
        return self.padding + self.inner_width

    @property
    def baseline(self) -> float:
        """Bottom edge of the plot area."""
        return self.height - self.padding


@dataclass(frozen=True, slots=True)
class AxisBounds:
    """Padded vertical value range."""

    min_value: float
    max_value: float

    @property
    def span(self) -> float:
        return self.max_value - self.min_value


@dataclass(frozen=True, slots=True)
class Vertex:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class PathGeometry:
    """Ordered polyline through every point plus its area-fill closure."""

    vertices: tuple[Vertex, ...]
    left: float
    right: float
    baseline: float

    def line_path(self) -> str:
        """SVG path data for the polyline."""
        head, *rest = self.vertices
        parts = [f"M {_fmt(head.x)} {_fmt(head.y)}"]
        parts.extend(f"L {_fmt(v.x)} {_fmt(v.y)}" for v in rest)
        return " ".join(parts)

    def area_path(self) -> str:
        """SVG path data for the polyline closed down to the baseline."""
        return (
            f"{self.line_path()} L {_fmt(self.right)} {_fmt(self.baseline)} "
            f"L {_fmt(self.left)} {_fmt(self.baseline)} Z"
        )


class MarkerKind(str, Enum):
    MIN = "min"
    MAX = "max"


@dataclass(frozen=True, slots=True)
class Marker:
    """Annotated extreme point; label position is clamped inside the viewport."""

    kind: MarkerKind
    index: int
    value: float
    x: float
    y: float
    label_x: float
    label_y: float


@dataclass(frozen=True, slots=True)
class ProjectedSeries:
    """Renderable geometry for one point sequence and viewport.

    ``path`` is ``None`` and ``insufficient_data`` is true when fewer than two
    points are available.
    """

    viewport: Viewport
    axis_bounds: AxisBounds
    path: PathGeometry | None
    markers: tuple[Marker, ...] = field(default=())

    @property
    def insufficient_data(self) -> bool:
        return self.path is None


@dataclass(frozen=True, slots=True)
class HoverState:
    """Selected point plus the raw cursor position.

    ``view_x``/``view_y`` are logical viewport coordinates and are not clamped,
    so a crosshair can follow the cursor past the data edges.
    """

    point_index: int
    view_x: float
    view_y: float
    pixel_x: float
    pixel_y: float


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")
