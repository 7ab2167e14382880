"""Static SVG rendering of a projected rate chart."""

from __future__ import annotations

from xml.sax.saxutils import escape

from fxlive.core.formatting import format_rate
from fxlive.core.models.geometry import MarkerKind
from fxlive.core.services.geometry import ChartGeometry

LINE_COLOR = "#2563eb"
AREA_COLOR = "#2563eb"
MIN_COLOR = "#dc2626"
MAX_COLOR = "#16a34a"


def render_svg(chart: ChartGeometry, *, title: str | None = None) -> str:
    """Render the chart's line, area fill and min/max markers as SVG markup."""

    viewport = chart.viewport
    path = chart.path
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {viewport.width:g} {viewport.height:g}" '
        f'width="{viewport.width:g}" height="{viewport.height:g}">'
    ]
    if title:
        parts.append(f"<title>{escape(title)}</title>")
    if path is not None:
        parts.append(f'<path d="{path.area_path()}" fill="{AREA_COLOR}" fill-opacity="0.12" stroke="none"/>')
        parts.append(f'<path d="{path.line_path()}" fill="none" stroke="{LINE_COLOR}" stroke-width="2"/>')
    for marker in chart.markers:
        color = MIN_COLOR if marker.kind is MarkerKind.MIN else MAX_COLOR
        parts.append(f'<circle cx="{marker.x:.2f}" cy="{marker.y:.2f}" r="3" fill="{color}"/>')
        parts.append(
            f'<text x="{marker.label_x:.2f}" y="{marker.label_y:.2f}" font-size="11" fill="{color}">'
            f"{marker.kind.value} {escape(format_rate(marker.value))}</text>"
        )
    parts.append("</svg>")
    return "\n".join(parts)


__all__ = ["render_svg"]
