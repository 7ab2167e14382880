"""Rate command implementations for the fxlive CLI."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import typer

from fxlive.core.config.settings import ConfigManager
from fxlive.core.exceptions import (
    DataValidationError,
    ErrorCode,
    FxLiveError,
    ProviderError,
    error_payload,
    format_error_response,
)
from fxlive.core.formatting import (
    PLACEHOLDER,
    format_amount,
    format_number,
    format_rate,
    parse_decimal_input,
    time_ago_label,
)
from fxlive.core.models.rates import RateSnapshot, TimeSeries
from fxlive.core.monitoring import get_metrics_collector
from fxlive.core.services.fx import FxService
from fxlive.core.services.geometry import ChartGeometry
from fxlive.core.services.refresh import RefreshStatus

from .constants import PROVIDER_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .svg import render_svg
from .utils import emit_error, get_cli_options, prepare_output

T = TypeVar("T")

LATEST_COLUMNS = ["symbol", "rate", "amount", "converted", "provider_date", "as_of"]
SERIES_COLUMNS = ["date", "rate"]
SUMMARY_COLUMNS = ["symbol", "range", "first", "last", "low", "high", "delta", "delta_pct"]
CHART_COLUMNS = ["kind", "date", "rate", "x", "y"]
WATCH_COLUMNS = ["symbol", "rate", "state", "stale", "updated", "error"]


def register(app: typer.Typer) -> None:
    """Register the rate commands on the provided application."""

    app.command("latest")(latest_command)
    app.command("series")(series_command)
    app.command("chart")(chart_command)
    app.command("watch")(watch_command)


def get_fx_service(config_path: Path | None = None) -> FxService:
    """Factory hook for obtaining a :class:`FxService` instance."""

    return FxService(ConfigManager(config_path).get_config(), metrics=get_metrics_collector())


def _run(factory: Callable[[], Awaitable[T]]) -> T:
    """Run a coroutine and translate domain errors into CLI exit codes."""

    try:
        return asyncio.run(factory())
    except DataValidationError as error:
        emit_error(error_payload(error))
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    except ProviderError as error:
        emit_error(error_payload(error))
        raise typer.Exit(code=PROVIDER_EXIT_CODE) from error
    except FxLiveError as error:
        emit_error(error_payload(error))
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error
    except Exception as error:  # pragma: no cover - safety net
        emit_error(format_error_response(ErrorCode.UNEXPECTED_ERROR, reason=error))
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error


def latest_command(
    ctx: typer.Context,
    symbols: str | None = typer.Option(
        None,
        "--symbols",
        "-s",
        help="Comma separated currency codes. Defaults to the configured watchlist.",
    ),
    amount: str = typer.Option("1", "--amount", "-a", help="Amount of base currency to convert."),
) -> None:
    """Show the latest rates for the base currency."""

    parsed = parse_decimal_input(amount)
    if not parsed.ok or parsed.value is None:
        emit_error(format_error_response(ErrorCode.INVALID_AMOUNT, parsed.error, value=amount))
        raise typer.Exit(code=VALIDATION_EXIT_CODE)

    service = get_fx_service(get_cli_options(ctx).config_path)

    async def fetch() -> RateSnapshot:
        async with service:
            return await service.get_latest(symbols)

    snapshot = _run(fetch)
    rows = [_latest_row(snapshot, code, parsed.value) for code in snapshot.symbols]

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=LATEST_COLUMNS, title=f"Base {snapshot.base}")
    finally:
        stack.close()


def series_command(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Currency code to chart against the base."),
    range_value: str | None = typer.Option(None, "--range", "-r", help="One of 1D, 1W, 1M, 3M, 6M, 1Y."),
) -> None:
    """Show the historical series of one symbol with a summary."""

    service = get_fx_service(get_cli_options(ctx).config_path)

    async def fetch() -> TimeSeries:
        async with service:
            return await service.get_series(symbol, range_value)

    series = _run(fetch)
    chart = service.create_chart()
    chart.set_points(series.points)

    rows = [{"date": point.t, "rate": format_rate(point.v)} for point in series.points]
    formatter, stream, stack, options = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=SERIES_COLUMNS, title=f"{series.base}/{series.symbol}")
        if options.format == "table":
            formatter.render([_summary_row(series, chart)], stream=stream, columns=SUMMARY_COLUMNS)
    finally:
        stack.close()


def chart_command(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Currency code to chart against the base."),
    range_value: str | None = typer.Option(None, "--range", "-r", help="One of 1D, 1W, 1M, 3M, 6M, 1Y."),
    width: float = typer.Option(640, "--width", help="Viewport width in logical units."),
    height: float = typer.Option(220, "--height", help="Viewport height in logical units."),
    svg: Path | None = typer.Option(None, "--svg", help="Write the chart as an SVG file."),
) -> None:
    """Project a series into chart geometry and list its min/max markers."""

    service = get_fx_service(get_cli_options(ctx).config_path)

    async def fetch() -> TimeSeries:
        async with service:
            return await service.get_series(symbol, range_value)

    series = _run(fetch)
    chart = service.create_chart(width, height)
    chart.set_points(series.points)

    if chart.insufficient_data:
        emit_error(format_error_response(ErrorCode.INSUFFICIENT_DATA, points=len(series.points)))
    elif svg is not None:
        try:
            svg.write_text(render_svg(chart, title=f"{series.base}/{series.symbol}"), encoding="utf-8")
        except OSError as exc:
            emit_error(format_error_response(ErrorCode.OUTPUT_WRITE_ERROR, path=svg, reason=exc))
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc

    rows = [
        {
            "kind": marker.kind.value,
            "date": series.points[marker.index].t,
            "rate": format_rate(marker.value),
            "x": format_number(marker.x, 0, 2),
            "y": format_number(marker.y, 0, 2),
        }
        for marker in chart.markers
    ]
    bounds = chart.axis_bounds
    title = f"{series.base}/{series.symbol} axis {format_rate(bounds.min_value)} to {format_rate(bounds.max_value)}"
    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=CHART_COLUMNS, title=title)
    finally:
        stack.close()


def watch_command(
    ctx: typer.Context,
    symbols: str | None = typer.Option(
        None,
        "--symbols",
        "-s",
        help="Comma separated currency codes. Defaults to the configured watchlist.",
    ),
    interval: float | None = typer.Option(None, "--interval", help="Refresh interval in seconds."),
    count: int = typer.Option(0, "--count", "-n", min=0, help="Stop after N completed refreshes (0 runs forever)."),
) -> None:
    """Poll the latest rates and print every completed refresh."""

    service = get_fx_service(get_cli_options(ctx).config_path)
    formatter, stream, stack, _ = prepare_output(ctx)

    def on_status(status: RefreshStatus) -> None:
        if status.is_syncing:
            return
        formatter.render(_watch_rows(status), stream=stream, columns=WATCH_COLUMNS)

    try:
        _run(lambda: _watch(service, symbols, interval, count, on_status))
    finally:
        stack.close()


async def _watch(
    service: FxService,
    symbols: str | None,
    interval: float | None,
    count: int,
    on_status: Callable[[RefreshStatus], None],
) -> None:
    codes = service.resolve_symbols(symbols)
    done = asyncio.Event()
    completed = 0

    def listener(status: RefreshStatus) -> None:
        nonlocal completed
        if status.is_syncing:
            return
        on_status(status)
        completed += 1
        if count and completed >= count:
            done.set()

    async with service:
        stream = service.create_refresh_stream()
        stream.set_auto_refresh(True, interval)
        stream.add_listener(listener)
        stream.set_tracked_symbols(codes)
        try:
            await done.wait()
        finally:
            await stream.aclose()


def _latest_row(snapshot: RateSnapshot, code: str, amount: float) -> dict[str, object]:
    rate = snapshot.rate_for(code)
    return {
        "symbol": code,
        "rate": format_rate(rate) if rate is not None else PLACEHOLDER,
        "amount": format_amount(amount),
        "converted": format_amount(amount * rate) if rate is not None else PLACEHOLDER,
        "provider_date": snapshot.provider_date,
        "as_of": snapshot.as_of.isoformat(),
    }


def _summary_row(series: TimeSeries, chart: ChartGeometry) -> dict[str, object]:
    summary = chart.summary
    range_label = series.requested_range.value if series.requested_range is not None else None
    row: dict[str, object] = {"symbol": series.symbol, "range": range_label}
    if summary is None:
        return row
    sign = "+" if summary.delta > 0 else ""
    row.update(
        {
            "first": format_rate(summary.first.v),
            "last": format_rate(summary.last.v),
            "low": format_rate(summary.min_value),
            "high": format_rate(summary.max_value),
            "delta": f"{sign}{format_rate(summary.delta)}" if summary.delta else format_rate(0.0),
            "delta_pct": f"{sign}{format_number(summary.delta_pct, 2, 2)}%",
        }
    )
    return row


def _watch_rows(status: RefreshStatus) -> list[dict[str, object]]:
    updated = time_ago_label(status.seconds_since_success)
    rows: list[dict[str, object]] = []
    for code in status.symbols:
        rate = status.snapshot.rate_for(code) if status.snapshot is not None else None
        rows.append(
            {
                "symbol": code,
                "rate": format_rate(rate) if rate is not None else PLACEHOLDER,
                "state": status.state.value,
                "stale": status.is_stale,
                "updated": updated,
                "error": status.error_message,
            }
        )
    return rows


__all__ = [
    "register",
    "get_fx_service",
    "latest_command",
    "series_command",
    "chart_command",
    "watch_command",
]
