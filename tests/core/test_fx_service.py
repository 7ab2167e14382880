"""Tests for the boundary service that wires the core components together."""

from __future__ import annotations

import io
import json
from datetime import UTC, datetime

import httpx
import pytest

from fxlive.core.config import DEFAULT_WATCHLIST, FxLiveConfig
from fxlive.core.data.providers import RemoteFxClient
from fxlive.core.exceptions import DataValidationError
from fxlive.core.logging import configure_logging
from fxlive.core.models import RangeToken
from fxlive.core.services import FxService, SyncState
from fxlive.core.services.fx import parse_symbols

NOW = datetime(2024, 3, 15, 4, 0, tzinfo=UTC)


def _service(handler=None, config: FxLiveConfig | None = None) -> tuple[FxService, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def default_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/latest":
            return httpx.Response(200, json={"base": "SGD", "date": "2024-03-15", "rates": {"USD": 0.74, "EUR": 0.68}})
        return httpx.Response(200, json={"base": "SGD", "rates": {"2024-03-14": {"JPY": 110.0}, "2024-03-15": {"JPY": 111.0}}})

    config = config or FxLiveConfig()
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler or default_handler))
    client = RemoteFxClient(config.provider, http_client=http_client)
    return FxService(config, client=client, clock=lambda: NOW), requests


def test_parse_symbols_treats_blank_input_as_missing() -> None:
    assert parse_symbols(None, 20) is None
    assert parse_symbols("   ", 20) is None
    assert parse_symbols([], 20) is None
    assert parse_symbols(" usd, eur ,USD", 20) == ["USD", "EUR"]
    assert parse_symbols(", ,", 20) == []


def test_symbol_policy() -> None:
    service, _ = _service()

    assert service.resolve_symbols(None) == DEFAULT_WATCHLIST
    assert service.resolve_symbols("") == DEFAULT_WATCHLIST
    assert service.resolve_symbols(["jpy", "gbp"]) == ["JPY", "GBP"]

    with pytest.raises(DataValidationError, match="No valid symbols provided"):
        service.resolve_symbols(", ,")
    with pytest.raises(DataValidationError):
        service.resolve_symbols("US1")


def test_symbols_are_capped() -> None:
    service, _ = _service()
    codes = [f"A{chr(65 + i // 26)}{chr(65 + i % 26)}" for i in range(25)]

    assert len(service.resolve_symbols(codes)) == 20


def test_range_policy() -> None:
    service, _ = _service()

    assert service.resolve_range(None) is RangeToken.ONE_MONTH
    assert service.resolve_range("  ") is RangeToken.ONE_MONTH
    assert service.resolve_range("6m") is RangeToken.SIX_MONTHS
    with pytest.raises(DataValidationError):
        service.resolve_range("5Y")


@pytest.mark.asyncio
async def test_get_latest_defaults_to_watchlist() -> None:
    service, requests = _service()

    async with service:
        snapshot = await service.get_latest()

    assert requests[0].url.params["from"] == "SGD"
    assert requests[0].url.params["to"] == ",".join(DEFAULT_WATCHLIST)
    assert snapshot.symbols == tuple(DEFAULT_WATCHLIST)
    assert snapshot.rate_for("USD") == 0.74


@pytest.mark.asyncio
async def test_get_series_resolves_window_in_configured_zone() -> None:
    service, requests = _service()

    async with service:
        series = await service.get_series("jpy", "3M")

    assert requests[0].url.path == "/2023-12-15..2024-03-15"
    assert series.symbol == "JPY"
    assert series.requested_range is RangeToken.THREE_MONTHS
    assert [p.v for p in series.points] == [110.0, 111.0]


@pytest.mark.asyncio
async def test_get_series_requires_symbol() -> None:
    service, requests = _service()

    async with service:
        with pytest.raises(DataValidationError, match="Missing required symbol"):
            await service.get_series(None)
        with pytest.raises(DataValidationError):
            await service.get_series("JPY", "10Y")

    assert requests == []


@pytest.mark.asyncio
async def test_refresh_stream_uses_configured_cadence() -> None:
    config = FxLiveConfig.from_dict({"refresh": {"auto_refresh": False, "interval_seconds": 60}})
    service, _ = _service(config=config)

    stream = service.create_refresh_stream()
    assert stream.base == "SGD"
    assert stream.interval_seconds == 60
    assert not stream.auto_refresh

    await stream.set_tracked_symbols(["USD", "EUR"])
    assert stream.state is SyncState.LOADED
    assert stream.snapshot.rate_for("EUR") == 0.68
    await stream.aclose()
    await service.aclose()


def test_chart_uses_configured_limits() -> None:
    config = FxLiveConfig.from_dict({"chart": {"min_width": 400, "padding": 10}})
    service, _ = _service(config=config)

    chart = service.create_chart(200, 300)

    assert chart.viewport.width == 400
    assert chart.viewport.height == 300
    assert chart.viewport.padding == 10


def test_base_currency_comes_from_config() -> None:
    config = FxLiveConfig.from_dict({"dashboard": {"base_currency": "usd"}})
    service, _ = _service(config=config)

    assert service.base == "USD"


@pytest.mark.asyncio
async def test_each_boundary_call_logs_under_one_trace() -> None:
    buffer = io.StringIO()
    configure_logging("DEBUG", console_stream=buffer)
    service, _ = _service()

    async with service:
        await service.get_latest("USD")
        await service.get_series("JPY", "1W")

    records = [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()]
    latest = [r for r in records if r.get("context", {}).get("operation") == "latest"]
    series = [r for r in records if r.get("context", {}).get("operation") == "series"]

    assert {"Fetching latest rates", "Requesting provider"} <= {r["message"] for r in latest}
    assert {"Fetching rate series", "Requesting provider"} <= {r["message"] for r in series}
    assert len({r["trace_id"] for r in latest}) == 1
    assert len({r["trace_id"] for r in series}) == 1
    assert latest[0]["trace_id"] is not None
    assert latest[0]["trace_id"] != series[0]["trace_id"]
