"""Boundary service exposed to the dashboard shell."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from fxlive.core.config.settings import FxLiveConfig
from fxlive.core.data.providers.frankfurter import RemoteFxClient
from fxlive.core.exceptions.base import DataValidationError
from fxlive.core.logging import get_logger, log_context
from fxlive.core.models.market import RangeToken, normalize_codes, validate_code
from fxlive.core.models.rates import RateSnapshot, TimeSeries
from fxlive.core.monitoring.metrics import MetricsCollector
from fxlive.core.patterns.cancellation import CancellationToken
from fxlive.core.services.dates import DateWindowResolver
from fxlive.core.services.geometry import ChartGeometry
from fxlive.core.services.refresh import RefreshController

log = get_logger(__name__)


def parse_symbols(raw: str | list[str] | tuple[str, ...] | None, max_symbols: int) -> list[str] | None:
    """Split, clean, dedupe and cap a symbol list.

    Returns ``None`` when nothing was supplied at all, so callers can fall
    back to a default watchlist.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    if not items:
        return None
    return [validate_code(code) for code in normalize_codes(items)][:max_symbols]


class FxService:
    """Validates boundary input and wires resolver, client and controllers together."""

    def __init__(
        self,
        config: FxLiveConfig | None = None,
        *,
        client: RemoteFxClient | None = None,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or FxLiveConfig()
        self.metrics = metrics
        self.client = client or RemoteFxClient(self.config.provider, metrics=metrics)
        self.resolver = DateWindowResolver(self.config.dashboard.timezone)
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def base(self) -> str:
        return validate_code(self.config.dashboard.base_currency)

    async def __aenter__(self) -> "FxService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def resolve_symbols(self, symbols: str | list[str] | tuple[str, ...] | None) -> list[str]:
        """Apply the boundary symbol policy.

        Raises:
            DataValidationError: when symbols were supplied but none are valid.
        """
        max_symbols = self.config.refresh.max_symbols
        parsed = parse_symbols(symbols, max_symbols)
        if parsed is None:
            return [validate_code(c) for c in normalize_codes(self.config.dashboard.default_watchlist)][:max_symbols]
        if not parsed:
            raise DataValidationError("No valid symbols provided", validation_errors={"symbols": symbols})
        return parsed

    def resolve_range(self, range_value: "str | RangeToken | None") -> RangeToken:
        """An omitted range defaults to the configured one; an explicit invalid one is rejected."""
        if range_value is None or (isinstance(range_value, str) and not range_value.strip()):
            return RangeToken.parse(self.config.dashboard.default_range)
        return RangeToken.parse(range_value)

    async def get_latest(
        self,
        symbols: str | list[str] | tuple[str, ...] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> RateSnapshot:
        codes = self.resolve_symbols(symbols)
        with log_context(operation="latest"):
            log.info("Fetching latest rates", base=self.base, symbols=codes)
            return await self.client.fetch_latest(self.base, codes, cancel_token=cancel_token)

    async def get_series(
        self,
        symbol: str | None,
        range_value: "str | RangeToken | None" = None,
        now: datetime | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> TimeSeries:
        if symbol is None or not symbol.strip():
            raise DataValidationError("Missing required symbol", validation_errors={"symbol": symbol})
        code = validate_code(symbol)
        token = self.resolve_range(range_value)
        window = self.resolver.resolve(token, now or self._clock())
        with log_context(operation="series"):
            log.info(
                "Fetching rate series",
                base=self.base,
                symbol=code,
                range=token.value,
                from_date=window.from_date,
                to_date=window.to_date,
            )
            return await self.client.fetch_series(
                self.base,
                code,
                window.from_date,
                window.to_date,
                range_token=token,
                cancel_token=cancel_token,
            )

    def create_refresh_stream(self) -> RefreshController:
        refresh = self.config.refresh
        return RefreshController(
            self.client,
            self.base,
            auto_refresh=refresh.auto_refresh,
            interval_seconds=refresh.interval_seconds,
            min_interval_seconds=refresh.min_interval_seconds,
            max_symbols=refresh.max_symbols,
            clock=self._clock,
        )

    def create_chart(self, width: float = 640, height: float = 220) -> ChartGeometry:
        chart = self.config.chart
        return ChartGeometry(
            width=width,
            height=height,
            padding=chart.padding,
            min_width=chart.min_width,
            min_height=chart.min_height,
            label_margin=chart.label_margin,
        )


__all__ = ["FxService", "parse_symbols"]
