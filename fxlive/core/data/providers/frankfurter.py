"""Frankfurter rate provider client.

Each call issues exactly one upstream request and never retries; retry timing
belongs to the refresh controller. Results pass through
``RateDataNormalizer`` before leaving this module.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from fxlive.core.config.settings import ProviderConfig
from fxlive.core.data.normalizer import RateDataNormalizer
from fxlive.core.exceptions.base import AbortedOperation, DataValidationError, UpstreamError
from fxlive.core.logging import get_logger
from fxlive.core.models.market import RangeToken, normalize_code, normalize_codes
from fxlive.core.models.rates import RateSnapshot, TimeSeries
from fxlive.core.monitoring.metrics import MetricsCollector
from fxlive.core.patterns.cancellation import CancellationToken, run_cancellable

log = get_logger(__name__)


class RemoteFxClient:
    """Async client for the latest-rates and historical-window endpoints."""

    def __init__(
        self,
        config: ProviderConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        normalizer: RateDataNormalizer | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.metrics = metrics
        self.normalizer = normalizer or RateDataNormalizer(
            on_drop=metrics.record_dropped_points if metrics is not None else None
        )
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "RemoteFxClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/json",
                },
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def fetch_latest(
        self,
        base: str,
        symbols: list[str] | tuple[str, ...],
        cancel_token: CancellationToken | None = None,
    ) -> RateSnapshot:
        """Fetch the latest rates of ``symbols`` quoted against ``base``."""
        codes = normalize_codes(list(symbols))
        params = {"from": normalize_code(base)}
        if codes:
            params["to"] = ",".join(codes)

        data = await self._get_json("latest", self._url("latest"), params, cancel_token)
        return self.normalizer.normalize_latest(data, base, codes)

    async def fetch_series(
        self,
        base: str,
        symbol: str,
        from_date: str,
        to_date: str,
        range_token: RangeToken | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> TimeSeries:
        """Fetch daily rates of ``symbol`` for the inclusive ``from_date..to_date`` window."""
        params = {"from": normalize_code(base), "to": normalize_code(symbol)}
        data = await self._get_json(
            "series",
            self._url(f"{from_date}..{to_date}"),
            params,
            cancel_token,
        )
        return self.normalizer.normalize_series(data, symbol, base, range_token, from_date, to_date)

    async def _get_json(
        self,
        endpoint: str,
        url: str,
        params: dict[str, str],
        cancel_token: CancellationToken | None,
    ) -> Any:
        client = self._ensure_client()
        provider = self.config.name
        started = time.perf_counter()
        log.debug("Requesting provider", provider=provider, endpoint=endpoint, url=url, params=params)

        try:
            response = await run_cancellable(
                lambda: client.get(url, params=params),
                cancel_token,
                operation=endpoint,
            )
        except AbortedOperation:
            if self.metrics is not None:
                self.metrics.record_abort(endpoint)
            log.debug("Provider request aborted", provider=provider, endpoint=endpoint)
            raise
        except httpx.HTTPError as exc:
            self._observe(endpoint, started, success=False)
            log.warning("Provider unreachable", reason=str(exc), provider=provider, endpoint=endpoint)
            raise UpstreamError(
                f"FX provider unreachable: {exc.__class__.__name__}",
                provider,
                details={"endpoint": endpoint},
            ) from exc

        if not response.is_success:
            self._observe(endpoint, started, success=False)
            log.warning(
                "Provider returned an error status",
                provider=provider,
                endpoint=endpoint,
                status_code=response.status_code,
                error_code="UPSTREAM_ERROR",
            )
            raise UpstreamError(
                f"FX provider error: {response.status_code} {response.reason_phrase}",
                provider,
                status_code=response.status_code,
                reason=response.reason_phrase,
                details={"endpoint": endpoint},
            )

        self._observe(endpoint, started, success=True)
        try:
            return response.json()
        except ValueError as exc:
            raise DataValidationError(
                "Provider returned a non-JSON body",
                validation_errors={"endpoint": endpoint},
            ) from exc

    def _observe(self, endpoint: str, started: float, *, success: bool) -> None:
        if self.metrics is not None:
            self.metrics.observe_fetch(endpoint, time.perf_counter() - started, success=success)


__all__ = ["RemoteFxClient"]
