"""Turn raw provider payloads into canonical snapshots and series.

Provider JSON never travels past this module: every payload is parsed into a
``RateSnapshot`` / ``TimeSeries`` or rejected with ``DataValidationError``.
Individual non-finite or non-positive rates are not errors; they are dropped
and counted.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from fxlive.core.exceptions.base import DataValidationError
from fxlive.core.logging import get_logger
from fxlive.core.models.market import RangeToken, normalize_code, normalize_codes
from fxlive.core.models.rates import RateSnapshot, TimeSeries, TimeSeriesPoint

log = get_logger(__name__)


def coerce_rate(raw: Any) -> float | None:
    """Return ``raw`` as a positive finite float, or ``None`` if it is not one."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DataValidationError(
            f"Unexpected provider payload: {what} is not an object",
            validation_errors={"field": what, "type": type(raw).__name__},
        )
    return raw


def _parse_rates_block(raw: Any) -> Mapping[str, Any]:
    payload = _require_mapping(raw, "response")
    rates = payload.get("rates", {})
    if rates is None:
        rates = {}
    return _require_mapping(rates, "rates")


def _payload_base(payload: Mapping[str, Any], requested_base: str) -> str:
    base = payload.get("base")
    if base is None or base == "":
        return normalize_code(requested_base)
    if not isinstance(base, str):
        raise DataValidationError(
            "Unexpected provider payload: base is not a string",
            validation_errors={"field": "base", "type": type(base).__name__},
        )
    return normalize_code(base)


def _payload_date(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) else None


class RateDataNormalizer:
    """Converts raw provider responses into canonical models."""

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        on_drop: Callable[[int], None] | None = None,
    ) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))
        self._on_drop = on_drop

    def normalize_latest(
        self,
        raw: Any,
        requested_base: str,
        requested_symbols: list[str] | tuple[str, ...],
        observed_at: datetime | None = None,
    ) -> RateSnapshot:
        payload = _require_mapping(raw, "response")
        rates_block = _parse_rates_block(payload)

        rates: dict[str, float] = {}
        dropped = 0
        for code, raw_value in rates_block.items():
            value = coerce_rate(raw_value)
            if value is None:
                dropped += 1
                continue
            rates[normalize_code(str(code))] = value
        self._report_drops(dropped, "latest")

        return RateSnapshot(
            base=_payload_base(payload, requested_base),
            as_of=observed_at or self._clock(),
            provider_date=_payload_date(payload, "date"),
            symbols=tuple(normalize_codes(list(requested_symbols))),
            rates=rates,
        )

    def normalize_series(
        self,
        raw: Any,
        requested_symbol: str,
        requested_base: str,
        requested_range: RangeToken | None,
        from_date: str,
        to_date: str,
        observed_at: datetime | None = None,
    ) -> TimeSeries:
        payload = _require_mapping(raw, "response")
        rates_block = _parse_rates_block(payload)
        symbol = normalize_code(requested_symbol)

        by_date: dict[str, float] = {}
        dropped = 0
        for day, rate_map in rates_block.items():
            raw_value = None
            if isinstance(rate_map, Mapping):
                raw_value = _lookup_symbol(rate_map, symbol)
            value = coerce_rate(raw_value)
            if value is None:
                dropped += 1
                continue
            # last occurrence wins
            by_date[str(day).strip()] = value
        self._report_drops(dropped, f"series:{symbol}")

        points = tuple(TimeSeriesPoint(t=day, v=by_date[day]) for day in sorted(by_date))

        return TimeSeries(
            base=_payload_base(payload, requested_base),
            symbol=symbol,
            as_of=observed_at or self._clock(),
            requested_range=requested_range,
            from_date=from_date,
            to_date=to_date,
            points=points,
        )

    def _report_drops(self, dropped: int, source: str) -> None:
        if not dropped:
            return
        log.debug(f"Dropped {dropped} invalid rate value(s)", source=source, dropped=dropped)
        if self._on_drop is not None:
            self._on_drop(dropped)


def _lookup_symbol(rate_map: Mapping[str, Any], symbol: str) -> Any:
    if symbol in rate_map:
        return rate_map[symbol]
    for key, value in rate_map.items():
        if isinstance(key, str) and normalize_code(key) == symbol:
            return value
    return None
