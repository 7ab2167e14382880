"""Canonical rate snapshot and time-series models."""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from fxlive.core.models.market import RangeToken


class DateWindow(BaseModel):
    """Inclusive ``[from_date, to_date]`` calendar window (ISO dates)."""

    model_config = ConfigDict(frozen=True)

    from_date: str
    to_date: str


class TimeSeriesPoint(BaseModel):
    """One dated rate observation."""

    model_config = ConfigDict(frozen=True)

    t: str
    v: float

    @field_validator("v")
    @classmethod
    def _positive_finite(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("rate must be finite and positive")
        return value


class RateSnapshot(BaseModel):
    """One normalized set of latest rates, stamped at observation time."""

    model_config = ConfigDict(frozen=True)

    base: str
    as_of: datetime
    provider_date: str | None = None
    symbols: tuple[str, ...] = ()
    rates: dict[str, float] = Field(default_factory=dict)

    def rate_for(self, symbol: str) -> float | None:
        return self.rates.get(symbol.strip().upper())

    @field_serializer("as_of", when_used="json")
    def serialize_as_of(self, value: datetime) -> str:
        return value.isoformat()


class TimeSeries(BaseModel):
    """Historical rates for one symbol, sorted ascending by date."""

    model_config = ConfigDict(frozen=True)

    base: str
    symbol: str
    as_of: datetime
    requested_range: RangeToken | None = None
    from_date: str
    to_date: str
    points: tuple[TimeSeriesPoint, ...] = ()

    @field_serializer("as_of", when_used="json")
    def serialize_as_of(self, value: datetime) -> str:
        return value.isoformat()
