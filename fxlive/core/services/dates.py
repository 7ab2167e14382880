"""Resolve symbolic range tokens into concrete calendar windows."""

import calendar
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from fxlive.core.config.settings import DEFAULT_TIMEZONE
from fxlive.core.models.market import RangeToken
from fxlive.core.models.rates import DateWindow

_DAY_SHIFTS: dict[RangeToken, int] = {
    RangeToken.ONE_DAY: 1,
    RangeToken.ONE_WEEK: 7,
}

_MONTH_SHIFTS: dict[RangeToken, int] = {
    RangeToken.ONE_MONTH: 1,
    RangeToken.THREE_MONTHS: 3,
    RangeToken.SIX_MONTHS: 6,
    RangeToken.ONE_YEAR: 12,
}


def local_date(now: datetime, timezone: str = DEFAULT_TIMEZONE) -> date:
    """Calendar date of ``now`` in ``timezone``; naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(ZoneInfo(timezone)).date()


def subtract_months(day: date, months: int) -> date:
    """Step back ``months`` calendar months, clamping to the target month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def resolve_date_window(
    range_token: "RangeToken | str",
    now: datetime,
    timezone: str = DEFAULT_TIMEZONE,
) -> DateWindow:
    """Map ``range_token`` to the window ending today in ``timezone``.

    Raises:
        DataValidationError: if ``range_token`` is not a recognised token.
    """
    token = RangeToken.parse(range_token)
    to_day = local_date(now, timezone)

    if token in _DAY_SHIFTS:
        from_day = to_day - timedelta(days=_DAY_SHIFTS[token])
    else:
        from_day = subtract_months(to_day, _MONTH_SHIFTS[token])

    return DateWindow(from_date=from_day.isoformat(), to_date=to_day.isoformat())


class DateWindowResolver:
    """Resolver bound to one fixed timezone."""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE) -> None:
        self.timezone = timezone
        # Fail fast on an unknown zone name.
        ZoneInfo(timezone)

    def resolve(self, range_token: "RangeToken | str", now: datetime) -> DateWindow:
        return resolve_date_window(range_token, now, self.timezone)
