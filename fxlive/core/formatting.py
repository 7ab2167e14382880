"""Display formatting, number parsing and staleness helpers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

PLACEHOLDER = "—"

_DECIMAL_INPUT = re.compile(r"^[0-9]*\.?[0-9]*$")

StalenessLevel = Literal["fresh", "warm", "stale", "unknown"]


@dataclass(frozen=True, slots=True)
class ParsedNumber:
    """Outcome of parsing user-typed decimal input.

    ``ok`` is false with ``error=None`` for in-progress input such as ``""``
    or ``"."``; it is false with a message for invalid input.
    """

    ok: bool
    value: float | None = None
    error: str | None = None


def format_number(value: float, min_fraction_digits: int = 0, max_fraction_digits: int = 2) -> str:
    """Group thousands and keep between ``min`` and ``max`` fraction digits."""
    if not math.isfinite(value):
        return PLACEHOLDER
    text = f"{value:,.{max_fraction_digits}f}"
    if max_fraction_digits > min_fraction_digits and "." in text:
        whole, fraction = text.split(".")
        fraction = fraction.rstrip("0").ljust(min_fraction_digits, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    return text


def fraction_digits_for(value: float) -> int:
    """Adaptive precision: large rates need fewer decimals than small ones."""
    magnitude = abs(value)
    if magnitude >= 100:
        return 2
    if magnitude >= 1:
        return 4
    return 6


def format_rate(value: float) -> str:
    if not math.isfinite(value):
        return PLACEHOLDER
    max_digits = fraction_digits_for(value)
    return format_number(value, min(2, max_digits), max_digits)


def format_amount(value: float) -> str:
    return format_number(value, 0, 2)


def normalize_number_input(raw: str) -> str:
    return raw.strip().replace(",", "")


def parse_decimal_input(raw: str) -> ParsedNumber:
    """Parse a decimal amount that may contain thousands separators."""
    normalized = normalize_number_input(raw)
    if normalized in ("", "."):
        return ParsedNumber(ok=False)

    if not _DECIMAL_INPUT.match(normalized):
        return ParsedNumber(ok=False, error="Enter a number (e.g. 1000 or 1,000.50)")

    value = float(normalized)
    if not math.isfinite(value):
        return ParsedNumber(ok=False, error="Invalid number")
    return ParsedNumber(ok=True, value=value)


def clamp_number(value: float, minimum: float, maximum: float) -> float:
    return min(maximum, max(minimum, value))


def seconds_since(timestamp: datetime | None, now: datetime | None = None) -> int | None:
    """Whole seconds elapsed since ``timestamp`` (naive values are taken as UTC)."""
    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    current = now or datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    return math.floor((current - timestamp).total_seconds())


def time_ago_label(seconds: int | None) -> str:
    if seconds is None:
        return PLACEHOLDER
    if seconds < 10:
        return "just now"
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    return f"{minutes // 60}h ago"


def staleness_level(seconds: int | None) -> StalenessLevel:
    if seconds is None:
        return "unknown"
    if seconds < 60:
        return "fresh"
    if seconds < 300:
        return "warm"
    return "stale"


__all__ = [
    "PLACEHOLDER",
    "ParsedNumber",
    "StalenessLevel",
    "clamp_number",
    "format_amount",
    "format_number",
    "format_rate",
    "fraction_digits_for",
    "normalize_number_input",
    "parse_decimal_input",
    "seconds_since",
    "staleness_level",
    "time_ago_label",
]
