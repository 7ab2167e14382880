"""Tests for display formatting and numeric input parsing."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from fxlive.core.formatting import (
    PLACEHOLDER,
    clamp_number,
    format_amount,
    format_number,
    format_rate,
    fraction_digits_for,
    parse_decimal_input,
    seconds_since,
    staleness_level,
    time_ago_label,
)


@pytest.mark.parametrize(
    ("value", "digits"),
    [(150.0, 2), (100.0, 2), (1.3, 4), (1.0, 4), (0.74, 6), (-250.0, 2)],
)
def test_fraction_digits_adapt_to_magnitude(value: float, digits: int) -> None:
    assert fraction_digits_for(value) == digits


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (110.456, "110.46"),
        (1234.5, "1,234.50"),
        (1.34567, "1.3457"),
        (1.3, "1.30"),
        (0.7431234, "0.743123"),
        (0.5, "0.50"),
    ],
)
def test_format_rate(value: float, expected: str) -> None:
    assert format_rate(value) == expected


def test_format_amount_and_number() -> None:
    assert format_amount(1000) == "1,000"
    assert format_amount(1234.567) == "1,234.57"
    assert format_amount(12.5) == "12.5"
    assert format_number(float("nan")) == PLACEHOLDER
    assert format_rate(float("inf")) == PLACEHOLDER


@pytest.mark.parametrize(
    ("raw", "value"),
    [("1000", 1000.0), ("1,000.50", 1000.5), (" 12 ", 12.0), (".5", 0.5), ("7.", 7.0)],
)
def test_parse_valid_decimal_input(raw: str, value: float) -> None:
    parsed = parse_decimal_input(raw)

    assert parsed.ok
    assert parsed.value == value
    assert parsed.error is None


@pytest.mark.parametrize("raw", ["", "  ", "."])
def test_in_progress_input_has_no_error(raw: str) -> None:
    parsed = parse_decimal_input(raw)

    assert not parsed.ok
    assert parsed.error is None


@pytest.mark.parametrize("raw", ["abc", "-5", "1.2.3", "1e5"])
def test_invalid_input_reports_hint(raw: str) -> None:
    parsed = parse_decimal_input(raw)

    assert not parsed.ok
    assert parsed.error == "Enter a number (e.g. 1000 or 1,000.50)"


def test_clamp_number() -> None:
    assert clamp_number(5, 0, 3) == 3
    assert clamp_number(-1, 0, 3) == 0
    assert clamp_number(2, 0, 3) == 2


def test_time_ago_labels() -> None:
    now = datetime(2024, 3, 15, 4, 0, tzinfo=UTC)

    assert seconds_since(None, now) is None
    assert seconds_since(now - timedelta(seconds=42.9), now) == 42
    assert seconds_since(datetime(2024, 3, 15, 3, 59), now) == 60

    assert time_ago_label(None) == PLACEHOLDER
    assert time_ago_label(3) == "just now"
    assert time_ago_label(42) == "42s ago"
    assert time_ago_label(125) == "2m ago"
    assert time_ago_label(7300) == "2h ago"


def test_staleness_levels() -> None:
    assert staleness_level(None) == "unknown"
    assert staleness_level(59) == "fresh"
    assert staleness_level(60) == "warm"
    assert staleness_level(299) == "warm"
    assert staleness_level(300) == "stale"
