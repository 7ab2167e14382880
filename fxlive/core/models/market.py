"""Currency codes and range tokens."""

import re
from enum import Enum

from fxlive.core.exceptions.base import DataValidationError

_CODE_PATTERN = re.compile(r"^[A-Z]{3,5}$")


class RangeToken(str, Enum):
    """Symbolic historical window selector."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"

    @classmethod
    def parse(cls, value: "str | RangeToken") -> "RangeToken":
        """Parse a token case-insensitively, raising on anything unrecognised."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper()
        for token in cls:
            if token.value == normalized:
                return token
        raise DataValidationError(
            f"Invalid range: {value!r}",
            validation_errors={"range": value, "allowed": [t.value for t in cls]},
        )


def normalize_code(code: str) -> str:
    """Trim and uppercase a currency code."""
    return code.strip().upper()


def validate_code(code: str) -> str:
    """Normalize ``code`` and require 3-5 ASCII letters."""
    normalized = normalize_code(code)
    if not _CODE_PATTERN.match(normalized):
        raise DataValidationError(
            f"Invalid currency code: {code!r}",
            validation_errors={"code": code},
        )
    return normalized


def normalize_codes(codes: list[str] | tuple[str, ...]) -> list[str]:
    """Uppercase, drop blanks and dedupe while preserving first-seen order."""
    seen: dict[str, None] = {}
    for code in codes:
        normalized = normalize_code(code)
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)
