"""Standardised error messages and payloads."""

from typing import Any

from fxlive.core.exceptions.base import FxLiveError
from fxlive.core.exceptions.codes import ErrorCode


class ErrorMessageTemplate:
    """Default messages for errors raised without explicit text."""

    _templates: dict[ErrorCode, str] = {
        ErrorCode.GENERAL_ERROR: "Unknown error",
        ErrorCode.UPSTREAM_ERROR: "FX provider error: {status} {reason}",
        ErrorCode.SYSTEM_ERROR: "Internal error",
        ErrorCode.INVALID_AMOUNT: "Enter a number (e.g. 1000 or 1,000.50)",
        ErrorCode.INSUFFICIENT_DATA: "Not enough data points to draw a chart.",
        ErrorCode.OUTPUT_WRITE_ERROR: "Unable to write '{path}': {reason}",
        ErrorCode.UNEXPECTED_ERROR: "Unexpected error: {reason}",
    }

    @classmethod
    def get_message(cls, error_code: ErrorCode, **kwargs: Any) -> str:
        """Render the template for ``error_code``.

        Falls back to the generic message tagged with the code when a template
        variable is missing.
        """
        template = cls._templates.get(error_code, cls._templates[ErrorCode.GENERAL_ERROR])
        try:
            return template.format(**kwargs)
        except KeyError:
            return f"{cls._templates[ErrorCode.GENERAL_ERROR]} (code: {error_code.value})"


def format_error_response(error_code: ErrorCode, message: str | None = None, **details: Any) -> dict[str, Any]:
    """Build the standard ``{"error": {...}}`` payload."""
    if message is None:
        message = ErrorMessageTemplate.get_message(error_code, **details)

    return {
        "error": {
            "code": error_code.value,
            "message": message,
            "details": details,
        }
    }


def error_payload(error: FxLiveError) -> dict[str, Any]:
    """Convert an ``FxLiveError`` into the standard error payload."""
    try:
        code = ErrorCode(error.error_code)
    except ValueError:
        code = ErrorCode.GENERAL_ERROR
    return {
        "error": {
            "code": code.value,
            "message": error.message,
            "details": dict(error.details),
        }
    }
