"""Tests for the exception hierarchy and error payload helpers."""

from __future__ import annotations

from fxlive.core.exceptions import (
    DataValidationError,
    ErrorCode,
    ErrorMessageTemplate,
    FxLiveError,
    ProviderError,
    UpstreamError,
    error_payload,
    format_error_response,
)


def test_hierarchy() -> None:
    assert issubclass(DataValidationError, FxLiveError)
    assert issubclass(UpstreamError, ProviderError)
    assert issubclass(ProviderError, FxLiveError)


def test_validation_error_carries_field_errors() -> None:
    error = DataValidationError("Invalid range: '2W'", validation_errors={"range": "2W"})

    assert error.error_code == "VALIDATION_ERROR"
    assert error.details == {"validation_errors": {"range": "2W"}}
    assert str(error) == "Invalid range: '2W'"


def test_upstream_error_records_status() -> None:
    error = UpstreamError(
        "FX provider error: 429 Too Many Requests",
        "frankfurter",
        status_code=429,
        reason="Too Many Requests",
        details={"endpoint": "latest"},
    )

    assert error.error_code == "UPSTREAM_ERROR"
    assert error.details == {"endpoint": "latest", "status_code": 429, "reason": "Too Many Requests"}


def test_error_payload_shape() -> None:
    payload = error_payload(UpstreamError("FX provider error: 502 Bad Gateway", "frankfurter", status_code=502))

    assert payload == {
        "error": {
            "code": "UPSTREAM_ERROR",
            "message": "FX provider error: 502 Bad Gateway",
            "details": {"status_code": 502},
        }
    }


def test_error_payload_maps_unknown_codes_to_general() -> None:
    payload = error_payload(FxLiveError("odd", "SOMETHING_ELSE"))

    assert payload["error"]["code"] == "GENERAL_ERROR"
    assert payload["error"]["message"] == "odd"


def test_templates_render_with_details() -> None:
    assert (
        ErrorMessageTemplate.get_message(ErrorCode.UPSTREAM_ERROR, status=500, reason="Internal Server Error")
        == "FX provider error: 500 Internal Server Error"
    )
    assert ErrorMessageTemplate.get_message(ErrorCode.UPSTREAM_ERROR) == "Unknown error (code: UPSTREAM_ERROR)"
    assert ErrorMessageTemplate.get_message(ErrorCode.VALIDATION_ERROR) == "Unknown error"


def test_format_error_response_uses_template_when_message_missing() -> None:
    response = format_error_response(ErrorCode.INSUFFICIENT_DATA, points=1)

    assert response == {
        "error": {
            "code": "INSUFFICIENT_DATA",
            "message": "Not enough data points to draw a chart.",
            "details": {"points": 1},
        }
    }


def test_format_error_response_keeps_explicit_message() -> None:
    response = format_error_response(ErrorCode.INVALID_AMOUNT, "Amount must be positive", value="-5")

    assert response["error"]["message"] == "Amount must be positive"
    assert response["error"]["details"] == {"value": "-5"}
