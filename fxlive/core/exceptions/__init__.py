"""Exception handling module."""

from fxlive.core.exceptions.base import (
    AbortedOperation,
    DataValidationError,
    FxLiveError,
    ProviderError,
    UpstreamError,
)
from fxlive.core.exceptions.codes import ErrorCode
from fxlive.core.exceptions.messages import ErrorMessageTemplate, error_payload, format_error_response

__all__ = [
    "FxLiveError",
    "DataValidationError",
    "ProviderError",
    "UpstreamError",
    "AbortedOperation",
    "ErrorCode",
    "ErrorMessageTemplate",
    "error_payload",
    "format_error_response",
]
