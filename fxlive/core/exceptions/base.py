"""fxlive core exception classes."""

from typing import Any

from fxlive.core.exceptions.codes import ErrorCode


class FxLiveError(Exception):
    """Base class for every failure raised by fxlive."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the error.

        Args:
            message: human readable message
            error_code: stable machine readable code
            details: extra structured context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class DataValidationError(FxLiveError):
    """Malformed or out-of-range input reaching a boundary call."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR.value, super_details)
        self.validation_errors = validation_errors or {}


class ProviderError(FxLiveError):
    """Errors originating from the upstream rate provider."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = ErrorCode.PROVIDER_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class UpstreamError(ProviderError):
    """Non-success response (or no response at all) from the provider."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        if reason:
            super_details["reason"] = reason
        super().__init__(message, provider_name, ErrorCode.UPSTREAM_ERROR.value, super_details)
        self.status_code = status_code
        self.reason = reason


class AbortedOperation(Exception):
    """A fetch superseded by cancellation.

    Not an ``FxLiveError``: ``except FxLiveError`` handlers do not catch it.
    """

    def __init__(self, operation: str = "fetch") -> None:
        super().__init__(f"{operation} aborted")
        self.operation = operation
