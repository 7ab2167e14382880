"""Standardised error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes shared by exceptions, log records and CLI payloads."""

    GENERAL_ERROR = "GENERAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    SYSTEM_ERROR = "SYSTEM_ERROR"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    OUTPUT_WRITE_ERROR = "OUTPUT_WRITE_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
