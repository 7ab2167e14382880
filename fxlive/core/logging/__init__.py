"""Logging utilities for monitoring and debugging."""

from fxlive.core.logging.config import LogConfig
from fxlive.core.logging.logger import (
    JsonLineSink,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "JsonLineSink",
    "current_trace_id",
    "get_logger",
    "configure_logging",
    "log_context",
    "logger",
]
