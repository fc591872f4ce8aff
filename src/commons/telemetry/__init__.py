"""Telemetry module - structured logging and timing."""

from src.commons.telemetry.decorators import LogContext, log_exceptions, timed
from src.commons.telemetry.logger import (
    JsonFormatter,
    TextFormatter,
    build_formatter,
    clear_log_context,
    configure_logging,
    get_correlation_id,
    get_log_context,
    get_logger,
    set_correlation_id,
    set_log_context,
)

__all__ = [
    # Decorators
    "log_exceptions",
    "timed",
    "LogContext",
    # Logger
    "get_logger",
    "configure_logging",
    "build_formatter",
    "JsonFormatter",
    "TextFormatter",
    # Correlation ID
    "get_correlation_id",
    "set_correlation_id",
    # Log Context
    "get_log_context",
    "set_log_context",
    "clear_log_context",
]
