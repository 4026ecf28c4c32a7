"""Logging module with structured logging, trace correlation and request tracking."""

from chiccloset.core.logging.middleware import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)
from chiccloset.core.logging.processors import add_trace_context, configure_logging


__all__ = [
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
    "add_trace_context",
    "configure_logging",
]
