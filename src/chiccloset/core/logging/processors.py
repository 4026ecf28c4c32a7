"""structlog configuration with trace correlation."""

import logging

import structlog
from structlog.typing import EventDict, WrappedLogger

from chiccloset.core.observability.spans import current_trace_ids


def add_trace_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ``trace_id``/``span_id`` of the active span to the event.

    Lets a log search on a trace ID return every line written while that
    trace was being handled.
    """
    ids = current_trace_ids()
    if ids:
        event_dict.setdefault("trace_id", ids["trace_id"])
        event_dict.setdefault("span_id", ids["span_id"])
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog for the process.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ...)
        json_logs: Render JSON lines instead of the colored console format
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_context,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if json_logs
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
