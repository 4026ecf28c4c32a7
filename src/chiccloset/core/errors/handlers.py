"""RFC 7807 Problem Details exception handlers.

Responses follow the "Problem Details for HTTP APIs" format and also carry
the ``success``/``message`` fields the storefront client reads. Every
handler marks the active span as failed so errors are visible in traces.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import BaseModel

from chiccloset.core.errors.exceptions import AppException
from chiccloset.core.observability.spans import current_trace_ids


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

ERROR_TYPE_BASE_URI = "https://chiccloset.example.com/errors"


class FieldError(BaseModel):
    """Represents a single field validation error."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI reference identifying the problem type
        title: Short human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying this specific occurrence
        success: Always false; mirrors the success envelope of the API
        message: Same as detail, for storefront clients
        errors: List of field-level errors (for validation errors)
        trace_id: Active trace ID for jumping from the error to the trace
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    success: bool = False
    message: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _get_trace_id() -> str | None:
    """Return the hex trace ID of the active span, if any."""
    ids = current_trace_ids()
    return ids["trace_id"] if ids else None


def _get_error_type_uri(error_code: str) -> str:
    """Generate a URI for the error type."""
    return f"{ERROR_TYPE_BASE_URI}/{error_code}"


def _mark_span_error(message: str, exc: Exception | None = None) -> None:
    span = trace.get_current_span()
    if not span.is_recording():
        return
    if exc is not None:
        span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR, message))


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle application-specific exceptions.

    Converts AppException subclasses to RFC 7807 Problem Details responses.
    """
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=str(request.url.path),
        details=exc.details,
    )
    _mark_span_error(exc.message)

    content: dict[str, Any] = ProblemDetail(
        type=_get_error_type_uri(exc.error_code),
        title=exc.error_code.replace("_", " ").title(),
        status=exc.status_code,
        detail=exc.message,
        message=exc.message,
        instance=str(request.url.path),
        trace_id=_get_trace_id(),
    ).model_dump(exclude_none=True)

    # Add any additional details from the exception
    if exc.details:
        for key, value in exc.details.items():
            if key not in content:
                content[key] = value

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Converts FastAPI/Pydantic validation errors to RFC 7807 format
    with detailed field-level error information.
    """
    errors: list[FieldError] = []

    for error in exc.errors():
        # Build field path from location
        loc = error.get("loc", ())
        # Skip "body" prefix in field path
        field_parts = [str(part) for part in loc if part != "body"]
        field = ".".join(field_parts) if field_parts else "unknown"

        errors.append(
            FieldError(
                field=field,
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )

    logger.warning(
        "validation_error",
        path=str(request.url.path),
        error_count=len(errors),
    )
    _mark_span_error("Request validation failed")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ProblemDetail(
            type=_get_error_type_uri("validation_error"),
            title="Validation Error",
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Request validation failed",
            message="Request validation failed",
            instance=str(request.url.path),
            errors=errors,
            trace_id=_get_trace_id(),
        ).model_dump(exclude_none=True),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Catches all unhandled exceptions and returns a generic 500 error.
    The actual error details are logged and recorded on the span but not
    exposed to clients.
    """
    logger.exception(
        "unhandled_exception",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )
    _mark_span_error(str(exc), exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ProblemDetail(
            type=_get_error_type_uri("internal_error"),
            title="Internal Server Error",
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
            message="Internal server error",
            instance=str(request.url.path),
            trace_id=_get_trace_id(),
        ).model_dump(exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Call this function during app initialization:

        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
