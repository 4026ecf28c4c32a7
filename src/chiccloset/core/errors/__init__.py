"""Error handling module with RFC 7807 Problem Details."""

from chiccloset.core.errors.exceptions import (
    AppException,
    BadRequestError,
    InsufficientStockError,
    NotFoundError,
    PaymentDeclinedError,
    ServiceUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from chiccloset.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "BadRequestError",
    # Handlers
    "FieldError",
    "InsufficientStockError",
    "NotFoundError",
    "PaymentDeclinedError",
    "ProblemDetail",
    "ServiceUnavailableError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
