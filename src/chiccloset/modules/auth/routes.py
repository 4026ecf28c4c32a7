"""Authentication API routes."""

from chiccloset.core.errors import UnauthorizedError
from chiccloset.core.observability import create_span
from chiccloset.core.observability.spans import mark_error
from chiccloset.modules.auth import router
from chiccloset.modules.auth.schemas import LoginRequest, LoginResponse
from chiccloset.modules.auth.services import AuthSvc


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Validate email and password and return the user with a session token.",
)
def login(data: LoginRequest, service: AuthSvc) -> LoginResponse:
    """Log a shopper in."""
    with create_span(
        "api.auth.login",
        {
            "http.method": "POST",
            "http.route": "/api/auth/login",
            "user.email": data.email,
        },
    ) as span:
        span.add_event("login_attempt_started")

        try:
            result = service.login(data.email, data.password)
        except UnauthorizedError:
            span.add_event("login_failed")
            span.set_attribute("auth.result", "failure")
            mark_error(span, "Invalid credentials")
            raise

        span.add_event("login_successful", {"user.id": result.user.id})
        span.set_attribute("auth.result", "success")
        return result
