"""Client-side authentication session.

Passwords never reach a span, a log line or a metric.
"""

import time
from datetime import datetime, timezone

import httpx
import structlog

from chiccloset.core.observability import business_metrics, create_span, set_user_context
from chiccloset.core.observability.spans import mark_error
from chiccloset.modules.auth.schemas import UserPublic
from storefront.client import ApiError, StorefrontClient
from storefront.telemetry import tracer
from storefront.validators import validate_email, validate_password


log = structlog.get_logger()

AUTH_METHOD = "email_password"
AUTH_PROVIDER = "local"


class AuthSession:
    """The signed-in shopper, if any."""

    def __init__(self, client: StorefrontClient) -> None:
        self.client = client
        self.user: UserPublic | None = None
        self.token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, email: str, password: str) -> bool:
        """Sign in through the API.

        Returns:
            True on success, False when the API rejects the credentials
            or cannot be reached
        """
        metric_attributes = {"auth.method": AUTH_METHOD, "auth.provider": AUTH_PROVIDER}

        with create_span(
            "auth.login",
            {"auth.method": AUTH_METHOD, "auth.provider": AUTH_PROVIDER},
            tracer=tracer,
        ) as span:
            span.add_event("login_attempt_started")
            started = time.perf_counter()

            try:
                span.add_event("validating_credentials")
                result = self.client.login(email, password)
            except (ApiError, httpx.HTTPError) as exc:
                message = exc.message if isinstance(exc, ApiError) else str(exc)
                span.record_exception(exc)
                span.add_event(
                    "login_failed",
                    {"error.type": type(exc).__name__, "error.message": message},
                )
                mark_error(span, "Login failed")
                business_metrics.login_attempts.add(1, metric_attributes)
                business_metrics.login_failures.add(
                    1, {"auth.method": AUTH_METHOD, "error.type": type(exc).__name__}
                )
                log.error(
                    "login_failed",
                    status_code=getattr(exc, "status_code", None),
                    error=message,
                )
                return False

            self.user = result.user
            self.token = result.token
            duration_ms = (time.perf_counter() - started) * 1000
            span.set_attribute("auth.duration_ms", duration_ms)

            set_user_context(result.user.id, result.user.email)
            span.add_event("user_context_set")
            span.add_event(
                "login_successful",
                {
                    "user.name": result.user.name,
                    "session.started": datetime.now(timezone.utc).isoformat(),
                },
            )

            business_metrics.login_attempts.add(1, metric_attributes)
            business_metrics.login_successes.add(1, {"auth.method": AUTH_METHOD})
            log.info(
                "user_logged_in",
                user_id=result.user.id,
                auth_duration_ms=round(duration_ms, 2),
            )
            return True

    def signup(self, email: str, password: str, name: str) -> bool:
        """Create a local account and sign it in.

        The API has no signup endpoint, so the account lives only in this
        session; it gets user ID 0 until the API knows about it.

        Returns:
            True on success, False when the input is rejected
        """
        with create_span(
            "auth.signup",
            {
                "auth.method": AUTH_METHOD,
                "user.email": email,
                "user.name": name,
                "auth.provider": AUTH_PROVIDER,
                "password.length": len(password),
            },
            tracer=tracer,
        ) as span:
            span.add_event("signup_attempt_started")

            span.add_event("validating_input")
            error = _signup_error(email, password, name)
            if error:
                span.add_event("signup_failed", {"error.message": error})
                mark_error(span, "Signup failed")
                log.error("signup_failed", error=error, user_email=email)
                return False

            self.user = UserPublic(id=0, email=email, name=name)
            self.token = None

            set_user_context(email, email)
            span.add_event(
                "signup_successful",
                {
                    "user.name": name,
                    "account.created": datetime.now(timezone.utc).isoformat(),
                },
            )
            log.info("user_signed_up", user_email=email, user_name=name)
            return True

    def logout(self) -> None:
        """Forget the signed-in user."""
        with create_span("auth.logout", tracer=tracer) as span:
            email = self.user.email if self.user else "unknown"
            span.set_attribute("user.email", email)
            span.add_event("logout_initiated")

            self.user = None
            self.token = None

            span.add_event(
                "session_terminated",
                {"session.ended": datetime.now(timezone.utc).isoformat()},
            )
            log.info("user_logged_out", user_email=email)


def _signup_error(email: str, password: str, name: str) -> str | None:
    if not name.strip():
        return "Name is required"
    if not validate_email(email):
        return "Please enter a valid email"
    if not validate_password(password):
        return "Password must be at least 6 characters"
    return None
