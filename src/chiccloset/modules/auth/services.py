"""Authentication service for the storefront login."""

import time
from typing import Annotated

import structlog
from fastapi import Depends

from chiccloset.api.dependencies import Database
from chiccloset.core.constants import USERS_QUERY_MS
from chiccloset.core.database import User, simulate_db_query
from chiccloset.core.errors import UnauthorizedError
from chiccloset.core.observability import business_metrics, create_span
from chiccloset.core.observability.spans import mark_error
from chiccloset.modules.auth.schemas import LoginResponse, UserPublic


logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password"


def issue_token(user: User) -> str:
    """Issue the demo session token ``jwt_<epoch ms>_<user id>``."""
    return f"jwt_{int(time.time() * 1000)}_{user.id}"


class AuthService:
    """Validates credentials against the demo user list."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def validate_credentials(self, email: str, password: str) -> User | None:
        """Look up a user by email and password.

        Args:
            email: Login email
            password: Plain-text demo password

        Returns:
            The matching user, or None when the credentials are wrong
        """
        with create_span(
            "auth.validateCredentials",
            {"auth.method": "password", "user.email": email},
        ) as span:
            span.add_event("validation_started")

            simulate_db_query("query.users", USERS_QUERY_MS)

            user = self.db.find_user(email, password)

            if user:
                span.add_event("user_authenticated")
                span.set_attribute("auth.result", "success")
                span.set_attribute("user.id", user.id)
                return user

            span.add_event("authentication_failed")
            span.set_attribute("auth.result", "failure")
            mark_error(span, "Invalid credentials")
            return None

    def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate and issue a token.

        Raises:
            UnauthorizedError: If the credentials do not match a user
        """
        attributes = {"auth.method": "password"}
        business_metrics.login_attempts.add(1, attributes)

        user = self.validate_credentials(email, password)
        if user is None:
            business_metrics.login_failures.add(1, attributes)
            logger.warning("login_failed", email=email)
            raise UnauthorizedError(INVALID_CREDENTIALS, error_code="invalid_credentials")

        business_metrics.login_successes.add(1, attributes)
        logger.info("login_succeeded", user_id=user.id)
        return LoginResponse(user=UserPublic.from_user(user), token=issue_token(user))


AuthSvc = Annotated[AuthService, Depends(AuthService)]
