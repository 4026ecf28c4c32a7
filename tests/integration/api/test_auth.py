"""Integration tests for the login endpoint."""

import pytest
from httpx import AsyncClient
from opentelemetry.trace import StatusCode


pytestmark = pytest.mark.integration


class TestLogin:
    """Tests for POST /api/auth/login."""

    async def test_login_success(self, client: AsyncClient, spans):
        response = await client.post(
            "/api/auth/login",
            json={"email": "demo@chiccloset.com", "password": "demo123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {"id": 1, "email": "demo@chiccloset.com", "name": "Fashion Lover"}
        assert data["token"].startswith("jwt_")
        assert data["token"].endswith("_1")

        span = spans.one("api.auth.login")
        assert span.attributes["auth.result"] == "success"
        assert span.status.status_code is StatusCode.OK
        validate = spans.one("auth.validateCredentials")
        assert validate.parent.span_id == span.context.span_id
        assert spans.named("database.query.users")

    async def test_login_wrong_password(self, client: AsyncClient, spans, metric_values):
        before = metric_values.total("auth.login.failures")

        response = await client.post(
            "/api/auth/login",
            json={"email": "demo@chiccloset.com", "password": "nope"},
        )

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Invalid email or password"
        assert data["type"].endswith("/invalid_credentials")
        assert len(data["trace_id"]) == 32

        span = spans.one("api.auth.login")
        assert span.status.status_code is StatusCode.ERROR
        assert span.status.description == "Invalid credentials"
        assert span.attributes["auth.result"] == "failure"
        assert metric_values.total("auth.login.failures") == before + 1

    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"email": "demo@chiccloset.com"})

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert any(error["field"] == "password" for error in data["errors"])

    async def test_password_never_returned_or_traced(self, client: AsyncClient, spans):
        response = await client.post(
            "/api/auth/login",
            json={"email": "demo@chiccloset.com", "password": "demo123"},
        )

        assert "password" not in response.json()["user"]
        for span in spans.all():
            assert "demo123" not in {str(v) for v in span.attributes.values()}

    async def test_login_empty_password_is_rejected_as_invalid(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login",
            json={"email": "demo@chiccloset.com", "password": ""},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"
