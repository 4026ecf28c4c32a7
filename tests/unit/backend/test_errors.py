"""Tests for domain exceptions and their problem-detail responses."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chiccloset.core.errors import (
    AppException,
    BadRequestError,
    InsufficientStockError,
    NotFoundError,
    PaymentDeclinedError,
    ServiceUnavailableError,
    register_exception_handlers,
)


@pytest.fixture
def error_client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/stock")
    def stock() -> None:
        raise InsufficientStockError("Product Cashmere Sweater is out of stock")

    @app.get("/missing")
    def missing() -> None:
        raise NotFoundError("Product not found", resource="product", resource_id="9")

    @app.get("/down")
    def down() -> None:
        raise ServiceUnavailableError()

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_defaults(self):
        exc = PaymentDeclinedError()

        assert isinstance(exc, BadRequestError)
        assert exc.status_code == 400
        assert exc.error_code == "payment_declined"
        assert str(exc) == "Payment declined by gateway"

    def test_not_found_details(self):
        exc = NotFoundError(resource="order", resource_id="42")

        assert exc.details == {"resource": "order", "resource_id": "42"}
        assert exc.message == "Resource not found"

    def test_overrides(self):
        exc = AppException("Nope", error_code="custom", details={"a": 1})

        assert (exc.message, exc.error_code, exc.details) == ("Nope", "custom", {"a": 1})


class TestHandlers:
    """Tests for the registered exception handlers."""

    def test_app_exception_body(self, error_client: TestClient):
        response = error_client.get("/stock")

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "https://chiccloset.example.com/errors/insufficient_stock"
        assert body["title"] == "Insufficient Stock"
        assert body["success"] is False
        assert body["message"] == "Product Cashmere Sweater is out of stock"
        assert body["instance"] == "/stock"

    def test_details_are_merged(self, error_client: TestClient):
        body = error_client.get("/missing").json()

        assert body["status"] == 404
        assert body["resource"] == "product"
        assert body["resource_id"] == "9"

    def test_service_unavailable(self, error_client: TestClient):
        response = error_client.get("/down")

        assert response.status_code == 503
        assert response.json()["detail"] == "Service temporarily unavailable"

    def test_unhandled_exception_hides_message(self, error_client: TestClient):
        response = error_client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Internal server error"
        assert "kaboom" not in response.text
