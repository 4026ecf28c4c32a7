"""Traced HTTP client for the ChicCloset API.

Every call runs inside an ``api.<operation>`` client span and injects
the active trace context into the request headers, so the API's server
spans become children of the storefront's spans.
"""

from typing import Any

import httpx
import structlog
from opentelemetry import propagate
from opentelemetry.trace import SpanKind, Status, StatusCode

from chiccloset.core.database import Order, Product
from chiccloset.modules.auth.schemas import LoginResponse
from chiccloset.modules.debug.schemas import TraceDebugResponse
from chiccloset.modules.orders.schemas import OrderCreate
from storefront.config import settings
from storefront.telemetry import tracer


log = structlog.get_logger()


class ApiError(Exception):
    """Non-success response from the API."""

    def __init__(
        self,
        status_code: int,
        message: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}
        super().__init__(message)

    @property
    def error_code(self) -> str | None:
        """Last segment of the problem ``type`` URI, e.g. ``payment_declined``."""
        type_uri = self.payload.get("type")
        return type_uri.rsplit("/", 1)[-1] if type_uri else None

    @property
    def trace_id(self) -> str | None:
        return self.payload.get("trace_id")


class StorefrontClient:
    """Client for the ChicCloset REST API.

    Args:
        base_url: API root; defaults to ``STOREFRONT_API_BASE_URL``
        timeout: Request timeout in seconds
        http: Pre-built httpx client (tests pass a TestClient here)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._http = http or httpx.Client(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.request_timeout,
        )

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        with tracer.start_as_current_span(
            f"api.{operation}",
            kind=SpanKind.CLIENT,
            attributes={"http.method": method, "http.url": path},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            headers: dict[str, str] = {}
            propagate.inject(headers)

            response = self._http.request(
                method, path, json=json, params=params, headers=headers
            )
            span.set_attribute("http.status_code", response.status_code)

            try:
                payload = response.json()
            except ValueError:
                payload = {}

            if response.is_error or payload.get("success") is False:
                message = (
                    payload.get("message")
                    or payload.get("detail")
                    or response.reason_phrase
                )
                error = ApiError(response.status_code, message, payload)
                span.record_exception(error)
                span.set_status(Status(StatusCode.ERROR, message))
                log.warning(
                    "api_request_failed",
                    operation=operation,
                    status_code=response.status_code,
                    message=message,
                )
                raise error

            span.set_status(Status(StatusCode.OK))
            return payload

    def login(self, email: str, password: str) -> LoginResponse:
        payload = self._request(
            "auth.login",
            "POST",
            "/api/auth/login",
            json={"email": email, "password": password},
        )
        return LoginResponse.model_validate(payload)

    def list_products(
        self,
        category: str | None = None,
        sort: str | None = None,
    ) -> list[Product]:
        params = {key: value for key, value in (("category", category), ("sort", sort)) if value}
        payload = self._request("products.list", "GET", "/api/products", params=params)
        return [Product.model_validate(item) for item in payload["products"]]

    def get_product(self, product_id: int) -> Product:
        payload = self._request("products.get", "GET", f"/api/products/{product_id}")
        return Product.model_validate(payload["product"])

    def create_order(self, order: OrderCreate) -> Order:
        payload = self._request(
            "orders.create",
            "POST",
            "/api/orders",
            json=order.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Order.model_validate(payload["order"])

    def get_order(self, order_id: int) -> Order:
        payload = self._request("orders.get", "GET", f"/api/orders/{order_id}")
        return Order.model_validate(payload["order"])

    def list_orders(self) -> list[Order]:
        payload = self._request("orders.list", "GET", "/api/orders")
        return [Order.model_validate(item) for item in payload["orders"]]

    def debug_trace(self) -> TraceDebugResponse:
        payload = self._request("debug.trace", "GET", "/api/debug/trace")
        return TraceDebugResponse.model_validate(payload)
