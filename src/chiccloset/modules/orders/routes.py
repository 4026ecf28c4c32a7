"""Order API routes."""

from fastapi import status

from chiccloset.core.errors import InsufficientStockError, NotFoundError, PaymentDeclinedError
from chiccloset.core.observability import create_span
from chiccloset.core.observability.spans import mark_error
from chiccloset.modules.orders import router
from chiccloset.modules.orders.schemas import (
    OrderCreate,
    OrderCreatedResponse,
    OrderListResponse,
    OrderResponse,
)
from chiccloset.modules.orders.services import OrderSvc


@router.post(
    "",
    response_model=OrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="Check inventory, charge the payment method and confirm the order.",
)
def create_order(data: OrderCreate, service: OrderSvc) -> OrderCreatedResponse:
    """Place an order."""
    with create_span(
        "api.orders.create",
        {
            "http.method": "POST",
            "http.route": "/api/orders",
            "order.userId": data.user_id,
            "order.itemCount": len(data.items),
        },
    ) as span:
        span.add_event("order_creation_started")

        try:
            order = service.create_order(data)
        except InsufficientStockError:
            mark_error(span, "Insufficient inventory")
            raise
        except PaymentDeclinedError:
            mark_error(span, "Payment failed")
            raise

        return OrderCreatedResponse(order=order)


@router.get(
    "",
    response_model=OrderListResponse,
    summary="List orders",
    description="List every order placed since the API started.",
)
def list_orders(service: OrderSvc) -> OrderListResponse:
    """List orders."""
    with create_span("api.orders.list") as span:
        orders = service.list_orders()

        span.set_attribute("orders.count", len(orders))
        span.add_event("orders_fetched")
        return OrderListResponse(orders=orders)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
    description="Get a single order.",
)
def get_order(order_id: int, service: OrderSvc) -> OrderResponse:
    """Get an order."""
    with create_span("api.orders.get", {"order.id": order_id}) as span:
        try:
            order = service.get_order(order_id)
        except NotFoundError:
            span.add_event("order_not_found")
            raise

        span.add_event("order_found")
        return OrderResponse(order=order)
