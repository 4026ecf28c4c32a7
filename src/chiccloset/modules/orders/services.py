"""Order service: placement workflow and lookups."""

from typing import Annotated

import structlog
from fastapi import Depends
from opentelemetry import trace

from chiccloset.api.dependencies import Database
from chiccloset.core.constants import (
    INSERT_ORDER_MS,
    ORDER_QUERY_MS,
    ORDERS_QUERY_MS,
    USER_QUERY_MS,
)
from chiccloset.core.database import Order, OrderStatus, Product, simulate_db_query
from chiccloset.core.errors import (
    InsufficientStockError,
    NotFoundError,
    PaymentDeclinedError,
)
from chiccloset.core.observability import business_metrics
from chiccloset.modules.orders.payments import Gateway
from chiccloset.modules.orders.schemas import OrderCreate
from chiccloset.modules.products.services import ProductSvc


logger = structlog.get_logger()


def calculate_order_total(lines: list[tuple[Product, int]]) -> float:
    """Sum ``price * quantity`` over the order lines, rounded to cents."""
    return round(sum(product.price * quantity for product, quantity in lines), 2)


class OrderService:
    """Service for placing and reading orders.

    ``create_order`` runs inside the caller's ``api.orders.create`` span
    and adds its step events to it; inventory, payment and database work
    get their own child spans.
    """

    def __init__(self, db: Database, products: ProductSvc, gateway: Gateway) -> None:
        self.db = db
        self.products = products
        self.gateway = gateway

    def create_order(self, data: OrderCreate) -> Order:
        """Validate stock, charge the customer and store the order.

        Args:
            data: Order request

        Returns:
            The confirmed order

        Raises:
            InsufficientStockError: If any line cannot be fulfilled
            PaymentDeclinedError: If the gateway declines the charge
        """
        span = trace.get_current_span()

        # Step 1: validate user
        simulate_db_query("query.user", USER_QUERY_MS)
        span.add_event("user_validated")

        # Step 2: check inventory for all items, stopping at the first shortfall
        lines: list[tuple[Product, int]] = []
        for item in data.items:
            available, product = self.products.check_inventory(
                item.product_id, item.quantity
            )
            if not available or product is None:
                span.add_event("inventory_check_failed", {"product.id": item.product_id})
                name = product.name if product else item.product_id
                raise InsufficientStockError(
                    f"Product {name} is out of stock",
                    details={"product_id": item.product_id},
                )
            lines.append((product, item.quantity))

        span.add_event("inventory_validated")

        # Step 3: calculate total
        total = calculate_order_total(lines)
        span.set_attribute("order.total", total)

        # Step 4: process payment
        payment = self.gateway.process_payment(total, data.payment_method)
        if not payment.success or payment.transaction_id is None:
            span.add_event("payment_failed")
            logger.warning(
                "payment_declined",
                user_id=data.user_id,
                total=total,
                payment_method=data.payment_method.value,
            )
            raise PaymentDeclinedError(payment.error)

        span.add_event("payment_completed", {"transaction_id": payment.transaction_id})

        # Step 5: create order
        simulate_db_query("insert.order", INSERT_ORDER_MS)
        order = self.db.insert_order(
            user_id=data.user_id,
            items=data.items,
            total=total,
            shipping_address=data.shipping_address,
            payment_method=data.payment_method,
            transaction_id=payment.transaction_id,
            status=OrderStatus.CONFIRMED,
        )

        span.add_event(
            "order_created",
            {
                "order.id": order.id,
                "order.total": total,
                "order.status": order.status.value,
            },
        )
        business_metrics.orders_created.add(
            1, {"payment.method": data.payment_method.value}
        )
        business_metrics.order_value.record(
            total, {"payment.method": data.payment_method.value}
        )
        logger.info("order_created", order_id=order.id, total=total)
        return order

    def get_order(self, order_id: int) -> Order:
        """Get an order by ID.

        Raises:
            NotFoundError: If the order does not exist
        """
        simulate_db_query("query.order", ORDER_QUERY_MS)

        order = self.db.get_order(order_id)
        if order is None:
            raise NotFoundError(
                "Order not found",
                resource="order",
                resource_id=str(order_id),
            )
        return order

    def list_orders(self) -> list[Order]:
        """List every order placed since startup."""
        simulate_db_query("query.orders", ORDERS_QUERY_MS)
        return list(self.db.orders)


OrderSvc = Annotated[OrderService, Depends(OrderService)]
