"""One end-to-end purchase, as a single trace.

The journey replays what a shopper does in the browser: sign in, browse,
fill the cart, check out, pay. Everything happens under one
``journey.purchase`` root span, so the API's server spans for each call
hang off the same trace as the client's cart and checkout spans.
"""

import time
from collections.abc import MutableMapping, Sequence

import structlog
from opentelemetry.trace import format_trace_id

from chiccloset.core.database import Order, OrderItem
from chiccloset.core.observability import create_span, record_business_metric
from chiccloset.modules.orders.schemas import OrderCreate
from storefront.cart import Cart
from storefront.checkout import (
    CheckoutForm,
    OrderSummary,
    PaymentDetails,
    submit_checkout,
    validate_payment,
)
from storefront.client import StorefrontClient
from storefront.demo import demo_delay, get_demo_config, get_experiment_group, is_demo_active
from storefront.session import AuthSession
from storefront.telemetry import tracer


log = structlog.get_logger()


class JourneyError(Exception):
    """A step of the journey could not complete."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step}: {message}")


class ShoppingJourney:
    """Drive one purchase through the storefront.

    Args:
        client: API client
        demo: Active demo scenario, defaults to the configured one
        storage: Per-shopper storage for the experiment group
    """

    def __init__(
        self,
        client: StorefrontClient,
        demo: str | None = None,
        storage: MutableMapping[str, str] | None = None,
    ) -> None:
        self.client = client
        self.demo = demo
        self.storage = storage if storage is not None else {}
        self.session = AuthSession(client)
        self.cart = Cart()
        self.trace_id: str | None = None

    def run(
        self,
        email: str,
        password: str,
        product_ids: Sequence[int],
        form: CheckoutForm,
        payment: PaymentDetails,
    ) -> Order:
        """Run the purchase and return the confirmed order.

        Raises:
            JourneyError: If login, payment validation or cart filling fails
            CheckoutValidationError: If the shipping form is invalid
            CheckoutPaymentError: If the ``error`` demo scenario fires
            ApiError: If the API rejects the order
        """
        with create_span(
            "journey.purchase",
            {"journey.products": len(product_ids), "payment.method": payment.payment_method.value},
            tracer=tracer,
        ) as span:
            self.trace_id = format_trace_id(span.get_span_context().trace_id)
            started = time.perf_counter()

            if is_demo_active("experiment", self.demo):
                scenario = get_demo_config("experiment")
                group = get_experiment_group(
                    self.storage,
                    treatment_rate=scenario.treatment_rate if scenario and scenario.treatment_rate else 0.5,
                )
                span.set_attribute("experiment.group", group)

            # 1. Sign in
            if not self.session.login(email, password):
                raise JourneyError("login", "invalid email or password")
            span.add_event("journey_logged_in")

            # 2. Browse
            if is_demo_active("slow-page", self.demo):
                scenario = get_demo_config("slow-page")
                span.add_event("simulating_slow_page")
                demo_delay(scenario.delay_ms if scenario and scenario.delay_ms else 2000)
            catalogue = {product.id: product for product in self.client.list_products()}
            span.add_event("journey_products_listed", {"products.count": len(catalogue)})

            # 3. Fill the cart
            for product_id in product_ids:
                product = catalogue.get(product_id)
                if product is None:
                    raise JourneyError("cart", f"product {product_id} is not in the catalogue")
                self.cart.add_item(product)

            summary = OrderSummary.from_cart(self.cart)
            record_business_metric("cart_value", summary.subtotal, "USD")

            # 4. Check out
            shipping_address = submit_checkout(form, started, self.demo)

            # 5. Pay
            payment_errors = validate_payment(payment)
            if payment_errors:
                span.add_event("payment_validation_failed", {"error.fields": ", ".join(payment_errors)})
                raise JourneyError("payment", ", ".join(payment_errors.values()))

            # 6. Place the order
            user = self.session.user
            if user is None:
                raise JourneyError("order", "session expired")
            order = self.client.create_order(
                OrderCreate(
                    user_id=user.id,
                    items=[
                        OrderItem(product_id=item.id, quantity=item.quantity)
                        for item in self.cart.items
                    ],
                    shipping_address=shipping_address,
                    payment_method=payment.payment_method,
                )
            )
            span.set_attribute("order.id", order.id)
            record_business_metric("order_total", order.total, "USD")

            # 7. Empty the cart
            self.cart.clear()

            log.info(
                "journey_completed",
                order_id=order.id,
                total=order.total,
                transaction_id=order.transaction_id,
            )
            return order
