"""Checkout and payment forms.

``submit_checkout`` is the conversion step the funnel metrics are built
around: it validates the shipping form in a child span, may fail on
purpose under the ``error`` demo scenario, and records the checkout
duration on success.
"""

import random
import time

import structlog

from chiccloset.core.database import PaymentMethod, ShippingAddress
from chiccloset.core.observability import business_metrics, create_span
from chiccloset.core.observability.spans import mark_error
from chiccloset.core.schemas import CamelModel
from storefront.cart import Cart
from storefront.demo import (
    demo_delay,
    generate_error_id,
    get_demo_config,
    is_demo_active,
    should_simulate_error,
)
from storefront.formatters import calculate_shipping, calculate_tax
from storefront.telemetry import tracer
from storefront.validators import (
    validate_card_number,
    validate_cvv,
    validate_email,
    validate_expiry_date,
    validate_phone,
    validate_zip_code,
)


log = structlog.get_logger()

PAYMENT_ROUTE = "/payment"


class CheckoutValidationError(Exception):
    """The shipping form has field errors."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__(f"Validation failed: {', '.join(errors)}")


class CheckoutPaymentError(Exception):
    """Simulated payment failure; ``error_id`` is what support asks for."""

    def __init__(self, error_id: str, message: str = "Card was declined") -> None:
        self.error_id = error_id
        super().__init__(f"{message} (error ID {error_id})")


class CheckoutForm(CamelModel):
    """Shipping information entered on the checkout page."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "USA"

    def to_shipping_address(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class PaymentDetails(CamelModel):
    """Card details entered on the payment page."""

    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    card_name: str = ""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""


class OrderSummary(CamelModel):
    """Price breakdown shown before the order is placed."""

    subtotal: float
    shipping: float
    tax: float
    total: float

    @classmethod
    def from_cart(cls, cart: Cart) -> "OrderSummary":
        subtotal = cart.total()
        shipping = calculate_shipping(subtotal)
        tax = calculate_tax(subtotal)
        return cls(
            subtotal=round(subtotal, 2),
            shipping=shipping,
            tax=round(tax, 2),
            total=round(subtotal + shipping + tax, 2),
        )


def validate_checkout(form: CheckoutForm, demo: str | None = None) -> dict[str, str]:
    """Validate the shipping form.

    Args:
        form: Submitted form
        demo: Active demo scenario, defaults to the configured one

    Returns:
        Field name (camelCase, as shown on the form) to error message;
        empty when the form is valid
    """
    with create_span(
        "checkout.validate", {"validation.step": "checkout_form"}, tracer=tracer
    ) as span:
        if is_demo_active("slow-checkout", demo):
            scenario = get_demo_config("slow-checkout")
            span.set_attribute("demo.scenario", "slow-checkout")
            span.add_event("simulating_slow_validation")
            log.warning("demo_slow_validation", demo_scenario="slow-checkout")
            demo_delay(scenario.delay_ms if scenario and scenario.delay_ms else 3000)
            span.add_event("slow_validation_completed")

        errors: dict[str, str] = {}
        results: list[str] = []

        if not form.first_name.strip():
            errors["firstName"] = "First name is required"
            results.append("firstName_missing")
        if not form.last_name.strip():
            errors["lastName"] = "Last name is required"
            results.append("lastName_missing")
        if not validate_email(form.email):
            errors["email"] = "Please enter a valid email"
            results.append("email_invalid")
        if not validate_phone(form.phone):
            errors["phone"] = "Please enter a valid 10-digit phone number"
            results.append("phone_invalid")
        if not form.address.strip():
            errors["address"] = "Address is required"
            results.append("address_missing")
        if not form.city.strip():
            errors["city"] = "City is required"
            results.append("city_missing")
        if not form.state.strip():
            errors["state"] = "State is required"
            results.append("state_missing")
        if not validate_zip_code(form.zip_code):
            errors["zipCode"] = "Please enter a valid ZIP code"
            results.append("zipCode_invalid")

        span.set_attribute("validation.errorCount", len(errors))
        span.set_attribute("validation.passed", not errors)

        if errors:
            joined = ", ".join(results)
            span.set_attribute("validation.errors", joined)
            span.add_event(
                "validation_failed",
                {"error.count": len(errors), "error.fields": joined},
            )
            log.warning("checkout_validation_failed", error_count=len(errors), fields=joined)
        else:
            span.add_event("validation_passed")
            log.info("checkout_validation_passed")

        return errors


def submit_checkout(
    form: CheckoutForm,
    started_at: float | None = None,
    demo: str | None = None,
    rng: random.Random | None = None,
) -> ShippingAddress:
    """Submit the shipping form and move on to payment.

    Args:
        form: Submitted form
        started_at: ``time.perf_counter()`` when checkout was opened
        demo: Active demo scenario, defaults to the configured one
        rng: Random source for the ``error`` scenario

    Returns:
        The shipping address to send with the order

    Raises:
        CheckoutValidationError: If the form has field errors
        CheckoutPaymentError: If the ``error`` scenario fires
    """
    with create_span(
        "checkout.submit",
        {"checkout.step": "information", "form.country": form.country},
        tracer=tracer,
    ) as span:
        span.add_event("submit_button_clicked")

        errors = validate_checkout(form, demo)
        if errors:
            span.set_attribute("submission.result", "validation_failed")
            span.add_event("submission_blocked_by_validation")
            business_metrics.checkout_completed.add(
                0, {"result": "validation_failed", "error.count": str(len(errors))}
            )
            mark_error(span, "Validation failed")
            log.error(
                "checkout_submission_failed",
                error_count=len(errors),
                submission_result="validation_failed",
            )
            raise CheckoutValidationError(errors)

        span.add_event("checkout_data_saved")

        if is_demo_active("error", demo):
            span.set_attribute("demo.scenario", "error")
            scenario = get_demo_config("error")
            error_rate = scenario.error_rate if scenario and scenario.error_rate else 0.3
            if should_simulate_error(error_rate, rng):
                error_id = generate_error_id(rng)
                span.set_attribute("error", True)
                span.set_attribute("error.id", error_id)
                span.set_attribute("error.type", "payment_processing_failed")
                mark_error(span, "Payment processing failed")
                log.error(
                    "demo_payment_failed",
                    demo_scenario="error",
                    error_id=error_id,
                    error_code="PAYMENT_DECLINED",
                )
                raise CheckoutPaymentError(error_id)
            log.info("demo_payment_succeeded", demo_scenario="error")

        duration_ms = (time.perf_counter() - started_at) * 1000 if started_at else 0.0
        business_metrics.checkout_duration.record(
            duration_ms, {"checkout.step": "information", "result": "success"}
        )

        span.set_attribute("submission.result", "success")
        span.set_attribute("navigation.target", PAYMENT_ROUTE)
        span.set_attribute("checkout.duration_ms", duration_ms)
        span.add_event("navigating_to_payment")

        business_metrics.checkout_completed.add(
            1, {"checkout.step": "information", "navigation.target": "payment"}
        )
        log.info("checkout_submitted", checkout_duration_ms=round(duration_ms, 2))
        return form.to_shipping_address()


def validate_payment(details: PaymentDetails) -> dict[str, str]:
    """Validate card details; cash on delivery needs none."""
    if details.payment_method is PaymentMethod.COD:
        return {}

    errors: dict[str, str] = {}
    if not details.card_name.strip():
        errors["cardName"] = "Cardholder name is required"
    if not validate_card_number(details.card_number):
        errors["cardNumber"] = "Please enter a valid 16-digit card number"
    if not validate_expiry_date(details.expiry_date):
        errors["expiryDate"] = "Please enter a valid expiry date (MM/YY)"
    if not validate_cvv(details.cvv):
        errors["cvv"] = "Please enter a valid CVV"
    return errors
