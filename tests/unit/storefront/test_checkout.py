"""Unit tests for checkout and payment forms."""

import random
import time

import pytest
from opentelemetry.trace import StatusCode

from chiccloset.core.database import PaymentMethod
from storefront.cart import Cart
from storefront.checkout import (
    CheckoutForm,
    CheckoutPaymentError,
    CheckoutValidationError,
    OrderSummary,
    PaymentDetails,
    submit_checkout,
    validate_checkout,
    validate_payment,
)
from tests.factories.product import ProductFactory


@pytest.fixture
def form() -> CheckoutForm:
    return CheckoutForm(
        first_name="Jane",
        last_name="Smith",
        email="jane@example.com",
        phone="555-123-4567",
        address="1 Fashion Ave",
        city="New York",
        state="NY",
        zip_code="10001",
    )


class AlwaysFail(random.Random):
    def random(self) -> float:
        return 0.0


class NeverFail(random.Random):
    def random(self) -> float:
        return 0.99


class TestValidateCheckout:
    """Tests for validate_checkout."""

    def test_valid_form(self, form: CheckoutForm, spans):
        assert validate_checkout(form, demo="") == {}

        span = spans.one("checkout.validate")
        assert span.attributes["validation.step"] == "checkout_form"
        assert span.attributes["validation.errorCount"] == 0
        assert span.attributes["validation.passed"] is True
        assert [e.name for e in span.events] == ["validation_passed"]

    def test_empty_form_lists_errors_in_order(self, spans):
        errors = validate_checkout(CheckoutForm(), demo="")

        assert list(errors) == [
            "firstName",
            "lastName",
            "email",
            "phone",
            "address",
            "city",
            "state",
            "zipCode",
        ]
        span = spans.one("checkout.validate")
        assert span.attributes["validation.errorCount"] == 8
        assert span.attributes["validation.passed"] is False
        assert span.attributes["validation.errors"].startswith("firstName_missing, lastName_missing")
        assert span.events[0].name == "validation_failed"

    def test_whitespace_names_are_missing(self, form: CheckoutForm):
        form.first_name = "   "

        assert validate_checkout(form, demo="") == {"firstName": "First name is required"}

    def test_slow_checkout_demo(self, form: CheckoutForm, spans, monkeypatch):
        delays: list[float] = []
        monkeypatch.setattr("storefront.checkout.demo_delay", delays.append)

        validate_checkout(form, demo="slow-checkout")

        assert delays == [3000]
        span = spans.one("checkout.validate")
        assert [e.name for e in span.events][:2] == [
            "simulating_slow_validation",
            "slow_validation_completed",
        ]


class TestSubmitCheckout:
    """Tests for submit_checkout."""

    def test_success(self, form: CheckoutForm, spans, metric_values):
        before = metric_values.total("checkout.completed")
        durations_before = metric_values.count("checkout.duration")

        address = submit_checkout(form, started_at=time.perf_counter(), demo="")

        assert address.first_name == "Jane"
        assert address.zip_code == "10001"
        span = spans.one("checkout.submit")
        assert span.attributes["checkout.step"] == "information"
        assert span.attributes["form.country"] == "USA"
        assert span.attributes["submission.result"] == "success"
        assert span.attributes["navigation.target"] == "/payment"
        assert span.status.status_code is StatusCode.OK
        assert spans.one("checkout.validate").parent.span_id == span.context.span_id
        assert metric_values.total("checkout.completed") == before + 1
        assert metric_values.count("checkout.duration") == durations_before + 1

    def test_validation_failure(self, spans):
        with pytest.raises(CheckoutValidationError) as exc_info:
            submit_checkout(CheckoutForm(first_name="Jane"), demo="")

        assert "firstName" not in exc_info.value.errors
        assert "lastName" in exc_info.value.errors
        span = spans.one("checkout.submit")
        assert span.attributes["submission.result"] == "validation_failed"
        assert span.status.status_code is StatusCode.ERROR
        assert span.status.description == "Validation failed"

    def test_error_demo_declines(self, form: CheckoutForm, spans):
        with pytest.raises(CheckoutPaymentError) as exc_info:
            submit_checkout(form, demo="error", rng=AlwaysFail())

        assert exc_info.value.error_id.startswith("ERR-")
        span = spans.one("checkout.submit")
        assert span.attributes["error"] is True
        assert span.attributes["error.id"] == exc_info.value.error_id
        assert span.attributes["error.type"] == "payment_processing_failed"
        assert span.status.description == "Payment processing failed"

    def test_error_demo_can_pass(self, form: CheckoutForm, spans):
        submit_checkout(form, demo="error", rng=NeverFail())

        span = spans.one("checkout.submit")
        assert span.attributes["demo.scenario"] == "error"
        assert span.attributes["submission.result"] == "success"


class TestValidatePayment:
    """Tests for validate_payment."""

    def test_cash_on_delivery_needs_no_card(self):
        assert validate_payment(PaymentDetails(payment_method=PaymentMethod.COD)) == {}

    def test_valid_card(self):
        details = PaymentDetails(
            card_name="Jane Smith",
            card_number="4242 4242 4242 4242",
            expiry_date="12/30",
            cvv="123",
        )

        assert validate_payment(details) == {}

    def test_missing_card(self):
        errors = validate_payment(PaymentDetails())

        assert set(errors) == {"cardName", "cardNumber", "expiryDate", "cvv"}


class TestOrderSummary:
    """Tests for OrderSummary.from_cart."""

    def test_small_order_pays_shipping(self):
        cart = Cart()
        cart.add_item(ProductFactory.build(id=1, price=50.0))

        summary = OrderSummary.from_cart(cart)

        assert summary.subtotal == 50.0
        assert summary.shipping == 10.0
        assert summary.tax == 5.0
        assert summary.total == 65.0

    def test_large_order_ships_free(self):
        cart = Cart()
        cart.add_item(ProductFactory.build(id=1, price=89.99))
        cart.add_item(ProductFactory.build(id=3, price=79.99))

        summary = OrderSummary.from_cart(cart)

        assert summary.shipping == 0
        assert summary.tax == 17.0
        assert summary.total == 186.98
