"""Mock payment gateway.

Charges are approved at random with ``success_rate`` probability after a
simulated gateway round-trip. The random source is injectable so tests
can force approvals or declines.
"""

import random
import string
import time
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from chiccloset.config import settings
from chiccloset.core.constants import PAYMENT_PROCESSING_MS, TRANSACTION_SUFFIX_LENGTH
from chiccloset.core.database import PaymentMethod
from chiccloset.core.observability import business_metrics, create_span, simulate_latency
from chiccloset.core.observability.spans import mark_error


_BASE36 = string.digits + string.ascii_lowercase


@dataclass
class PaymentResult:
    """Outcome of a charge attempt."""

    success: bool
    transaction_id: str | None = None
    error: str | None = None


class PaymentGateway:
    """Stand-in for a card processor."""

    def __init__(
        self,
        success_rate: float = 0.95,
        gateway: str = "stripe",
        rng: random.Random | None = None,
    ) -> None:
        self.success_rate = success_rate
        self.gateway = gateway
        self.rng = rng or random.Random()

    def new_transaction_id(self) -> str:
        """Return ``txn_<epoch ms>_<9 base36 chars>``."""
        suffix = "".join(self.rng.choice(_BASE36) for _ in range(TRANSACTION_SUFFIX_LENGTH))
        return f"txn_{int(time.time() * 1000)}_{suffix}"

    def process_payment(self, amount: float, method: PaymentMethod) -> PaymentResult:
        """Charge ``amount`` using ``method``.

        Args:
            amount: Order total in USD
            method: Payment method chosen at checkout

        Returns:
            PaymentResult with a transaction ID when approved
        """
        with create_span(
            "payment.process",
            {
                "payment.amount": amount,
                "payment.method": method.value,
                "payment.gateway": self.gateway,
            },
        ) as span:
            span.add_event("payment_initiated")

            simulate_latency(PAYMENT_PROCESSING_MS)

            if self.rng.random() < self.success_rate:
                transaction_id = self.new_transaction_id()
                span.set_attribute("payment.transaction_id", transaction_id)
                span.add_event("payment_successful", {"transaction_id": transaction_id})
                business_metrics.payments_processed.add(
                    1, {"payment.status": "success", "payment.method": method.value}
                )
                return PaymentResult(success=True, transaction_id=transaction_id)

            span.add_event("payment_failed")
            mark_error(span, "Payment declined")
            business_metrics.payments_processed.add(
                1, {"payment.status": "declined", "payment.method": method.value}
            )
            return PaymentResult(success=False, error="Payment declined by gateway")


def create_payment_gateway() -> PaymentGateway:
    """Build the gateway from settings."""
    return PaymentGateway(
        success_rate=settings.payment_success_rate,
        gateway=settings.payment_gateway,
    )


def get_payment_gateway(request: Request) -> PaymentGateway:
    """FastAPI dependency returning the app's payment gateway."""
    return request.app.state.payment_gateway


Gateway = Annotated[PaymentGateway, Depends(get_payment_gateway)]
