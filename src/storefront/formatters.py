"""Display formatting and cart arithmetic."""

from collections.abc import Iterable
from datetime import date, datetime
from typing import Protocol


FREE_SHIPPING_THRESHOLD = 100.0
FLAT_SHIPPING = 10.0
DEFAULT_TAX_RATE = 0.1


class LineItem(Protocol):
    price: float
    quantity: int


def format_currency(amount: float) -> str:
    """Format USD the way the storefront displays prices: ``$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: str | date | datetime) -> str:
    """Format a date as ``January 5, 2025``.

    Strings are parsed as ISO 8601, which covers the API's ``createdAt``.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value:%B} {value.day}, {value.year}"


def calculate_total(items: Iterable[LineItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def calculate_tax(subtotal: float, tax_rate: float = DEFAULT_TAX_RATE) -> float:
    return subtotal * tax_rate


def calculate_shipping(subtotal: float) -> float:
    """Shipping is free for orders strictly over $100."""
    return 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
