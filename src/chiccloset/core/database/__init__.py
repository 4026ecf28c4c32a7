"""Database layer - in-memory records, seed data and simulated queries."""

from chiccloset.core.database.models import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    ShippingAddress,
    User,
)
from chiccloset.core.database.session import (
    InMemoryDatabase,
    get_db,
    simulate_db_query,
)


__all__ = [
    "InMemoryDatabase",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "Product",
    "ShippingAddress",
    "User",
    "get_db",
    "simulate_db_query",
]
