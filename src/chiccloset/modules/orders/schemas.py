"""Pydantic schemas for orders."""

from pydantic import Field

from chiccloset.core.database import Order, OrderItem, PaymentMethod, ShippingAddress
from chiccloset.core.schemas import CamelModel


class OrderCreate(CamelModel):
    """Schema for placing an order."""

    user_id: int
    items: list[OrderItem] = Field(..., min_length=1)
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod


class OrderCreatedResponse(CamelModel):
    """Schema returned after an order is placed."""

    success: bool = True
    order: Order
    message: str = "Order created successfully"


class OrderResponse(CamelModel):
    """Schema for a single order."""

    success: bool = True
    order: Order


class OrderListResponse(CamelModel):
    """Schema for listing orders."""

    success: bool = True
    orders: list[Order]
