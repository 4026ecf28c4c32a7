"""Records held by the in-memory database."""

from enum import Enum

from pydantic import Field

from chiccloset.core.schemas import CamelModel


class OrderStatus(str, Enum):
    """Lifecycle states of an order."""

    PENDING = "pending"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """Payment methods offered at checkout."""

    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    COD = "cash_on_delivery"


class User(CamelModel):
    """A registered shopper. ``password`` never leaves the API."""

    id: int
    email: str
    name: str
    password: str


class Product(CamelModel):
    """A catalogue product with its stock level."""

    id: int
    name: str
    price: float
    stock: int
    category: str
    image: str = ""
    description: str = ""
    rating: float = 0.0
    reviews: int = 0
    in_stock: bool = True


class OrderItem(CamelModel):
    """One order line."""

    product_id: int
    quantity: int = Field(..., ge=1)


class ShippingAddress(CamelModel):
    """Delivery details collected on the checkout page."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "USA"


class Order(CamelModel):
    """A confirmed order."""

    id: int
    user_id: int
    items: list[OrderItem]
    total: float
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod
    transaction_id: str
    status: OrderStatus = OrderStatus.CONFIRMED
    created_at: str
