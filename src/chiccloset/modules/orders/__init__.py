"""Orders module: order placement, payment and order lookup."""

from fastapi import APIRouter


router = APIRouter(prefix="/orders", tags=["orders"])

# Import routes to register them (must be after router is defined)
from chiccloset.modules.orders import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "orders",
    "version": "1.0.0",
    "description": "Orders and mock payment gateway",
    "dependencies": ["products"],
}
