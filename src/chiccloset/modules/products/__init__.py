"""Products module: catalogue browsing and inventory checks."""

from fastapi import APIRouter


router = APIRouter(prefix="/products", tags=["products"])

# Import routes to register them (must be after router is defined)
from chiccloset.modules.products import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "products",
    "version": "1.0.0",
    "description": "Product catalogue and inventory",
    "dependencies": [],
}
