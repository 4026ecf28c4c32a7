"""Product service: catalogue queries and inventory checks."""

from typing import Annotated

from fastapi import Depends

from chiccloset.api.dependencies import Database
from chiccloset.core.constants import (
    ALL_CATEGORIES,
    INVENTORY_QUERY_MS,
    PRODUCT_BY_ID_QUERY_MS,
    PRODUCTS_QUERY_MS,
)
from chiccloset.core.database import Product, simulate_db_query
from chiccloset.core.errors import NotFoundError
from chiccloset.core.observability import create_span
from chiccloset.core.observability.spans import mark_error
from chiccloset.modules.products.schemas import SortOption


_SORT_KEYS = {
    SortOption.PRICE_LOW_HIGH: (lambda p: p.price, False),
    SortOption.PRICE_HIGH_LOW: (lambda p: p.price, True),
    SortOption.NAME_A_Z: (lambda p: p.name.lower(), False),
    SortOption.RATING: (lambda p: p.rating, True),
}


class ProductService:
    """Service for catalogue browsing and stock lookups."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def list_products(
        self,
        category: str | None = None,
        sort: SortOption | None = None,
    ) -> list[Product]:
        """List products, optionally filtered by category and sorted.

        Args:
            category: Exact category name; ``All`` or None means no filter
            sort: Optional ordering

        Returns:
            Matching products
        """
        simulate_db_query("query.products", PRODUCTS_QUERY_MS)

        products = self.db.products
        if category and category != ALL_CATEGORIES:
            products = [p for p in products if p.category == category]

        if sort is not None:
            key, reverse = _SORT_KEYS[sort]
            products = sorted(products, key=key, reverse=reverse)

        return list(products)

    def get_product(self, product_id: int) -> Product:
        """Get a product by ID.

        Raises:
            NotFoundError: If the product does not exist
        """
        simulate_db_query("query.product_by_id", PRODUCT_BY_ID_QUERY_MS)

        product = self.db.get_product(product_id)
        if product is None:
            raise NotFoundError(
                "Product not found",
                resource="product",
                resource_id=str(product_id),
            )
        return product

    def check_inventory(
        self, product_id: int, quantity: int
    ) -> tuple[bool, Product | None]:
        """Check whether ``quantity`` units of a product are in stock.

        Args:
            product_id: Product to check
            quantity: Units requested

        Returns:
            ``(available, product)``; product is None for unknown IDs
        """
        with create_span(
            "inventory.check",
            {"product.id": product_id, "quantity.requested": quantity},
        ) as span:
            simulate_db_query("query.inventory", INVENTORY_QUERY_MS)

            product = self.db.get_product(product_id)

            if product is not None and product.stock >= quantity:
                span.set_attribute("inventory.available", True)
                span.set_attribute("inventory.stock", product.stock)
                span.add_event(
                    "inventory_sufficient",
                    {"available_stock": product.stock, "requested_quantity": quantity},
                )
                return True, product

            span.set_attribute("inventory.available", False)
            span.add_event(
                "inventory_insufficient",
                {
                    "available_stock": product.stock if product else 0,
                    "requested_quantity": quantity,
                },
            )
            mark_error(span, "Insufficient stock")
            return False, product


ProductSvc = Annotated[ProductService, Depends(ProductService)]
