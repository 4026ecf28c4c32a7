"""Product catalogue API routes."""

from fastapi import Query

from chiccloset.core.errors import NotFoundError
from chiccloset.core.observability import create_span
from chiccloset.modules.products import router
from chiccloset.modules.products.schemas import (
    ProductListResponse,
    ProductResponse,
    SortOption,
)
from chiccloset.modules.products.services import ProductSvc


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="List the catalogue, optionally filtered by category and sorted.",
)
def list_products(
    service: ProductSvc,
    category: str | None = Query(None, description="Category name, or 'All'"),
    sort: SortOption | None = Query(None, description="Ordering"),
) -> ProductListResponse:
    """List products."""
    with create_span(
        "api.products.list",
        {"http.method": "GET", "http.route": "/api/products"},
    ) as span:
        if category:
            span.set_attribute("filter.category", category)
        if sort:
            span.set_attribute("sort.option", sort.value)

        products = service.list_products(category, sort)

        span.set_attribute("products.count", len(products))
        span.add_event("products_fetched", {"count": len(products)})
        return ProductListResponse(products=products)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get a single catalogue product.",
)
def get_product(product_id: int, service: ProductSvc) -> ProductResponse:
    """Get a product."""
    with create_span("api.products.get", {"product.id": product_id}) as span:
        try:
            product = service.get_product(product_id)
        except NotFoundError:
            span.add_event("product_not_found")
            raise

        span.add_event("product_found")
        return ProductResponse(product=product)
