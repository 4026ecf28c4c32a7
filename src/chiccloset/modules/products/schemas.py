"""Pydantic schemas for the product catalogue."""

from enum import Enum

from chiccloset.core.database import Product
from chiccloset.core.schemas import CamelModel


class SortOption(str, Enum):
    """Catalogue orderings offered by the listing page."""

    PRICE_LOW_HIGH = "price_asc"
    PRICE_HIGH_LOW = "price_desc"
    NAME_A_Z = "name_asc"
    RATING = "rating_desc"


class ProductListResponse(CamelModel):
    """Schema for listing products."""

    success: bool = True
    products: list[Product]


class ProductResponse(CamelModel):
    """Schema for a single product."""

    success: bool = True
    product: Product
