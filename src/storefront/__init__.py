"""ShopHub storefront: the traced client side of ChicCloset."""

__version__ = "1.0.0"
