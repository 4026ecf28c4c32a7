"""Shopping cart with traced mutations.

Every mutation runs in a ``cart.*`` span on the storefront tracer,
updates the cart business metrics and writes a log line carrying the
trace ID. Reads (``total``, ``count``) are not traced.
"""

import structlog

from chiccloset.core.database import Product
from chiccloset.core.observability import business_metrics, create_span
from storefront.formatters import calculate_total
from storefront.telemetry import tracer


log = structlog.get_logger()


class CartItem(Product):
    """A product in the cart with its quantity."""

    quantity: int = 1

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(**product.model_dump(), quantity=quantity)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class Cart:
    """In-memory cart for one shopping session."""

    def __init__(self) -> None:
        self.items: list[CartItem] = []

    def __len__(self) -> int:
        return len(self.items)

    def get(self, product_id: int) -> CartItem | None:
        return next((item for item in self.items if item.id == product_id), None)

    def add_item(self, product: Product) -> CartItem:
        """Add one unit of ``product``, incrementing an existing line."""
        with create_span(
            "cart.addItem",
            {
                "product.id": product.id,
                "product.name": product.name,
                "product.price": product.price,
                "product.category": product.category,
            },
            tracer=tracer,
        ) as span:
            try:
                existing = self.get(product.id)
                if existing:
                    previous = existing.quantity
                    existing.quantity += 1
                    item = existing
                    action_type = "quantity_increased"
                    span.set_attribute("cart.action", "increment")
                    span.set_attribute("cart.previousQuantity", previous)
                    span.set_attribute("cart.newQuantity", existing.quantity)
                else:
                    item = CartItem.from_product(product)
                    self.items.append(item)
                    action_type = "new_item"
                    span.set_attribute("cart.action", "add_new")

                span.add_event(
                    "item_added_to_cart",
                    {
                        "product.id": product.id,
                        "cart.size": len(self.items),
                        "action.type": action_type,
                    },
                )
                business_metrics.cart_additions.add(
                    1, {"product.category": product.category, "action": action_type}
                )
                business_metrics.revenue.add(
                    product.price,
                    {"product.category": product.category, "stage": "cart_addition"},
                )
                log.info(
                    "cart_item_added",
                    product_id=product.id,
                    product_name=product.name,
                    price=product.price,
                    quantity=item.quantity,
                )
                return item
            except Exception as exc:
                span.add_event(
                    "cart_operation_failed",
                    {"error.type": type(exc).__name__, "error.message": str(exc)},
                )
                log.error("cart_add_failed", product_id=product.id, error=str(exc))
                raise

    def remove_item(self, product_id: int) -> CartItem | None:
        """Drop the line for ``product_id``. Missing items are a no-op."""
        with create_span("cart.removeItem", {"product.id": product_id}, tracer=tracer) as span:
            try:
                item = self.get(product_id)
                if item:
                    span.set_attribute("product.name", item.name)
                    span.set_attribute("cart.removedQuantity", item.quantity)
                    span.set_attribute("cart.valueRemoved", item.subtotal)
                    self.items.remove(item)

                span.add_event("item_removed_from_cart", {"product.id": product_id})
                business_metrics.cart_removals.add(
                    1, {"product.category": item.category if item else "unknown"}
                )
                log.info(
                    "cart_item_removed",
                    product_id=product_id,
                    quantity_removed=item.quantity if item else 0,
                )
                return item
            except Exception as exc:
                log.error("cart_remove_failed", product_id=product_id, error=str(exc))
                raise

    def update_quantity(self, product_id: int, quantity: int) -> CartItem | None:
        """Set the quantity of a line; zero or less removes it."""
        with create_span(
            "cart.updateQuantity",
            {"product.id": product_id, "cart.newQuantity": quantity},
            tracer=tracer,
        ) as span:
            try:
                remove = quantity <= 0
                item = None if remove else self.get(product_id)
                if remove:
                    span.add_event("quantity_zero_removing_item")
                elif item is None:
                    span.add_event("item_not_found", {"product.id": product_id})
                    log.warning("cart_item_not_found", product_id=product_id)
                else:
                    previous = item.quantity
                    delta = quantity - previous
                    span.set_attribute("product.name", item.name)
                    span.set_attribute("cart.previousQuantity", previous)
                    span.set_attribute("cart.quantityDelta", delta)
                    item.quantity = quantity

                    span.add_event(
                        "quantity_updated",
                        {"product.id": product_id, "new.quantity": quantity},
                    )
                    attributes = {"product.category": item.category, "action": "quantity_update"}
                    if delta > 0:
                        business_metrics.cart_additions.add(delta, attributes)
                    elif delta < 0:
                        business_metrics.cart_removals.add(-delta, attributes)
                    log.info(
                        "cart_quantity_updated",
                        product_id=product_id,
                        new_quantity=quantity,
                        previous_quantity=previous,
                    )
            except Exception as exc:
                log.error("cart_update_failed", product_id=product_id, error=str(exc))
                raise

        # Removal gets its own span, a sibling of the update span
        if remove:
            self.remove_item(product_id)
            return None
        return item

    def clear(self) -> None:
        """Empty the cart; counted as an abandonment."""
        with create_span("cart.clear", tracer=tracer) as span:
            try:
                item_count = len(self.items)
                total_value = self.total()
                span.set_attribute("cart.itemCount", item_count)
                span.set_attribute("cart.totalQuantity", self.count())
                span.set_attribute("cart.totalValue", total_value)

                self.items.clear()

                span.add_event(
                    "cart_cleared",
                    {"items.removed": item_count, "total.value": total_value},
                )
                business_metrics.cart_abandonment.add(1)
                log.info("cart_cleared", items_removed=item_count, total_value=total_value)
            except Exception as exc:
                log.error("cart_clear_failed", error=str(exc))
                raise

    def total(self) -> float:
        return calculate_total(self.items)

    def count(self) -> int:
        return sum(item.quantity for item in self.items)
