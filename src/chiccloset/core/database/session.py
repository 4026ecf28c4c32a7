"""In-memory database and the simulated query span.

There is no real database behind the storefront: users, products and
orders live in Python lists seeded at startup. Every lookup still goes
through ``simulate_db_query`` so traces show a ``database.*`` child span
with the usual ``db.*`` attributes and a realistic duration.
"""

import threading
from datetime import datetime, timezone

from fastapi import Request

from chiccloset.config import settings
from chiccloset.core.constants import DEFAULT_QUERY_MS
from chiccloset.core.database.models import Order, Product, User
from chiccloset.core.database.seed import seed_products, seed_users
from chiccloset.core.observability.spans import create_span, simulate_latency


def _db_operation(query_name: str) -> str:
    return "INSERT" if query_name.startswith("insert.") else "SELECT"


def _db_table(query_name: str) -> str:
    parts = query_name.split(".", 1)
    return parts[1] if len(parts) > 1 and parts[1] else "unknown"


def simulate_db_query(query_name: str, duration_ms: float = DEFAULT_QUERY_MS) -> bool:
    """Run a fake database query inside a ``database.<query_name>`` span.

    Args:
        query_name: ``<kind>.<table>``, e.g. ``query.products`` or ``insert.order``
        duration_ms: Unscaled query latency in milliseconds

    Returns:
        True once the query "completed"
    """
    with create_span(
        f"database.{query_name}",
        {
            "db.system": settings.db_system,
            "db.operation": _db_operation(query_name),
            "db.name": settings.db_name,
            "db.table": _db_table(query_name),
        },
    ) as span:
        simulate_latency(duration_ms)
        span.add_event("query_executed", {"query.duration_ms": duration_ms})
        return True


class InMemoryDatabase:
    """Process-local store for users, products and orders.

    Order IDs are sequential (``len(orders) + 1``); inserts take a lock
    because sync route handlers run on a thread pool.
    """

    def __init__(
        self,
        users: list[User] | None = None,
        products: list[Product] | None = None,
    ) -> None:
        self.users: list[User] = users if users is not None else seed_users()
        self.products: list[Product] = (
            products if products is not None else seed_products()
        )
        self.orders: list[Order] = []
        self._lock = threading.Lock()

    def find_user(self, email: str, password: str) -> User | None:
        """Return the user matching both email and password."""
        return next(
            (u for u in self.users if u.email == email and u.password == password),
            None,
        )

    def get_product(self, product_id: int) -> Product | None:
        return next((p for p in self.products if p.id == product_id), None)

    def get_order(self, order_id: int) -> Order | None:
        return next((o for o in self.orders if o.id == order_id), None)

    def insert_order(self, **fields: object) -> Order:
        """Create and store an order, assigning its ID and timestamp."""
        with self._lock:
            order = Order(
                id=len(self.orders) + 1,
                created_at=datetime.now(timezone.utc).isoformat(),
                **fields,  # type: ignore[arg-type]
            )
            self.orders.append(order)
        return order


def get_db(request: Request) -> InMemoryDatabase:
    """FastAPI dependency returning the app's database."""
    return request.app.state.db
