"""Application-wide constants.

Simulated latencies are in milliseconds and are scaled by
``settings.latency_scale`` before being applied.
"""

# Simulated database latencies
USERS_QUERY_MS = 30
USER_QUERY_MS = 30
PRODUCTS_QUERY_MS = 20
PRODUCT_BY_ID_QUERY_MS = 25
INVENTORY_QUERY_MS = 40
ORDER_QUERY_MS = 25
ORDERS_QUERY_MS = 30
INSERT_ORDER_MS = 50
DEFAULT_QUERY_MS = 50

# Simulated payment gateway latency
PAYMENT_PROCESSING_MS = 100

# Batch span processor tuning
SPAN_MAX_QUEUE_SIZE = 2048
SPAN_SCHEDULE_DELAY_MS = 5000
SPAN_EXPORT_TIMEOUT_MS = 30000
SPAN_MAX_EXPORT_BATCH_SIZE = 512

# Paths that are never traced or request-logged
UNTRACED_PATHS = ["/health", "/docs", "/redoc", "/openapi.json"]

# Trace context headers (W3C)
TRACEPARENT_HEADER = "traceparent"
TRACESTATE_HEADER = "tracestate"
REQUEST_ID_HEADER = "X-Request-ID"

# Catalogue
ALL_CATEGORIES = "All"

# Transaction IDs
TRANSACTION_SUFFIX_LENGTH = 9
