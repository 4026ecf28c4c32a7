"""Core infrastructure: errors, logging, observability and the mock database."""
