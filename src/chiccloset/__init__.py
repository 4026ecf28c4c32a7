"""ChicCloset fashion storefront API with distributed tracing."""

__version__ = "1.0.0"
