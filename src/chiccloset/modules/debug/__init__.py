"""Debug module: verify trace context propagation from the storefront."""

from fastapi import APIRouter


router = APIRouter(prefix="/debug", tags=["debug"])

# Import routes to register them (must be after router is defined)
from chiccloset.modules.debug import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "debug",
    "version": "1.0.0",
    "description": "Trace propagation diagnostics",
    "dependencies": [],
}
