"""Auth module: credential login for the storefront."""

from fastapi import APIRouter


router = APIRouter(prefix="/auth", tags=["auth"])

# Import routes to register them (must be after router is defined)
from chiccloset.modules.auth import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "auth",
    "version": "1.0.0",
    "description": "Email/password login",
    "dependencies": [],
}
