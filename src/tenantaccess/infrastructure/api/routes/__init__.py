"""API Routes for TenantAccess."""

from .accounts_router import router as accounts_router
from .catalog_router import router as catalog_router
from .roles_router import router as roles_router

__all__ = [
    "accounts_router",
    "catalog_router",
    "roles_router",
]
